"""
NoteForge Backend: Health Check Route
=====================================

What:  GET /health for container and load balancer probes.
How:   Runs SELECT 1 against the store and asks the LLM gateway whether the
       upstream is reachable.

Status levels:
    healthy:   database connected, LLM upstream available
    degraded:  database connected, LLM missing key or unreachable
    unhealthy: database unreachable
"""

import logging
import time

from fastapi import APIRouter
from sqlalchemy import text

from noteforge import __version__
from noteforge.database import engine
from noteforge.schemas.note import HealthResponse
from noteforge.services.ai_service import ai_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service health check",
)
async def health_check() -> HealthResponse:
    db_status = "connected"
    llm_status = "available"
    overall = "healthy"

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        db_status = "disconnected"
        overall = "unhealthy"
        logger.warning("Health check: database unreachable: %s", str(e))

    llm = ai_service.llm
    if not getattr(llm, "api_key", ""):
        llm_status = "not_configured"
    elif not await llm.health_check():
        llm_status = "unavailable"
    if llm_status != "available" and overall == "healthy":
        overall = "degraded"

    return HealthResponse(
        status=overall,
        version=__version__,
        database=db_status,
        llm=llm_status,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
