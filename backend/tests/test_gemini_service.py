"""
NoteForge Backend: Gemini Gateway Unit Tests (Mocked)
=====================================================

What:  Tests for GeminiService with the Google Generative AI SDK patched out.
How:   Patches the genai module and the model to simulate success/failure.

What we test:
    ✅ Request shape and text extraction from the first candidate
    ✅ Empty candidate list yields ""
    ✅ Missing API key fails before any network call
    ✅ API errors and transport errors become UpstreamError (no retry)
    ✅ Health check never raises
    ❌ Real API calls
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from google.api_core import exceptions as google_exceptions

from noteforge.exceptions import ConfigError, UpstreamError
from noteforge.services.gemini_service import GeminiService, extract_text


def gemini_response(*texts):
    candidates = [
        SimpleNamespace(content=SimpleNamespace(parts=[SimpleNamespace(text=t)]))
        for t in texts
    ]
    return SimpleNamespace(candidates=candidates)


def make_service(api_key="test-key"):
    """GeminiService whose model is a mock; returns (service, model)."""
    with patch("noteforge.services.gemini_service.genai"):
        service = GeminiService(api_key=api_key, model_name="gemini-test")
    model = MagicMock()
    model.generate_content_async = AsyncMock()
    service.model = model
    return service, model


class TestExtractText:

    def test_first_candidate_first_part(self):
        assert extract_text(gemini_response("first", "second")) == "first"

    def test_missing_pieces_give_empty_string(self):
        assert extract_text(gemini_response()) == ""
        assert extract_text(SimpleNamespace()) == ""
        assert extract_text(SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[]))])) == ""


class TestGenerate:

    @pytest.mark.asyncio
    async def test_success_sends_single_user_turn(self):
        service, model = make_service()
        model.generate_content_async.return_value = gemini_response("A summary.")

        result = await service.generate("Summarize this")

        assert result == "A summary."
        model.generate_content_async.assert_awaited_once_with(
            [{"role": "user", "parts": [{"text": "Summarize this"}]}]
        )

    @pytest.mark.asyncio
    async def test_no_candidates_returns_empty_string(self):
        service, model = make_service()
        model.generate_content_async.return_value = gemini_response()

        assert await service.generate("anything") == ""

    @pytest.mark.asyncio
    async def test_missing_key_raises_config_error(self):
        service, model = make_service(api_key="")

        with pytest.raises(ConfigError):
            await service.generate("anything")

        model.generate_content_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_api_error_carries_status(self):
        service, model = make_service()
        model.generate_content_async.side_effect = google_exceptions.InternalServerError("overloaded")

        with pytest.raises(UpstreamError) as exc_info:
            await service.generate("anything")

        assert exc_info.value.status_code == 500
        assert "500" in exc_info.value.message
        assert model.generate_content_async.await_count == 1

    @pytest.mark.asyncio
    async def test_auth_failure(self):
        service, model = make_service()
        model.generate_content_async.side_effect = google_exceptions.PermissionDenied("bad key")

        with pytest.raises(UpstreamError) as exc_info:
            await service.generate("anything")

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_transport_error(self):
        service, model = make_service()
        model.generate_content_async.side_effect = ConnectionError("network down")

        with pytest.raises(UpstreamError) as exc_info:
            await service.generate("anything")

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestHealthCheck:

    @pytest.mark.asyncio
    async def test_reachable(self):
        service, _ = make_service()
        with patch("noteforge.services.gemini_service.genai") as mock_genai:
            mock_genai.list_models.return_value = [SimpleNamespace(name="models/gemini-test")]
            assert await service.health_check() is True

    @pytest.mark.asyncio
    async def test_unreachable(self):
        service, _ = make_service()
        with patch("noteforge.services.gemini_service.genai") as mock_genai:
            mock_genai.list_models.side_effect = RuntimeError("no network")
            assert await service.health_check() is False

    @pytest.mark.asyncio
    async def test_without_key(self):
        service, _ = make_service(api_key="")
        with patch("noteforge.services.gemini_service.genai") as mock_genai:
            assert await service.health_check() is False
            mock_genai.list_models.assert_not_called()
