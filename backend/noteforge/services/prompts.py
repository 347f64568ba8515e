"""
Prompt templates for the three AI note actions.

Each template wraps the subject text in double quotes. Generated titles
are cleaned of every '"' character and surrounding whitespace.
"""

from noteforge.schemas.note import LLMTask

SUMMARIZE_TEMPLATE = 'Summarize the following text concisely: "{subject}"'
GENERATE_TITLE_TEMPLATE = (
    'Generate a short, relevant title (less than 5 words) for this text: "{subject}"'
)
ELABORATE_TEMPLATE = (
    'Elaborate on the following idea and expand it into a full, well-written paragraph: "{subject}"'
)

TEMPLATES = {
    LLMTask.SUMMARIZE: SUMMARIZE_TEMPLATE,
    LLMTask.GENERATE_TITLE: GENERATE_TITLE_TEMPLATE,
    LLMTask.ELABORATE: ELABORATE_TEMPLATE,
}


def build_prompt(task: LLMTask, subject: str) -> str:
    # str.replace, not str.format: subjects may contain braces
    return TEMPLATES[task].replace("{subject}", subject)


def clean_title(text: str) -> str:
    return text.replace('"', "").strip()


def postprocess(task: LLMTask, text: str) -> str:
    if task is LLMTask.GENERATE_TITLE:
        return clean_title(text)
    return text
