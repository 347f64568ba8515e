"""Prompt templates and result post-processing."""

from noteforge.schemas.note import LLMTask
from noteforge.services.prompts import build_prompt, clean_title, postprocess


class TestBuildPrompt:

    def test_summarize(self):
        assert build_prompt(LLMTask.SUMMARIZE, "abc") == (
            'Summarize the following text concisely: "abc"'
        )

    def test_generate_title(self):
        assert build_prompt(LLMTask.GENERATE_TITLE, "abc") == (
            'Generate a short, relevant title (less than 5 words) for this text: "abc"'
        )

    def test_elaborate(self):
        assert build_prompt(LLMTask.ELABORATE, "abc") == (
            'Elaborate on the following idea and expand it into a full, '
            'well-written paragraph: "abc"'
        )

    def test_braces_in_subject_are_kept(self):
        assert build_prompt(LLMTask.SUMMARIZE, "{x} and {subject}").endswith('"{x} and {subject}"')


class TestPostprocess:

    def test_clean_title_removes_every_quote(self):
        assert clean_title('  "Say "hi" now"\n') == "Say hi now"

    def test_only_titles_are_cleaned(self):
        assert postprocess(LLMTask.SUMMARIZE, ' "kept" ') == ' "kept" '
        assert postprocess(LLMTask.GENERATE_TITLE, ' "cleaned" ') == "cleaned"
