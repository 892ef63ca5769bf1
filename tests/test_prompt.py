"""Tests for the optimization prompt template"""

import pytest

from core.prompt import PromptError, build_prompt

SECTIONS = ["Hook", "Title", "Metadata JSON"]


def test_prompt_is_deterministic():
    assert build_prompt("my script", SECTIONS) == build_prompt("my script", SECTIONS)


def test_prompt_lists_sections_in_order():
    prompt = build_prompt("my script", SECTIONS)
    assert "### Hook\n### Title\n### Metadata JSON" in prompt
    assert prompt.index("OUTPUT FORMAT") < prompt.index("### Hook")


def test_prompt_wraps_script_last():
    prompt = build_prompt("line one\nline {two}", SECTIONS)
    assert prompt.endswith("INPUT SCRIPT:\n<<<\nline one\nline {two}\n>>>")


def test_prompt_header_carries_locale_and_category():
    prompt = build_prompt("s", SECTIONS)
    assert prompt.startswith("You are a senior YouTube strategist for the US market.")
    assert "defaultLanguage='en', defaultAudioLanguage='en-US', categoryId='27'" in prompt
    assert "SEO Title (<=70 chars" in prompt


def test_prompt_uses_custom_codes():
    prompt = build_prompt("s", SECTIONS, default_language="de",
                          default_audio_language="de-DE", category_id="22", max_title_length=60)
    assert "defaultLanguage='de', defaultAudioLanguage='de-DE', categoryId='22'" in prompt
    assert "<=60 chars" in prompt


@pytest.mark.parametrize("script", ["", "   \n"])
def test_blank_script_is_rejected(script):
    with pytest.raises(PromptError):
        build_prompt(script, SECTIONS)


def test_no_sections_is_rejected():
    with pytest.raises(PromptError):
        build_prompt("s", [])
