"""
Prompt Building Module

Single responsibility: video script → prompt text for the generation service
Deterministic: the same script and section list always produce the same prompt.
"""

from typing import Sequence

import structlog

# Configure structured logger
logger = structlog.get_logger(__name__)


class PromptError(Exception):
    """Custom exception for prompt construction failures"""
    pass


PROMPT_HEADER = """You are a senior YouTube strategist for the US market.

TASK: Transform the input video script into a COMPLETE YouTube package in **American English** for a US audience. Optimize for SEO, retention, clarity, and shareability.
AUDIENCE & TONE:
- Audience: infer precisely from the script; write with empathy and respect (no lecturing).
- Voice: punchy, clear, helpful peer.
GOALS:
- Choose ONE primary objective based on the script: [educate | entertain | persuade].
- Produce a 3-layer HOOK: Thumbnail text (3–5 words), SEO Title (<={max_title_length} chars, primary keyword near start), and first-3-second spoken hook.
STRUCTURE & CRAFT RULES:
- Intro: pain → promise.
- Body: 3–5 beats; each beat = story → insight → 1-sentence fix.
- Objection flip + implementation plan.
- Pattern interrupt cues every 20–30s.
- US English only.
SEO RULES:
- First 2 description lines must include primary keywords + a human hook.
- 12–20 tags mixing short & long-tail.
- Chapters must be timestamped (mm:ss) and match content order.
- Provide Metadata JSON with fields: title, description, tags (array), defaultLanguage='{default_language}', defaultAudioLanguage='{default_audio_language}', categoryId='{category_id}'."""

PROMPT_FORMAT = """
OUTPUT FORMAT (exactly these Markdown sections, in this order; each starts with "### "):
{section_headings}

INPUT SCRIPT:
<<<
{script}
>>>"""


def format_section_headings(required_sections: Sequence[str]) -> str:
    return "\n".join(f"### {name}" for name in required_sections)


def build_prompt(
    script: str,
    required_sections: Sequence[str],
    default_language: str = "en",
    default_audio_language: str = "en-US",
    category_id: str = "27",
    max_title_length: int = 70
) -> str:
    """Build the full optimization prompt around the user's script"""

    if not script or not script.strip():
        raise PromptError("Script is empty")

    if not required_sections:
        raise PromptError("No output sections configured")

    header = PROMPT_HEADER.format(
        max_title_length=max_title_length,
        default_language=default_language,
        default_audio_language=default_audio_language,
        category_id=category_id,
    )
    output_format = PROMPT_FORMAT.format(
        section_headings=format_section_headings(required_sections),
        script=script,
    )

    prompt = header + output_format

    logger.debug("Prompt built",
                 script_chars=len(script),
                 prompt_chars=len(prompt),
                 section_count=len(required_sections))

    return prompt
