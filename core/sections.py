"""
Section Parsing Module

Single responsibility: generated Markdown text → ordered list of titled sections
Pure string processing; any input, however malformed, yields a (possibly empty) list.
"""

import re
from typing import List

import structlog
from pydantic import BaseModel, Field

# Configure structured logger
logger = structlog.get_logger(__name__)

HEADING_MARKER = "### "
OVERVIEW_TITLE = "Overview"

# Split point sits right before a heading line; the heading stays with its chunk
_HEADING_BOUNDARY = re.compile(r"\n(?=### )")


class Section(BaseModel):
    """Titled block of text delimited by a heading marker"""

    title: str = Field(description="Section title", frozen=True)
    content: str = Field(default="", description="Section body, trimmed")


def normalize_newlines(text: str) -> str:
    """Convert CRLF and bare CR line endings to LF"""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def split_chunks(text: str) -> List[str]:
    """Split text before every line that starts with the heading marker"""
    return _HEADING_BOUNDARY.split(text)


def parse_sections(text: str) -> List[Section]:
    """Parse a generated response into sections in order of appearance

    Text before the first heading becomes an "Overview" section. Headings
    without a title get a positional "Section N" placeholder.
    """

    if not text or not text.strip():
        return []

    chunks = split_chunks(normalize_newlines(text))
    sections: List[Section] = []

    for chunk in chunks:
        if chunk.startswith(HEADING_MARKER):
            newline = chunk.find("\n")
            if newline > -1:
                title = chunk[len(HEADING_MARKER):newline].strip()
                content = chunk[newline + 1:].strip()
            else:
                title = chunk[len(HEADING_MARKER):].strip()
                content = ""
            if not title:
                title = f"Section {len(sections) + 1}"
            sections.append(Section(title=title, content=content))
        elif chunk.strip():
            sections.append(Section(title=OVERVIEW_TITLE, content=chunk.strip()))

    logger.debug("Parsed response sections",
                 chunk_count=len(chunks),
                 section_count=len(sections))

    return sections
