"""
Export Module

Single responsibility: rendered result → Markdown and metadata JSON files
"""

from pathlib import Path
from typing import Sequence, Union

import structlog

from core.sections import Section
from core.validate import METADATA_SECTION_TITLE, extract_metadata_json

# Configure structured logger
logger = structlog.get_logger(__name__)

MARKDOWN_FILENAME = "youtube-seo-pack.md"
METADATA_FILENAME = "metadata.json"


class ExportError(Exception):
    """Custom exception for export failures"""
    pass


def _write_text(path: Path, text: str) -> Path:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(text)
    except OSError as e:
        logger.error("Failed to write export file", filepath=str(path), error=str(e))
        raise ExportError(f"Failed to write {path}: {e}")

    logger.info("Export file saved",
                filepath=str(path),
                size_kb=path.stat().st_size / 1024)
    return path


def export_markdown(result_text: str,
                    directory: Union[str, Path],
                    filename: str = MARKDOWN_FILENAME) -> Path:
    """Write the raw generated response as a Markdown file"""
    return _write_text(Path(directory) / filename, result_text)


def export_metadata_json(sections: Sequence[Section],
                         directory: Union[str, Path],
                         filename: str = METADATA_FILENAME,
                         section_title: str = METADATA_SECTION_TITLE) -> Path:
    """Write the metadata block as pretty-printed JSON"""

    raw = extract_metadata_json(sections, section_title)
    if raw is None:
        raise ExportError("No metadata JSON available to export")

    return _write_text(Path(directory) / filename, raw)
