"""
Response Validation Module

Single responsibility: parsed sections → checklist and metadata verdicts
Never raises for malformed responses; every problem is reported as a result value.
"""

import json
import re
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

import structlog
from pydantic import BaseModel, Field

from core.sections import Section, parse_sections

# Configure structured logger
logger = structlog.get_logger(__name__)

METADATA_SECTION_TITLE = "metadata json"
TITLE_SECTION_TITLE = "title"

REQUIRED_METADATA_FIELDS = (
    "title",
    "description",
    "tags",
    "defaultLanguage",
    "defaultAudioLanguage",
    "categoryId",
)

# Opening fence with an optional language tag, and the closing fence
_FENCE_OPEN = re.compile(r"^\s*```[\w-]*[ \t]*\n?")
_FENCE_CLOSE = re.compile(r"\n?[ \t]*```\s*$")


class MetadataSchema(BaseModel):
    """Expected shape of the metadata block"""

    required_fields: Tuple[str, ...] = Field(
        default=REQUIRED_METADATA_FIELDS,
        description="Fields that must be present in the metadata object"
    )
    default_language: str = Field(default="en", description="Expected defaultLanguage")
    default_audio_language: str = Field(default="en-US", description="Expected defaultAudioLanguage")
    section_title: str = Field(default=METADATA_SECTION_TITLE, description="Title of the metadata section")


class MetadataStatus(str, Enum):
    PASSED = "passed"
    FAILED = "failed"
    NOT_APPLICABLE = "not_applicable"


class MetadataValidation(BaseModel):
    """Outcome of checking the metadata block"""

    status: MetadataStatus = Field(description="Validation outcome")
    reason: Optional[str] = Field(None, description="Human-readable failure reason")
    data: Optional[Dict[str, Any]] = Field(None, description="Parsed metadata object when passed")

    @property
    def ok(self) -> bool:
        return self.status == MetadataStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == MetadataStatus.FAILED

    @property
    def applicable(self) -> bool:
        return self.status != MetadataStatus.NOT_APPLICABLE

    @classmethod
    def passed(cls, data: Dict[str, Any]) -> "MetadataValidation":
        return cls(status=MetadataStatus.PASSED, data=data)

    @classmethod
    def failure(cls, reason: str) -> "MetadataValidation":
        return cls(status=MetadataStatus.FAILED, reason=reason)

    @classmethod
    def not_applicable(cls) -> "MetadataValidation":
        return cls(status=MetadataStatus.NOT_APPLICABLE)


class TitleLengthCheck(BaseModel):
    """Length of the SEO title against the recommended limit"""

    length: int = Field(description="Trimmed title length", ge=0)
    max_length: int = Field(description="Recommended maximum length", ge=1)

    @property
    def too_long(self) -> bool:
        return self.length > self.max_length


class ResponseReport(BaseModel):
    """Everything the caller needs to render one result"""

    sections: List[Section] = Field(description="Parsed sections in order")
    checklist: Dict[str, bool] = Field(description="Required section name → present")
    metadata: MetadataValidation = Field(description="Metadata block outcome")
    title_check: Optional[TitleLengthCheck] = Field(None, description="SEO title length check")

    @property
    def missing_sections(self) -> List[str]:
        return [name for name, present in self.checklist.items() if not present]

    @property
    def complete(self) -> bool:
        return not self.missing_sections and not self.metadata.failed


def _normalize_title(title: str) -> str:
    return title.strip().lower()


def find_section(sections: Sequence[Section], title: str) -> Optional[Section]:
    """Return the first section whose trimmed title matches, case-insensitively"""
    wanted = _normalize_title(title)
    for section in sections:
        if _normalize_title(section.title) == wanted:
            return section
    return None


def find_metadata_section(sections: Sequence[Section],
                          title: str = METADATA_SECTION_TITLE) -> Optional[Section]:
    return find_section(sections, title)


def check_required_sections(sections: Sequence[Section],
                            required_names: Sequence[str]) -> Dict[str, bool]:
    """Map every required name to whether some section carries that title"""

    found = {_normalize_title(section.title) for section in sections}
    checklist = {name: _normalize_title(name) in found for name in required_names}

    logger.debug("Checked required sections",
                 required=len(checklist),
                 missing=[name for name, ok in checklist.items() if not ok])

    return checklist


def strip_code_fence(content: str) -> str:
    """Remove a surrounding ``` fence (with optional language tag) if present"""
    text = content.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text.strip()


class _NoJSONObject(ValueError):
    pass


class _InvalidJSON(ValueError):
    pass


def _load_json_object(content: str) -> Any:
    text = strip_code_fence(content)
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise _NoJSONObject("no JSON object found")
    try:
        return json.loads(text[start:end + 1])
    except (ValueError, RecursionError) as e:  # JSONDecodeError, digit limit, nesting depth
        raise _InvalidJSON(str(e)) from e


def validate_metadata(section: Optional[Section],
                      schema: Optional[MetadataSchema] = None) -> MetadataValidation:
    """Validate the JSON metadata object embedded in the metadata section

    A missing section is "not applicable", not a failure.
    """

    schema = schema or MetadataSchema()

    if section is None:
        return MetadataValidation.not_applicable()

    try:
        data = _load_json_object(section.content)
    except _NoJSONObject as e:
        logger.info("Metadata check failed", reason=str(e))
        return MetadataValidation.failure(str(e))
    except _InvalidJSON as e:
        logger.info("Metadata check failed", reason="invalid JSON", detail=str(e))
        return MetadataValidation.failure(f"invalid JSON: {e}")

    if not isinstance(data, dict):
        return MetadataValidation.failure("invalid JSON: expected an object")

    for field_name in schema.required_fields:
        if field_name not in data:
            logger.info("Metadata check failed", missing_field=field_name)
            return MetadataValidation.failure(f"missing field: {field_name}")

    if data.get("defaultAudioLanguage") != schema.default_audio_language:
        return MetadataValidation.failure(
            f"defaultAudioLanguage must be '{schema.default_audio_language}'"
        )

    if data.get("defaultLanguage") != schema.default_language:
        return MetadataValidation.failure(
            f"defaultLanguage must be '{schema.default_language}'"
        )

    logger.debug("Metadata check passed", fields=len(data))
    return MetadataValidation.passed(data)


def extract_metadata_json(sections: Sequence[Section],
                          title: str = METADATA_SECTION_TITLE) -> Optional[str]:
    """Pretty-print the metadata object for export, or None if it cannot be parsed"""

    section = find_metadata_section(sections, title)
    if section is None:
        return None

    try:
        data = _load_json_object(section.content)
    except ValueError:  # no object or invalid JSON
        return None

    return json.dumps(data, indent=2, ensure_ascii=False)


def title_length(section: Section, max_length: int = 70) -> TitleLengthCheck:
    """Measure one title section's trimmed content"""
    return TitleLengthCheck(length=len(section.content.strip()), max_length=max_length)


def check_title_length(sections: Sequence[Section],
                       max_length: int = 70) -> Optional[TitleLengthCheck]:
    section = find_section(sections, TITLE_SECTION_TITLE)
    if section is None:
        return None
    return title_length(section, max_length)


def build_report(result_text: str,
                 required_names: Sequence[str],
                 schema: Optional[MetadataSchema] = None,
                 max_title_length: int = 70) -> ResponseReport:
    """Parse a generated response and run every check on it"""

    schema = schema or MetadataSchema()
    sections = parse_sections(result_text)

    report = ResponseReport(
        sections=sections,
        checklist=check_required_sections(sections, required_names),
        metadata=validate_metadata(find_metadata_section(sections, schema.section_title), schema),
        title_check=check_title_length(sections, max_length=max_title_length),
    )

    logger.info("Response report built",
                section_count=len(sections),
                missing_sections=report.missing_sections,
                metadata_status=report.metadata.status.value)

    return report
