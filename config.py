"""
Configuration management for YouTube Content Optimizer

Using pydantic-settings for type-safe configuration with environment variable support.
All settings can be overridden via environment variables with the YCO_ prefix.
Maintains backward compatibility with the plain OPENAI_* environment variable names.
"""

import os
from pathlib import Path
from typing import List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_REQUIRED_SECTIONS = [
    "Primary Objective",
    "Hook",
    "Thumbnail Text",
    "Title",
    "Description",
    "Tags",
    "Chapters",
    "Script Outline",
    "Pinned Comment",
    "Metadata JSON",
]


class GenerationConfig(BaseSettings):
    """Configuration for the text-generation service"""

    model_config = SettingsConfigDict(
        env_prefix='YCO_GENERATION_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # OpenAI configuration; the plain OPENAI_* variables are used when the
    # YCO_GENERATION_* ones are unset
    openai_api_key: Optional[str] = Field(
        default_factory=lambda: os.getenv('OPENAI_API_KEY'),
        description="OpenAI API key for script optimization"
    )

    openai_model: str = Field(
        default_factory=lambda: os.getenv('OPENAI_MODEL', 'gpt-4o-mini'),
        description="OpenAI model to use for optimization"
    )

    api_timeout: int = Field(
        default=120,
        description="OpenAI API timeout in seconds",
        ge=10,
        le=600
    )

    temperature: float = Field(
        default=0.7,
        description="Sampling temperature for the completion",
        ge=0.0,
        le=2.0
    )

    max_tokens: int = Field(
        default=8192,
        description="Maximum completion tokens",
        ge=256,
        le=32768
    )

    max_retries: int = Field(
        default=3,
        description="Maximum API retry attempts",
        ge=1,
        le=10
    )

    retry_delay: int = Field(
        default=1,
        description="Initial retry delay in seconds",
        ge=1,
        le=60
    )


class ValidationConfig(BaseSettings):
    """Configuration for response checks"""

    model_config = SettingsConfigDict(
        env_prefix='YCO_VALIDATION_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # Ordered list, also used to build the OUTPUT FORMAT block of the prompt
    required_sections: List[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUIRED_SECTIONS),
        description="Section titles every well-formed response must contain"
    )

    metadata_section_title: str = Field(
        default="Metadata JSON",
        description="Title of the section holding the metadata block"
    )

    default_language: str = Field(
        default="en",
        description="Expected defaultLanguage in the metadata block"
    )

    default_audio_language: str = Field(
        default="en-US",
        description="Expected defaultAudioLanguage in the metadata block"
    )

    category_id: str = Field(
        default="27",
        description="YouTube category requested in the prompt (27 = Education)"
    )

    max_title_length: int = Field(
        default=70,
        description="Recommended maximum length of the SEO title",
        ge=10,
        le=200
    )

    @validator('required_sections')
    def validate_required_sections(cls, v):
        cleaned = [name.strip() for name in v if name and name.strip()]
        if not cleaned:
            raise ValueError("At least one required section must be configured")
        return cleaned


class StorageConfig(BaseSettings):
    """Configuration for the local cache and exports"""

    model_config = SettingsConfigDict(
        env_prefix='YCO_STORAGE_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'
    )

    cache_path: Path = Field(
        default=Path.home() / ".youtube_content_optimizer" / "cache.json",
        description="JSON file holding the cached script and result"
    )

    export_dir: Optional[Path] = Field(
        default=None,
        description="Default directory for Markdown and metadata exports"
    )


class AppConfig(BaseSettings):
    """Main application configuration"""

    model_config = SettingsConfigDict(
        env_prefix='YCO_',
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore'  # Ignore unknown environment variables
    )

    # Sub-configurations
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    # Global settings
    debug: bool = Field(
        default=False,
        description="Enable debug logging"
    )


# Global configuration instance
config = AppConfig()
