"""Tests for settings loading"""

import pytest
from pydantic import ValidationError

from config import DEFAULT_REQUIRED_SECTIONS, GenerationConfig, ValidationConfig


def test_validation_defaults():
    settings = ValidationConfig()
    assert settings.required_sections == DEFAULT_REQUIRED_SECTIONS
    assert settings.default_language == "en"
    assert settings.default_audio_language == "en-US"
    assert settings.category_id == "27"
    assert settings.max_title_length == 70


def test_required_sections_from_environment(monkeypatch):
    monkeypatch.setenv("YCO_VALIDATION_REQUIRED_SECTIONS", '["Title", " Tags "]')
    assert ValidationConfig().required_sections == ["Title", "Tags"]


def test_required_sections_cannot_be_empty():
    with pytest.raises(ValidationError):
        ValidationConfig(required_sections=["  "])


def test_plain_openai_variables_are_used(monkeypatch):
    monkeypatch.delenv("YCO_GENERATION_OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("YCO_GENERATION_OPENAI_MODEL", raising=False)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-legacy")
    monkeypatch.setenv("OPENAI_MODEL", "gpt-4o")
    settings = GenerationConfig()
    assert settings.openai_api_key == "sk-legacy"
    assert settings.openai_model == "gpt-4o"


def test_prefixed_variables_win(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-legacy")
    monkeypatch.setenv("YCO_GENERATION_OPENAI_API_KEY", "sk-new")
    assert GenerationConfig().openai_api_key == "sk-new"


def test_timeout_bounds(monkeypatch):
    monkeypatch.setenv("YCO_GENERATION_API_TIMEOUT", "1")
    with pytest.raises(ValidationError):
        GenerationConfig()
