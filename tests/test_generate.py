"""Tests for the generation client wrapper (no network)"""

import pytest
from tenacity import stop_after_attempt, wait_none

from config import config
from core import generate
from core.generate import APIError, GenerationError, analyze_script, generate_response


@pytest.fixture(autouse=True)
def fast_retries(monkeypatch):
    monkeypatch.setattr(
        generate,
        "_request_completion",
        generate._request_completion.retry_with(wait=wait_none(), stop=stop_after_attempt(3)),
    )


def test_returns_text_and_usage(fake_client):
    client = fake_client("### Title\nHello")
    result = generate_response("prompt", client=client)
    assert result.text == "### Title\nHello"
    assert result.model == config.generation.openai_model
    assert result.token_usage == {"input_tokens": 100, "output_tokens": 50, "total_tokens": 150}
    call = client.chat.completions.calls[0]
    assert call["messages"] == [{"role": "user", "content": "prompt"}]
    assert call["model"] == config.generation.openai_model


def test_transient_errors_are_retried(fake_client):
    client = fake_client(Exception("Request timeout"), Exception("rate limit reached"), "### Title\nOk")
    result = generate_response("prompt", client=client)
    assert result.text == "### Title\nOk"
    assert len(client.chat.completions.calls) == 3


def test_transient_errors_give_up_as_api_error(fake_client):
    client = fake_client(*[Exception("timeout")] * 3)
    with pytest.raises(APIError):
        generate_response("prompt", client=client)
    assert len(client.chat.completions.calls) == 3


def test_other_errors_are_not_retried(fake_client):
    client = fake_client(Exception("invalid api key"), "unused")
    with pytest.raises(GenerationError) as exc_info:
        generate_response("prompt", client=client)
    assert not isinstance(exc_info.value, APIError)
    assert len(client.chat.completions.calls) == 1


@pytest.mark.parametrize("content", ["", "   ", None])
def test_empty_response_is_an_error(fake_client, content):
    with pytest.raises(GenerationError, match="empty response"):
        generate_response("prompt", client=fake_client(content))


def test_in_band_error_text_is_an_error(fake_client):
    with pytest.raises(GenerationError, match="^Error: quota exceeded"):
        generate_response("prompt", client=fake_client("Error: quota exceeded"))


def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(config.generation, "openai_api_key", None)
    with pytest.raises(GenerationError, match="API key"):
        generate_response("prompt")


def test_analyze_script_builds_prompt(fake_client):
    client = fake_client("### Hook\nHi")
    analyze_script("my script", ["Hook", "Tags"], client=client)
    prompt = client.chat.completions.calls[0]["messages"][0]["content"]
    assert "### Hook\n### Tags" in prompt
    assert prompt.endswith("<<<\nmy script\n>>>")
