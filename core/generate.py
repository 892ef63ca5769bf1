"""
Text Generation Module

Single responsibility: prompt text → generated Markdown response
Uses structured logging, pydantic validation, and tenacity retry around the OpenAI call.
"""

import time
from typing import Any, Dict, Optional, Sequence

import structlog
from pydantic import BaseModel, Field, validator
from tenacity import (
    retry,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type
)
import openai
from openai import OpenAI
from openai.types.chat import ChatCompletion

from config import config
from core.prompt import build_prompt

# Configure structured logger
logger = structlog.get_logger(__name__)

# The service sometimes reports failures in-band instead of through an HTTP error
ERROR_PREFIX = "Error:"

_TRANSIENT_ERRORS = (
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
)


class GenerationResult(BaseModel):
    """Generated response with usage metadata"""

    text: str = Field(description="Raw Markdown response")
    model: str = Field(description="Model that produced the response")
    token_usage: Dict[str, int] = Field(default_factory=dict, description="Token usage statistics")
    processing_time: float = Field(default=0.0, description="Request time in seconds", ge=0)

    @validator('text')
    def validate_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Generated text is empty")
        return v


class GenerationError(Exception):
    """Custom exception for text generation failures"""
    pass


class APIError(GenerationError):
    """Transient OpenAI API errors (timeouts, rate limits, connection problems)"""
    pass


def create_client() -> OpenAI:
    """Create an OpenAI client from configuration"""

    api_key = config.generation.openai_api_key
    if not api_key:
        raise GenerationError("OpenAI API key not configured")

    return OpenAI(api_key=api_key, timeout=config.generation.api_timeout)


def is_transient_error(error: Exception) -> bool:
    if isinstance(error, _TRANSIENT_ERRORS):
        return True
    message = str(error).lower()
    return "timeout" in message or "rate limit" in message


def _usage_to_dict(usage: Any) -> Dict[str, int]:
    if usage is None:
        return {}
    return {
        'input_tokens': usage.prompt_tokens,
        'output_tokens': usage.completion_tokens,
        'total_tokens': usage.total_tokens
    }


@retry(
    stop=stop_after_attempt(config.generation.max_retries),
    wait=wait_exponential(
        multiplier=config.generation.retry_delay,
        min=1,
        max=60
    ),
    retry=retry_if_exception_type((APIError,)),
    reraise=True
)
def _request_completion(client: OpenAI, prompt: str) -> ChatCompletion:
    """Send one chat-completion request, classifying failures for retry"""

    try:
        return client.chat.completions.create(
            model=config.generation.openai_model,
            messages=[
                {"role": "user", "content": prompt}
            ],
            temperature=config.generation.temperature,
            max_tokens=config.generation.max_tokens
        )
    except Exception as e:
        logger.warning("Completion request failed", error=str(e))
        if is_transient_error(e):
            raise APIError(f"API error: {e}")
        raise GenerationError(f"Generation failed: {e}")


def generate_response(prompt: str, client: Optional[OpenAI] = None) -> GenerationResult:
    """Send the prompt to the generation service and return its response text"""

    logger.info("Starting generation request",
                model=config.generation.openai_model,
                prompt_chars=len(prompt))

    start_time = time.monotonic()
    client = client or create_client()

    response = _request_completion(client, prompt)

    text = response.choices[0].message.content if response.choices else None
    if not text or not text.strip():
        raise GenerationError("API returned empty response")

    if text.startswith(ERROR_PREFIX):
        logger.error("Service reported an error", message=text[:200])
        raise GenerationError(text)

    processing_time = time.monotonic() - start_time

    result = GenerationResult(
        text=text,
        model=config.generation.openai_model,
        token_usage=_usage_to_dict(response.usage),
        processing_time=processing_time
    )

    logger.info("Generation completed",
                processing_time=processing_time,
                response_chars=len(text),
                total_tokens=result.token_usage.get('total_tokens'))

    return result


def analyze_script(
    script: str,
    required_sections: Optional[Sequence[str]] = None,
    client: Optional[OpenAI] = None
) -> GenerationResult:
    """Build the optimization prompt for a script and generate the response"""

    validation = config.validation
    prompt = build_prompt(
        script,
        required_sections or validation.required_sections,
        default_language=validation.default_language,
        default_audio_language=validation.default_audio_language,
        category_id=validation.category_id,
        max_title_length=validation.max_title_length
    )

    return generate_response(prompt, client=client)
