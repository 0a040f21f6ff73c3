"""Process-wide configuration read from environment variables."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Read-only configuration shared by every request.

    Attributes:
        openai_api_key: Key for the OpenAI client (required).
        openai_model: Model used for tool selection and structured output.
        openai_image_model: Model used for image synthesis.
        exa_api_key: Key for the Exa search API, None disables search.
        max_steps: Step budget for one agent session.
        image_max_retries: Retries allowed when image synthesis is rate limited.
        image_retry_base_delay: First backoff delay in seconds.
        log_level: Root log level name.
    """

    openai_api_key: str
    openai_model: str = "gpt-4.1"
    openai_image_model: str = "gpt-image-1"
    exa_api_key: Optional[str] = None
    max_steps: int = 10
    image_max_retries: int = 3
    image_retry_base_delay: float = 5.0
    log_level: str = "INFO"


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise RuntimeError(f"{name} must be at least {minimum}, got {value}")
    return value


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise RuntimeError(f"{name} must be non-negative, got {value}")
    return value


def load_settings() -> Settings:
    """Build `Settings` from the environment.

    Raises:
        RuntimeError: If OPENAI_API_KEY is missing or a numeric value is invalid.
    """
    openai_api_key = os.getenv("OPENAI_API_KEY")
    if not openai_api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")

    exa_api_key = os.getenv("EXA_API_KEY") or None
    if exa_api_key is None:
        LOGGER.warning("EXA_API_KEY is not set; web search will report as unavailable")

    return Settings(
        openai_api_key=openai_api_key,
        openai_model=os.getenv("OPENAI_MODEL") or "gpt-4.1",
        openai_image_model=os.getenv("OPENAI_IMAGE_MODEL") or "gpt-image-1",
        exa_api_key=exa_api_key,
        max_steps=_int_env("AGENT_MAX_STEPS", 10, minimum=1),
        image_max_retries=_int_env("IMAGE_MAX_RETRIES", 3),
        image_retry_base_delay=_float_env("IMAGE_RETRY_BASE_DELAY", 5.0),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
