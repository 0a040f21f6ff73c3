"""Process-wide provider bundle shared by every session."""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Optional

from openai import AsyncOpenAI

from services.openai.agent_model import AgentModel
from services.openai.article_writer import ArticleWriter
from services.openai.image_generator import ImageSynthesizer
from services.openai.request_classifier import RequestClassifier
from services.search.exa_search import ExaSearchService
from utils.settings import Settings

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Providers:
    """External capabilities, created once at startup and read-only afterwards."""

    settings: Settings
    model: AgentModel
    classifier: RequestClassifier
    writer: ArticleWriter
    search: ExaSearchService
    images: ImageSynthesizer
    openai_client: Optional[Any] = None


def build_providers(settings: Settings, client: Optional[AsyncOpenAI] = None) -> Providers:
    """Create the OpenAI and Exa backed providers from settings."""
    if client is None:
        try:
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        except Exception as exc:
            raise RuntimeError("Failed to initialize OpenAI Async client") from exc

    return Providers(
        settings=settings,
        model=AgentModel(client, model=settings.openai_model),
        classifier=RequestClassifier(client, model=settings.openai_model),
        writer=ArticleWriter(client, model=settings.openai_model),
        search=ExaSearchService(api_key=settings.exa_api_key),
        images=ImageSynthesizer(
            client,
            model=settings.openai_image_model,
            max_retries=settings.image_max_retries,
            base_delay=settings.image_retry_base_delay,
        ),
        openai_client=client,
    )


async def close_providers(providers: Optional[Providers]) -> None:
    """Close the OpenAI client if it exposes a close/aclose method."""
    client = getattr(providers, "openai_client", None)
    if client is None:
        return
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        result = aclose()
        if inspect.isawaitable(result):
            await result
    except Exception as exc:
        # Shutdown errors must not mask the original exit reason.
        LOGGER.debug("Ignoring error while closing OpenAI client: %s", exc)
