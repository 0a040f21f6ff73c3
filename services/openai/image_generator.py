"""Image synthesis for article points using the OpenAI Images API."""

from __future__ import annotations

import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from services.openai.retry import BASE_DELAY, MAX_RETRIES, call_with_backoff

LOGGER = logging.getLogger(__name__)

PROMPT_LIMIT = 200
LANDSCAPE_SIZE = "1536x1024"
# Lowest moderation level the API offers; content policy still applies.
MODERATION_LEVEL = "low"


def to_png_data_url(b64_payload: str) -> str:
    """Wrap a base64 PNG payload in a data URL."""
    return f"data:image/png;base64,{b64_payload}"


class ImageSynthesizer:
    """Generate a single landscape image per prompt, retrying on rate limits."""

    def __init__(
        self,
        client: AsyncOpenAI,
        *,
        model: str = "gpt-image-1",
        max_retries: int = MAX_RETRIES,
        base_delay: float = BASE_DELAY,
    ) -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.model = model
        self.max_retries = max_retries
        self.base_delay = base_delay

    async def synthesize(self, prompt: str) -> Optional[str]:
        """Return a PNG data URL for the prompt, or None when nothing was produced."""
        trimmed = (prompt or "").strip()[:PROMPT_LIMIT]
        if not trimmed:
            return None

        start = time.time()
        image_b64 = await call_with_backoff(
            lambda: self._generate(trimmed),
            max_retries=self.max_retries,
            base_delay=self.base_delay,
        )
        if not image_b64:
            LOGGER.warning("Image synthesis produced no output for prompt %r", trimmed[:60])
            return None

        LOGGER.info("Image synthesis latency: %.3fs", time.time() - start)
        return to_png_data_url(image_b64)

    async def _generate(self, prompt: str) -> Optional[str]:
        response = await self.client.images.generate(
            model=self.model,
            prompt=prompt,
            size=LANDSCAPE_SIZE,
            moderation=MODERATION_LEVEL,
            n=1,
        )
        data = getattr(response, "data", None) or []
        if not data:
            return None
        return getattr(data[0], "b64_json", None)
