"""Tool contracts available to the article agent.

Each contract emits its client-visible events through the session emitter
and returns a small dict for the model. Contracts never raise: remote
failures come back as `{"success": False, ...}` so the loop can continue.
Full article bodies and image payloads go to the client only.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Optional

from models.events import ARTICLE, IMAGE, STATUS
from models.session_models import AgentSession, ToolInvocationRecord
from services.agent import messages
from services.agent.tool_schema import (
    GenerateArticleRequest,
    GenerateIllustrationRequest,
    GenerateImageRequest,
    SearchWebRequest,
    ToolRequest,
)

LOGGER = logging.getLogger(__name__)

SEARCH_RESULT_COUNT = 5
SEARCH_EXCERPT_CAP = 1000
SEARCH_BLOCK_TEXT_CAP = 800
SEARCH_DIGEST_CAP = 5000
SEARCH_BLOCK_SEPARATOR = "\n---\n"

SEARCH_UNAVAILABLE = {"success": False, "results": "Search unavailable", "count": 0}
ARTICLE_FAILED_MESSAGE = "Failed to generate article"


def format_search_digest(hits: List[Any]) -> str:
    """Join hits into `Title/Content` blocks, bounded to the digest cap."""
    blocks = [
        f"Title: {hit.title or 'No title'}\nContent: {(hit.text or '')[:SEARCH_BLOCK_TEXT_CAP]}"
        for hit in hits
    ]
    return SEARCH_BLOCK_SEPARATOR.join(blocks)[:SEARCH_DIGEST_CAP]


class AgentTools:
    """Tool contracts bound to one session's emitter and article slots."""

    def __init__(self, session: AgentSession, providers) -> None:
        self.session = session
        self.emitter = session.emitter
        self.search = providers.search
        self.writer = providers.writer
        self.images = providers.images

    async def dispatch(self, request: ToolRequest) -> ToolInvocationRecord:
        """Run the contract matching the request and record what it did."""
        start = time.time()
        emitted_before = len(self.emitter.kinds)

        if isinstance(request, SearchWebRequest):
            output = await self.search_web(request.query)
        elif isinstance(request, GenerateArticleRequest):
            output = await self.generate_article(request.topic, request.search_results)
        elif isinstance(request, GenerateImageRequest):
            output = await self.generate_image(request.prompt, request.point_index, request.heading)
        elif isinstance(request, GenerateIllustrationRequest):
            output = await self.generate_illustration(request.prompt, request.label)
        else:
            raise ValueError(f"Unsupported tool request: {request!r}")

        return ToolInvocationRecord(
            tool_name=request.name,
            input=request.arguments(),
            output=output,
            emitted_events=list(self.emitter.kinds[emitted_before:]),
            latency=time.time() - start,
        )

    async def search_web(self, query: str) -> Dict[str, Any]:
        LOGGER.info("Searching the web for: %s", query)
        self.emitter.emit(STATUS, {"message": messages.SEARCHING})
        try:
            hits = await self.search.search(
                query,
                num_results=SEARCH_RESULT_COUNT,
                max_characters=SEARCH_EXCERPT_CAP,
            )
        except Exception as exc:
            LOGGER.error("Search error: %s", exc)
            return dict(SEARCH_UNAVAILABLE)

        digest = format_search_digest(hits)
        LOGGER.info("Search results count: %d", len(hits))
        self.emitter.emit(STATUS, {"message": messages.search_finished(len(hits))})
        return {
            "success": True,
            "results": digest or "No results found",
            "count": len(hits),
        }

    async def generate_article(self, topic: str, search_results: str) -> Dict[str, Any]:
        """Write the article, send it to the client, and summarise it for the model."""
        LOGGER.info("Generating article for: %s", topic)
        self.emitter.emit(STATUS, {"message": messages.WRITING_ARTICLE})
        try:
            article = await self.writer.write(topic, search_results)
        except Exception as exc:
            LOGGER.error("Article generation error: %s", exc)
            article = None

        if article is None:
            return {"success": False, "message": ARTICLE_FAILED_MESSAGE}

        self.session.article = article
        self.session.images.clear()
        self.emitter.emit(ARTICLE, article.to_payload())
        self.emitter.emit(STATUS, {"message": messages.ARTICLE_READY})

        return {
            "success": True,
            "title": article.title,
            "pointsCount": len(article.points),
            "pointsNeedingImages": [
                {
                    "index": index,
                    "heading": point.heading,
                    "imagePrompt": point.image_prompt,
                    "shouldHaveImage": point.should_have_image,
                }
                for index, point in enumerate(article.points)
                if point.should_have_image
            ],
        }

    async def generate_image(self, prompt: str, point_index: int, heading: str) -> Dict[str, Any]:
        """Render an image for one slot. The payload goes to the client only."""
        LOGGER.info("Generating image for point %d: %s", point_index, heading)
        self.emitter.emit(STATUS, {"message": messages.generating_image(heading)})

        if not self.session.has_slot(point_index):
            LOGGER.warning("Image requested for undeclared slot %d", point_index)
            return {
                "success": False,
                "message": f"No article point at index {point_index}; generate the article first",
                "pointIndex": point_index,
            }

        image_data = await self._render(prompt)
        if not image_data:
            return {
                "success": False,
                "message": f'Failed to generate image for "{heading}"',
                "pointIndex": point_index,
            }

        self.session.attach_image(point_index, image_data)
        self.emitter.emit(IMAGE, {"pointIndex": point_index, "imageData": image_data, "heading": heading})
        return {
            "success": True,
            "message": f'Image generated successfully for "{heading}"',
            "pointIndex": point_index,
        }

    async def generate_illustration(self, prompt: str, label: str) -> Dict[str, Any]:
        """Render a standalone illustration for the markdown article."""
        LOGGER.info("Generating illustration: %s", label)
        self.emitter.emit(STATUS, {"message": messages.generating_image(label)})

        image_data = await self._render(prompt)
        if not image_data:
            return {"success": False, "message": "[IMAGE_FAILED] Continue without image."}

        self.emitter.emit(IMAGE, {"label": label, "imageData": image_data})
        return {"success": True, "message": f"[IMAGE_GENERATED:{label}] Image created successfully."}

    async def _render(self, prompt: str) -> Optional[str]:
        try:
            return await self.images.synthesize(prompt)
        except Exception as exc:
            LOGGER.error("Image generation error: %s", exc)
            return None
