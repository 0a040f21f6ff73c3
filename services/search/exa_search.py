"""Web search through the Exa API."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from exa_py import Exa

LOGGER = logging.getLogger(__name__)


@dataclass
class SearchHit:
    """One ranked search result with its text excerpt."""

    title: Optional[str]
    text: Optional[str]
    url: Optional[str] = None


class ExaSearchService:
    """Fetch ranked snippets for a query.

    The Exa client is synchronous, so each search runs in a worker thread to
    keep the event loop free for other sessions.
    """

    def __init__(self, api_key: Optional[str] = None, client: Optional[Exa] = None) -> None:
        if client is None and api_key:
            client = Exa(api_key=api_key)
        self.client = client

    @property
    def available(self) -> bool:
        return self.client is not None

    async def search(self, query: str, *, num_results: int = 5, max_characters: int = 1000) -> List[SearchHit]:
        """Return up to `num_results` hits with excerpts capped at `max_characters`.

        Raises:
            RuntimeError: If no Exa client is configured.
        """
        if self.client is None:
            raise RuntimeError("Exa search is not configured (EXA_API_KEY missing).")

        start = time.time()
        response = await asyncio.to_thread(
            self.client.search_and_contents,
            query,
            num_results=num_results,
            text={"max_characters": max_characters},
        )
        hits = [
            SearchHit(
                title=getattr(result, "title", None),
                text=getattr(result, "text", None),
                url=getattr(result, "url", None),
            )
            for result in getattr(response, "results", None) or []
        ]
        LOGGER.info("Exa search returned %d results in %.3fs", len(hits), time.time() - start)
        return hits
