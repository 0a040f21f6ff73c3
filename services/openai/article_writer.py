"""Structured article writer using the OpenAI Responses API.

The writer asks the model for an `Article` through structured outputs, so the
reply is validated against the pydantic schema (four points exactly) before
it reaches the agent. A refusal, an empty reply or a reply that fails
validation all surface as `None` or an exception, which the article tool
reports back to the model as a failed call.
"""

import logging
import time
from typing import Optional

from openai import AsyncOpenAI

from models.article import Article
from services.agent.prompts import article_system_prompt, article_user_prompt


class ArticleWriter:
    """Write a four-point article from a topic and a search digest."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4.1") -> None:
        if client is None:
            raise ValueError("OpenAI AsyncOpenAI client is required.")
        self.client = client
        self.model = model

    async def write(self, topic: str, search_results: str) -> Optional[Article]:
        """Return the parsed article, or None when the model produced nothing usable.

        Args:
            topic: Subject of the article.
            search_results: Search digest; only the leading part is sent.

        Returns:
            The validated Article, or None.
        """
        start = time.time()
        try:
            response = await self.client.responses.parse(
                model=self.model,
                input=[
                    {
                        "type": "message",
                        "role": "system",
                        "content": [{"type": "input_text", "text": article_system_prompt()}],
                    },
                    {
                        "type": "message",
                        "role": "user",
                        "content": [{"type": "input_text", "text": article_user_prompt(topic, search_results)}],
                    },
                ],
                text_format=Article,
            )
        except Exception as exc:
            logging.error(f"OpenAI Responses API error while writing article: {exc}")
            raise

        article = getattr(response, "output_parsed", None)
        logging.info(f"Article generation latency: {time.time() - start:.3f}s")
        return article
