"""Route a user message to article generation or a direct chat reply."""

from __future__ import annotations

import logging
from typing import Literal, Optional

from openai import AsyncOpenAI
from pydantic import BaseModel, Field

from services.agent.prompts import decision_prompt

LOGGER = logging.getLogger(__name__)


class RequestDecision(BaseModel):
    """Which path the single-shot pipeline should take."""

    tool: Literal["generate_article", "chat"] = Field(description="Which tool to use")
    topic: Optional[str] = Field(default=None, description="The article topic if generate_article is chosen")
    response: Optional[str] = Field(default=None, description="The chat response if chat is chosen")


class RequestClassifier:
    """Make one structured decision per message."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4.1") -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.model = model

    async def decide(self, user_message: str) -> RequestDecision:
        """Return the routing decision for a message.

        Raises:
            RuntimeError: If the model returns no parseable decision.
        """
        response = await self.client.responses.parse(
            model=self.model,
            input=[
                {
                    "type": "message",
                    "role": "user",
                    "content": [{"type": "input_text", "text": decision_prompt(user_message)}],
                },
            ],
            text_format=RequestDecision,
        )
        decision = getattr(response, "output_parsed", None)
        if decision is None:
            raise RuntimeError("No routing decision returned by the model.")
        LOGGER.info("Routing decision: %s", decision.tool)
        return decision
