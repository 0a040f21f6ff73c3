"""Ask the model for the agent's next action via the OpenAI Responses API."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List

from openai import AsyncOpenAI

from services.agent.response_parser import ModelAction, parse_model_action


class AgentModel:
    """Stateless wrapper: given the context and the declared tools, return one action."""

    def __init__(self, client: AsyncOpenAI, model: str = "gpt-4.1") -> None:
        if client is None:
            raise ValueError("AsyncOpenAI client is required.")
        self.client = client
        self.model = model

    async def next_action(self, context: List[Dict[str, Any]], tools: List[Dict[str, Any]]) -> ModelAction:
        """Return a tool request or the final answer for the current context."""
        start = time.time()
        try:
            response = await self.client.responses.create(
                model=self.model,
                input=context,
                tools=tools,
                parallel_tool_calls=False,
            )
        except Exception as exc:
            logging.error("Error during OpenAI Responses API call: %s", exc)
            raise
        action = parse_model_action(response)
        logging.debug("Model turn latency: %.3fs", time.time() - start)
        return action

    async def stream_action(
        self,
        context: List[Dict[str, Any]],
        tools: List[Dict[str, Any]],
        on_text: Callable[[str], Any],
    ) -> ModelAction:
        """Like `next_action`, but hand each output text delta to `on_text` as it arrives.

        Raises:
            RuntimeError: If the stream reports an error or ends without a completed response.
        """
        start = time.time()
        completed = None
        try:
            stream = await self.client.responses.create(
                model=self.model,
                input=context,
                tools=tools,
                parallel_tool_calls=False,
                stream=True,
            )
            async for event in stream:
                event_type = getattr(event, "type", "")
                if event_type == "response.output_text.delta":
                    if event.delta:
                        on_text(event.delta)
                elif event_type == "response.completed":
                    completed = event.response
                elif event_type in ("response.failed", "error"):
                    raise RuntimeError(f"Model stream failed: {event_type}")
        except Exception as exc:
            logging.error("Error during streamed OpenAI Responses API call: %s", exc)
            raise
        if completed is None:
            raise RuntimeError("Model stream ended without a completed response")
        action = parse_model_action(completed)
        logging.debug("Streamed model turn latency: %.3fs", time.time() - start)
        return action
