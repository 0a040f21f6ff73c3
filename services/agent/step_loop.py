"""The article agent: a bounded, one-tool-per-step loop over the model.

Each step asks the model for its next action. A tool request runs exactly
one tool contract and folds the compact result back into the context; a
plain answer ends the session. The loop stops after `max_steps` model
turns. Whatever happens, the session ends with a single `done` or `error`
envelope and the emitter is closed.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, List, Set

from models.events import CHAT, DONE, ERROR, STATUS, TEXT
from models.session_models import AgentSession, AgentState
from services.agent import messages
from services.agent.prompts import agent_system_prompt, markdown_system_prompt, markdown_user_prompt
from services.agent.response_parser import ModelAction, message_item, tool_call_items
from services.agent.tool_schema import MARKDOWN_TOOL_DEFINITIONS, TOOL_DEFINITIONS

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 10


def finish_session(session: AgentSession) -> None:
    """Emit the terminal envelopes for the session state and release the emitter."""
    emitter = session.emitter
    if session.state.succeeded:
        emitter.emit(STATUS, {"message": messages.FINISHED})
        emitter.emit(DONE, {"success": True})
    else:
        emitter.emit(ERROR, {"message": messages.SESSION_FAILED})
    emitter.close()


class ArticleAgent:
    """Drive one session through search, writing and image tools."""

    tool_definitions = TOOL_DEFINITIONS

    def __init__(self, model, tools, *, max_steps: int = DEFAULT_MAX_STEPS) -> None:
        if max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        self.model = model
        self.tools = tools
        self.max_steps = max_steps

    async def run(self, session: AgentSession) -> AgentState:
        """Run the session to a terminal state and close its stream.

        Raises:
            ValueError: If the tools were bound to a different session.
        """
        if self.tools.session is not session:
            raise ValueError("Agent tools are bound to a different session")
        start = time.time()
        session.state = AgentState.RUNNING
        session.context = self.seed_context(session)
        try:
            session.state = await self._drive(session)
        except Exception:
            LOGGER.exception("Session %s failed at step %d", session.session_id, session.step)
            session.state = AgentState.FAILED
        finally:
            finish_session(session)

        LOGGER.info(
            "Session %s finished as %s after %d steps in %.3fs",
            session.session_id,
            session.state.value,
            session.step,
            time.time() - start,
        )
        return session.state

    def seed_context(self, session: AgentSession) -> List[Dict[str, Any]]:
        return [
            message_item("system", agent_system_prompt()),
            message_item("user", session.utterance),
        ]

    async def next_action(self, session: AgentSession) -> ModelAction:
        return await self.model.next_action(session.context, self.tool_definitions)

    def answer(self, session: AgentSession, action: ModelAction) -> None:
        """Deliver the final answer; an empty answer emits nothing."""
        if action.text:
            session.emitter.emit(CHAT, {"message": action.text})

    def _declared_tools(self) -> Set[str]:
        return {definition["name"] for definition in self.tool_definitions}

    async def _drive(self, session: AgentSession) -> AgentState:
        while session.step < self.max_steps:
            session.step += 1
            action = await self.next_action(session)

            if action.is_final:
                self.answer(session, action)
                return AgentState.FINAL_ANSWER

            request = action.tool_request
            if request.name not in self._declared_tools():
                raise ValueError(f"Model called undeclared tool '{request.name}'")
            record = await self.tools.dispatch(request)
            session.last_invocation = record
            session.context.extend(tool_call_items(request, record.output))
            LOGGER.info(
                "Step %d: %s -> success=%s events=%s (%.3fs)",
                session.step,
                record.tool_name,
                record.output.get("success"),
                record.emitted_events,
                record.latency,
            )

        LOGGER.warning("Session %s reached the step budget of %d", session.session_id, self.max_steps)
        return AgentState.BUDGET_EXHAUSTED


class MarkdownArticleAgent(ArticleAgent):
    """Write a free-form markdown article, streaming the model's text as it is produced.

    The session utterance is the topic. Text deltas go out as `text` records,
    so the final answer is not repeated as `chat`.
    """

    tool_definitions = MARKDOWN_TOOL_DEFINITIONS

    def seed_context(self, session: AgentSession) -> List[Dict[str, Any]]:
        return [
            message_item("system", markdown_system_prompt()),
            message_item("user", markdown_user_prompt(session.utterance)),
        ]

    async def next_action(self, session: AgentSession) -> ModelAction:
        def forward(delta: str) -> None:
            session.emitter.emit(TEXT, {"delta": delta})

        return await self.model.stream_action(session.context, self.tool_definitions, forward)

    def answer(self, session: AgentSession, action: ModelAction) -> None:
        pass
