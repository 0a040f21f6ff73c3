"""Decide-then-execute variant of the article flow.

One structured decision routes the message either to a direct chat reply or
to a fixed pipeline (search, article, images) built from the same tool
contracts as the agent loop, with the same stream framing.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from models.events import CHAT, STATUS
from models.session_models import AgentSession, AgentState
from services.agent import messages
from services.agent.step_loop import finish_session
from services.agent.tools import AgentTools

LOGGER = logging.getLogger(__name__)

MAX_IMAGES = 3
IMAGE_SPACING_SECONDS = 3.0


class SingleShotPipeline:
    """Route one message and run the chosen path to completion."""

    def __init__(
        self,
        classifier,
        tools: AgentTools,
        *,
        max_images: int = MAX_IMAGES,
        image_spacing: float = IMAGE_SPACING_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.classifier = classifier
        self.tools = tools
        self.max_images = max_images
        self.image_spacing = image_spacing
        self.sleep = sleep

    async def run(self, session: AgentSession) -> AgentState:
        session.state = AgentState.RUNNING
        try:
            session.state = await self._execute(session)
        except Exception:
            LOGGER.exception("Single-shot session %s failed", session.session_id)
            session.state = AgentState.FAILED
        finally:
            finish_session(session)
        return session.state

    async def _execute(self, session: AgentSession) -> AgentState:
        emitter = session.emitter
        session.step += 1
        decision = await self.classifier.decide(session.utterance)

        if decision.tool == "chat":
            emitter.emit(CHAT, {"message": decision.response or ""})
            return AgentState.FINAL_ANSWER

        topic = (decision.topic or "").strip() or session.utterance
        session.step += 1
        search = await self.tools.search_web(topic)

        session.step += 1
        summary = await self.tools.generate_article(topic, search["results"])
        if not summary.get("success"):
            emitter.emit(CHAT, {"message": messages.ARTICLE_UNAVAILABLE})
            return AgentState.FINAL_ANSWER

        pending = summary["pointsNeedingImages"][: self.max_images]
        for position, point in enumerate(pending):
            emitter.emit(STATUS, {"message": messages.generating_image_progress(position + 1, len(pending))})
            if position > 0:
                await self.sleep(self.image_spacing)
            session.step += 1
            await self.tools.generate_image(point["imagePrompt"], point["index"], point["heading"])

        return AgentState.FINAL_ANSWER
