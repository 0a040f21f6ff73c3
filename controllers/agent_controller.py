"""Start streaming sessions for the agent and single-shot endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Coroutine, Set

from fastapi import HTTPException, Request
from fastapi.responses import StreamingResponse

from models.events import STATUS
from models.session_models import AgentSession
from services.agent import messages
from services.agent.single_shot import SingleShotPipeline
from services.agent.step_loop import ArticleAgent, MarkdownArticleAgent
from services.agent.tools import AgentTools
from services.providers import Providers
from services.streaming.event_emitter import queue_emitter
from services.streaming.stream_adapter import streaming_response

LOGGER = logging.getLogger(__name__)

# Sessions keep running after a client disconnect; hold references until done.
_running_sessions: Set[asyncio.Task] = set()


def _require_providers(request: Request) -> Providers:
    providers = getattr(request.app.state, "providers", None)
    if providers is None:
        raise HTTPException(status_code=500, detail="Model providers not initialized.")
    return providers


def _spawn(coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
    task = asyncio.create_task(coro)
    _running_sessions.add(task)
    task.add_done_callback(_running_sessions.discard)
    return task


async def cancel_running_sessions() -> int:
    """Cancel sessions still in flight and wait for them to finish their cleanup.

    Returns:
        The number of sessions that were cancelled.
    """
    tasks = [task for task in _running_sessions if not task.done()]
    for task in tasks:
        task.cancel()
    if tasks:
        LOGGER.info("Cancelling %d running sessions", len(tasks))
        await asyncio.gather(*tasks, return_exceptions=True)
    return len(tasks)


async def stream_agent(request: Request, utterance: str) -> StreamingResponse:
    """Run the tool loop for one utterance and stream its events.

    Args:
        request: FastAPI Request (used to access the shared providers).
        utterance: The user's message.

    Returns:
        A streaming response of `<kind>:<json>` lines.
    """
    providers = _require_providers(request)
    emitter, queue = queue_emitter()
    session = AgentSession(utterance=utterance, emitter=emitter)
    LOGGER.info("Agent session %s received: %s", session.session_id, utterance)

    agent = ArticleAgent(
        providers.model,
        AgentTools(session, providers),
        max_steps=providers.settings.max_steps,
    )
    emitter.emit(STATUS, {"message": messages.ANALYZING})
    _spawn(agent.run(session))
    return streaming_response(queue)


async def stream_single_shot(request: Request, utterance: str) -> StreamingResponse:
    """Run the decide-then-execute pipeline for one utterance and stream its events."""
    providers = _require_providers(request)
    emitter, queue = queue_emitter()
    session = AgentSession(utterance=utterance, emitter=emitter)
    LOGGER.info("Single-shot session %s received: %s", session.session_id, utterance)

    pipeline = SingleShotPipeline(providers.classifier, AgentTools(session, providers))
    emitter.emit(STATUS, {"message": messages.ANALYZING})
    _spawn(pipeline.run(session))
    return streaming_response(queue)


async def stream_markdown_article(request: Request, topic: str) -> StreamingResponse:
    """Write a free-form markdown article about `topic`, streaming text deltas and illustrations.

    Raises:
        HTTPException(400) for an empty topic.
    """
    providers = _require_providers(request)
    cleaned = (topic or "").strip()
    if not cleaned:
        raise HTTPException(status_code=400, detail="Topic is required.")

    emitter, queue = queue_emitter()
    session = AgentSession(utterance=cleaned, emitter=emitter)
    LOGGER.info("Markdown session %s received topic: %s", session.session_id, cleaned)

    agent = MarkdownArticleAgent(
        providers.model,
        AgentTools(session, providers),
        max_steps=providers.settings.max_steps,
    )
    emitter.emit(STATUS, {"message": messages.ANALYZING})
    _spawn(agent.run(session))
    return streaming_response(queue)
