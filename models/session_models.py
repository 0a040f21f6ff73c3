"""Session domain models for one agent request."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import uuid4

from models.article import Article

if TYPE_CHECKING:
    from services.streaming.event_emitter import EventEmitter


class AgentState(str, Enum):
    """Lifecycle of a session."""

    RUNNING = "running"
    FINAL_ANSWER = "final_answer"
    BUDGET_EXHAUSTED = "budget_exhausted"
    FAILED = "failed"

    @property
    def succeeded(self) -> bool:
        return self in (AgentState.FINAL_ANSWER, AgentState.BUDGET_EXHAUSTED)


@dataclass
class ToolInvocationRecord:
    """What one tool call received, returned to the model, and emitted."""

    tool_name: str
    input: Dict[str, Any]
    output: Dict[str, Any]
    emitted_events: List[str] = field(default_factory=list)
    latency: float = 0.0


@dataclass
class AgentSession:
    """Ephemeral state of a single request, discarded when the stream closes."""

    utterance: str
    emitter: "EventEmitter"
    session_id: str = field(default_factory=lambda: uuid4().hex)
    context: List[Dict[str, Any]] = field(default_factory=list)
    step: int = 0
    state: AgentState = AgentState.RUNNING
    article: Optional[Article] = None
    images: Dict[int, str] = field(default_factory=dict)
    last_invocation: Optional[ToolInvocationRecord] = None
    created_at: float = field(default_factory=lambda: time.time())

    def has_slot(self, point_index: int) -> bool:
        """Return True when the current article declares the given point index."""
        if self.article is None:
            return False
        return 0 <= point_index < len(self.article.points)

    def attach_image(self, point_index: int, image_data: str) -> None:
        """Record a generated image against an existing article slot."""
        if not self.has_slot(point_index):
            raise IndexError(f"No article point at index {point_index}")
        self.images[point_index] = image_data
