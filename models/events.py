from __future__ import annotations

from dataclasses import dataclass
from typing import Any

STATUS = "status"
CHAT = "chat"
TEXT = "text"
ARTICLE = "article"
IMAGE = "image"
DONE = "done"
ERROR = "error"

TERMINAL_KINDS = frozenset({DONE, ERROR})


@dataclass(frozen=True)
class EventEnvelope:
    """One typed unit on the client-visible stream."""

    kind: str
    payload: Any
