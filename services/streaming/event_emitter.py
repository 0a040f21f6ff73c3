"""Best-effort, ordered event channel from a session to its client."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional, Tuple

from services.streaming.stream_adapter import encode_record

LOGGER = logging.getLogger(__name__)


class EventEmitter:
    """Append-only emitter bound to one request's channel.

    `emit` never raises. Failures of the sink are logged and dropped, and every
    emit after `close()` is ignored.
    """

    def __init__(
        self,
        sink: Callable[[str], Any],
        on_close: Optional[Callable[[], Any]] = None,
    ) -> None:
        self._sink = sink
        self._on_close = on_close
        self._closed = False
        # Every kind passed to emit, delivered or not.
        self.kinds: List[str] = []
        self.delivered = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def emit(self, kind: str, payload: Any) -> bool:
        """Frame and deliver one envelope. Returns False if it was dropped."""
        self.kinds.append(kind)
        if self._closed:
            LOGGER.debug("Dropping %s event emitted after close", kind)
            return False
        try:
            record = encode_record(kind, payload)
            self._sink(record)
        except Exception as exc:
            LOGGER.debug("Failed to deliver %s event: %s", kind, exc)
            return False
        self.delivered += 1
        return True

    def close(self) -> None:
        """Release the channel. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._on_close is not None:
            try:
                self._on_close()
            except Exception as exc:
                LOGGER.debug("Failed to close event channel: %s", exc)


def queue_emitter() -> Tuple[EventEmitter, "asyncio.Queue[Optional[str]]"]:
    """Return an emitter feeding a fresh queue, closed with a None sentinel."""
    queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
    emitter = EventEmitter(queue.put_nowait, on_close=lambda: queue.put_nowait(None))
    return emitter, queue
