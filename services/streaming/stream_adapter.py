"""Line-delimited wire framing for the client stream.

Every record is `<kind>:<json payload>\\n`. `json.dumps` escapes embedded
newlines, so each record is exactly one line and one JSON value.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, AsyncIterator, Optional

from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from models.events import EventEnvelope

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
}


def _jsonable(payload: Any) -> Any:
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, mode="json")
    return payload


def encode_record(kind: str, payload: Any) -> str:
    """Frame one envelope as a single wire line."""
    if not kind or ":" in kind or "\n" in kind:
        raise ValueError(f"Invalid event kind: {kind!r}")
    body = json.dumps(_jsonable(payload), ensure_ascii=False, separators=(",", ":"))
    return f"{kind}:{body}\n"


def decode_record(line: str) -> EventEnvelope:
    """Parse one wire line back into an envelope."""
    kind, sep, body = line.rstrip("\n").partition(":")
    if not sep:
        raise ValueError(f"Malformed record: {line!r}")
    return EventEnvelope(kind=kind, payload=json.loads(body))


async def stream_records(queue: "asyncio.Queue[Optional[str]]") -> AsyncIterator[str]:
    """Yield records as they are queued until the closing sentinel arrives."""
    while True:
        record = await queue.get()
        if record is None:
            break
        yield record


def streaming_response(queue: "asyncio.Queue[Optional[str]]") -> StreamingResponse:
    """Wrap a record queue in the HTTP streaming response sent to the client."""
    return StreamingResponse(
        stream_records(queue),
        media_type=STREAM_MEDIA_TYPE,
        headers=dict(STREAM_HEADERS),
    )
