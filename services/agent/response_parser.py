"""Helpers to turn Responses API output into the agent's next action."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from services.agent.tool_schema import ToolRequest, parse_tool_request


@dataclass(frozen=True)
class ModelAction:
    """Either one tool request or a final text answer."""

    tool_request: Optional[ToolRequest] = None
    text: str = ""

    @property
    def is_final(self) -> bool:
        return self.tool_request is None


def _field(item: Any, name: str, default: Any = None) -> Any:
    if isinstance(item, dict):
        return item.get(name, default)
    return getattr(item, name, default)


def parse_model_action(response: Any) -> ModelAction:
    """Return the first function call as a typed request, else the output text."""
    for item in _field(response, "output", None) or []:
        if _field(item, "type") != "function_call":
            continue
        request = parse_tool_request(
            _field(item, "name", ""),
            _field(item, "arguments", "{}"),
            call_id=_field(item, "call_id", "") or "",
        )
        return ModelAction(tool_request=request)
    return ModelAction(text=extract_text(response).strip())


def extract_text(response: Any) -> str:
    """Concatenate output_text parts from message items."""
    parts: List[str] = []
    for item in _field(response, "output", None) or []:
        if _field(item, "type") != "message":
            continue
        for content in _field(item, "content", None) or []:
            if _field(content, "type") == "output_text":
                parts.append(_field(content, "text", "") or "")
    if parts:
        return "".join(parts)
    return _field(response, "output_text", "") or ""


def message_item(role: str, text: str) -> Dict[str, Any]:
    """Build one input message in Responses API format."""
    return {"type": "message", "role": role, "content": [{"type": "input_text", "text": text}]}


def tool_call_items(request: ToolRequest, output: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Return the function call and its compact output, ready to append to context."""
    return [
        {
            "type": "function_call",
            "call_id": request.call_id,
            "name": request.name,
            "arguments": json.dumps(request.arguments(), ensure_ascii=False),
        },
        {
            "type": "function_call_output",
            "call_id": request.call_id,
            "output": json.dumps(output, ensure_ascii=False),
        },
    ]
