"""Function declarations for the article agent and the typed requests they produce."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Union

SEARCH_WEB = "search_web"
GENERATE_ARTICLE = "generate_article"
GENERATE_IMAGE = "generate_image"
GENERATE_ILLUSTRATION = "generate_illustration"

SEARCH_WEB_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": SEARCH_WEB,
    "description": (
        "Search the web for information about a topic. "
        "Use this to gather information before writing an article."
    ),
    "parameters": {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "The search query to find information about"},
        },
        "required": ["query"],
        "additionalProperties": False,
    },
    "strict": True,
}

GENERATE_ARTICLE_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": GENERATE_ARTICLE,
    "description": "Generate a structured article in Arabic. Use AFTER searching for information.",
    "parameters": {
        "type": "object",
        "properties": {
            "topic": {"type": "string", "description": "The article topic to write about"},
            "searchResults": {"type": "string", "description": "Search results to base the article on"},
        },
        "required": ["topic", "searchResults"],
        "additionalProperties": False,
    },
    "strict": True,
}

GENERATE_IMAGE_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": GENERATE_IMAGE,
    "description": "Generate an image for an article point. Call this for each point that needs an image.",
    "parameters": {
        "type": "object",
        "properties": {
            "prompt": {"type": "string", "description": "Image description in English"},
            "pointIndex": {"type": "integer", "description": "Index of the article point (0-3)"},
            "heading": {"type": "string", "description": "Heading of the point for display purposes"},
        },
        "required": ["prompt", "pointIndex", "heading"],
        "additionalProperties": False,
    },
    "strict": True,
}

GENERATE_ILLUSTRATION_DEFINITION: Dict[str, Any] = {
    "type": "function",
    "name": GENERATE_ILLUSTRATION,
    "description": "Generate an illustration for the markdown article. Use this for 1-2 key sections only.",
    "parameters": {
        "type": "object",
        "properties": {
            "prompt": {"type": "string", "description": "Brief image description in English (max 30 words)"},
            "label": {"type": "string", "description": "Short image label"},
        },
        "required": ["prompt", "label"],
        "additionalProperties": False,
    },
    "strict": True,
}

TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    SEARCH_WEB_DEFINITION,
    GENERATE_ARTICLE_DEFINITION,
    GENERATE_IMAGE_DEFINITION,
]

# Free-form markdown writer: search plus standalone illustrations, no structured article.
MARKDOWN_TOOL_DEFINITIONS: List[Dict[str, Any]] = [
    SEARCH_WEB_DEFINITION,
    GENERATE_ILLUSTRATION_DEFINITION,
]


@dataclass(frozen=True)
class SearchWebRequest:
    query: str
    call_id: str = ""

    name = SEARCH_WEB

    def arguments(self) -> Dict[str, Any]:
        return {"query": self.query}


@dataclass(frozen=True)
class GenerateArticleRequest:
    topic: str
    search_results: str
    call_id: str = ""

    name = GENERATE_ARTICLE

    def arguments(self) -> Dict[str, Any]:
        return {"topic": self.topic, "searchResults": self.search_results}


@dataclass(frozen=True)
class GenerateImageRequest:
    prompt: str
    point_index: int
    heading: str
    call_id: str = ""

    name = GENERATE_IMAGE

    def arguments(self) -> Dict[str, Any]:
        return {"prompt": self.prompt, "pointIndex": self.point_index, "heading": self.heading}


@dataclass(frozen=True)
class GenerateIllustrationRequest:
    prompt: str
    label: str
    call_id: str = ""

    name = GENERATE_ILLUSTRATION

    def arguments(self) -> Dict[str, Any]:
        return {"prompt": self.prompt, "label": self.label}


ToolRequest = Union[SearchWebRequest, GenerateArticleRequest, GenerateImageRequest, GenerateIllustrationRequest]


def parse_tool_request(name: str, arguments: Any, call_id: str = "") -> ToolRequest:
    """Build the typed request for a model function call.

    Args:
        name: Function name chosen by the model.
        arguments: JSON string (or already decoded dict) of call arguments.
        call_id: Identifier used to pair the call with its output.

    Raises:
        ValueError: If the tool is unknown or its arguments are malformed.
    """
    if isinstance(arguments, str):
        try:
            args = json.loads(arguments or "{}")
        except json.JSONDecodeError as exc:
            raise ValueError(f"Arguments for '{name}' are not valid JSON.") from exc
    else:
        args = dict(arguments or {})
    if not isinstance(args, dict):
        raise ValueError(f"Arguments for '{name}' must be a JSON object.")

    try:
        if name == SEARCH_WEB:
            return SearchWebRequest(query=str(args["query"]), call_id=call_id)
        if name == GENERATE_ARTICLE:
            return GenerateArticleRequest(
                topic=str(args["topic"]),
                search_results=str(args.get("searchResults") or ""),
                call_id=call_id,
            )
        if name == GENERATE_IMAGE:
            return GenerateImageRequest(
                prompt=str(args["prompt"]),
                point_index=int(args["pointIndex"]),
                heading=str(args.get("heading") or ""),
                call_id=call_id,
            )
        if name == GENERATE_ILLUSTRATION:
            return GenerateIllustrationRequest(
                prompt=str(args["prompt"]),
                label=str(args.get("label") or ""),
                call_id=call_id,
            )
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Missing or invalid arguments for '{name}': {exc}") from exc
    except ValueError as exc:
        raise ValueError(f"Invalid arguments for '{name}': {exc}") from exc

    raise ValueError(f"Unsupported tool '{name}'.")
