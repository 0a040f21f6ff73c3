"""Tests for turning Responses API output into typed agent actions."""

import json
from types import SimpleNamespace

import pytest

from services.agent.response_parser import extract_text, parse_model_action, tool_call_items
from services.agent.tool_schema import (
    MARKDOWN_TOOL_DEFINITIONS,
    TOOL_DEFINITIONS,
    GenerateArticleRequest,
    GenerateIllustrationRequest,
    GenerateImageRequest,
    SearchWebRequest,
    parse_tool_request,
)


def _function_call(name, arguments, call_id="call_1"):
    return SimpleNamespace(type="function_call", name=name, arguments=json.dumps(arguments), call_id=call_id)


def _message(text):
    return SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text=text)])


class TestParseToolRequest:
    def test_search(self) -> None:
        request = parse_tool_request("search_web", '{"query": "AI"}', call_id="c1")
        assert request == SearchWebRequest(query="AI", call_id="c1")

    def test_article(self) -> None:
        request = parse_tool_request("generate_article", {"topic": "AI", "searchResults": "digest"})
        assert isinstance(request, GenerateArticleRequest)
        assert request.search_results == "digest"

    def test_image_coerces_index(self) -> None:
        request = parse_tool_request("generate_image", {"prompt": "p", "pointIndex": "2", "heading": "h"})
        assert isinstance(request, GenerateImageRequest)
        assert request.point_index == 2

    def test_unknown_tool(self) -> None:
        with pytest.raises(ValueError, match="Unsupported tool"):
            parse_tool_request("delete_everything", "{}")

    def test_missing_argument(self) -> None:
        with pytest.raises(ValueError):
            parse_tool_request("search_web", "{}")

    def test_invalid_json(self) -> None:
        with pytest.raises(ValueError):
            parse_tool_request("search_web", "{not json")

    def test_declarations_cover_every_tool(self) -> None:
        assert [definition["name"] for definition in TOOL_DEFINITIONS] == [
            "search_web",
            "generate_article",
            "generate_image",
        ]

    def test_markdown_declarations(self) -> None:
        assert [definition["name"] for definition in MARKDOWN_TOOL_DEFINITIONS] == [
            "search_web",
            "generate_illustration",
        ]

    def test_illustration(self) -> None:
        request = parse_tool_request("generate_illustration", {"prompt": "p", "label": "l"}, call_id="c4")
        assert request == GenerateIllustrationRequest(prompt="p", label="l", call_id="c4")


class TestParseModelAction:
    def test_first_function_call_wins(self) -> None:
        response = SimpleNamespace(output=[
            _message("thinking out loud"),
            _function_call("search_web", {"query": "AI"}, "call_9"),
            _function_call("generate_article", {"topic": "AI", "searchResults": ""}, "call_10"),
        ])

        action = parse_model_action(response)

        assert not action.is_final
        assert action.tool_request == SearchWebRequest(query="AI", call_id="call_9")

    def test_text_answer(self) -> None:
        response = SimpleNamespace(output=[_message("  تم إنشاء المقال بنجاح!  ")])

        action = parse_model_action(response)

        assert action.is_final
        assert action.text == "تم إنشاء المقال بنجاح!"

    def test_dict_output_items(self) -> None:
        response = {"output": [{"type": "message", "content": [{"type": "output_text", "text": "hi"}]}]}
        assert extract_text(response) == "hi"

    def test_falls_back_to_output_text(self) -> None:
        response = SimpleNamespace(output=[], output_text="fallback")
        assert extract_text(response) == "fallback"


def test_tool_call_items_pair_call_and_output() -> None:
    request = GenerateImageRequest(prompt="p", point_index=1, heading="h", call_id="call_3")

    call, output = tool_call_items(request, {"success": True, "pointIndex": 1})

    assert call["type"] == "function_call"
    assert call["name"] == "generate_image"
    assert json.loads(call["arguments"]) == {"prompt": "p", "pointIndex": 1, "heading": "h"}
    assert output == {
        "type": "function_call_output",
        "call_id": "call_3",
        "output": '{"success": true, "pointIndex": 1}',
    }
