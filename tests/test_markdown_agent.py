"""Tests for the free-form markdown writer and its streamed text deltas."""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from fakes import FakeImages, FakeStreamingModel
from models.events import CHAT, DONE, ERROR, IMAGE, STATUS, TEXT
from models.session_models import AgentState
from services.agent import messages
from services.agent.response_parser import ModelAction
from services.agent.step_loop import MarkdownArticleAgent
from services.agent.tool_schema import (
    MARKDOWN_TOOL_DEFINITIONS,
    GenerateArticleRequest,
    GenerateIllustrationRequest,
    SearchWebRequest,
)
from services.agent.tools import AgentTools
from services.openai.agent_model import AgentModel

HEADING_DELTA = "## مقدمة\n\nالذكاء الاصطناعي"
QUOTED_DELTA = 'قال الباحث: "المستقبل هنا"\r\n\\ نهاية'


def _agent(session, providers, script):
    model = FakeStreamingModel(script)
    return model, MarkdownArticleAgent(model, AgentTools(session, providers))


class TestMarkdownArticleAgent:
    @pytest.mark.asyncio
    async def test_each_delta_is_one_record(self, session, providers, sink) -> None:
        _, agent = _agent(session, providers, [([HEADING_DELTA, QUOTED_DELTA], ModelAction(text=""))])

        state = await agent.run(session)

        assert state == AgentState.FINAL_ANSWER
        assert all(record.count("\n") == 1 and record.endswith("\n") for record in sink.records)
        text_events = [event for event in sink.events if event.kind == TEXT]
        assert [event.payload["delta"] for event in text_events] == [HEADING_DELTA, QUOTED_DELTA]
        assert sink.kinds == [TEXT, TEXT, STATUS, DONE]

    @pytest.mark.asyncio
    async def test_final_text_is_not_repeated_as_chat(self, session, providers, sink) -> None:
        _, agent = _agent(session, providers, [(["# عنوان"], ModelAction(text="# عنوان"))])

        await agent.run(session)

        assert CHAT not in sink.kinds

    @pytest.mark.asyncio
    async def test_illustrations_stay_out_of_model_context(self, session, providers, sink) -> None:
        providers.images = FakeImages(result="data:image/png;base64," + "Z" * 64)
        model, agent = _agent(session, providers, [
            (["سأبحث أولاً."], ModelAction(tool_request=SearchWebRequest(query="AI", call_id="s"))),
            ([], ModelAction(tool_request=GenerateIllustrationRequest(prompt="robot", label="روبوت", call_id="i"))),
            ([HEADING_DELTA], ModelAction(text=HEADING_DELTA)),
        ])

        state = await agent.run(session)

        assert state == AgentState.FINAL_ANSWER
        images = [event for event in sink.events if event.kind == IMAGE]
        assert images[0].payload == {"label": "روبوت", "imageData": providers.images.result}
        final_context = json.dumps(model.contexts[-1], ensure_ascii=False)
        assert "Z" * 64 not in final_context
        assert "[IMAGE_GENERATED:روبوت]" in final_context
        assert all(tools == MARKDOWN_TOOL_DEFINITIONS for tools in model.tools_seen)
        assert model.contexts[0][1]["content"][0]["text"].startswith(
            "Research and write a comprehensive article about: " + session.utterance
        )

    @pytest.mark.asyncio
    async def test_undeclared_tool_is_session_fatal(self, session, providers, sink) -> None:
        _, agent = _agent(session, providers, [
            ([], ModelAction(tool_request=GenerateArticleRequest(topic="AI", search_results="", call_id="a"))),
        ])

        state = await agent.run(session)

        assert state == AgentState.FAILED
        assert providers.writer.calls == []
        assert sink.kinds == [ERROR]

    @pytest.mark.asyncio
    async def test_stream_failure_keeps_sent_text(self, session, providers, sink) -> None:
        _, agent = _agent(session, providers, [
            (["جزء أول"], ModelAction(tool_request=SearchWebRequest(query="AI", call_id="s"))),
            RuntimeError("stream dropped"),
        ])

        state = await agent.run(session)

        assert state == AgentState.FAILED
        assert sink.kinds[0] == TEXT
        assert sink.kinds[-1] == ERROR
        assert sink.events[-1].payload == {"message": messages.SESSION_FAILED}
        assert "stream dropped" not in "".join(sink.records)


# ============================================================================
# STREAMED MODEL TURN
# ============================================================================


def _stream(*events):
    async def iterate():
        for event in events:
            yield event

    return iterate()


def _completed(output):
    return SimpleNamespace(type="response.completed", response=SimpleNamespace(output=output))


def _client(stream):
    client = MagicMock()
    client.responses.create = AsyncMock(return_value=stream)
    return client


class TestStreamAction:
    @pytest.mark.asyncio
    async def test_forwards_deltas_and_parses_completed_response(self) -> None:
        message = SimpleNamespace(type="message", content=[SimpleNamespace(type="output_text", text="ab")])
        client = _client(_stream(
            SimpleNamespace(type="response.created"),
            SimpleNamespace(type="response.output_text.delta", delta="a"),
            SimpleNamespace(type="response.output_text.delta", delta="b"),
            _completed([message]),
        ))
        deltas = []

        action = await AgentModel(client).stream_action([], MARKDOWN_TOOL_DEFINITIONS, deltas.append)

        assert deltas == ["a", "b"]
        assert action.is_final
        assert action.text == "ab"
        kwargs = client.responses.create.await_args.kwargs
        assert kwargs["stream"] is True
        assert kwargs["parallel_tool_calls"] is False

    @pytest.mark.asyncio
    async def test_function_call_in_completed_response(self) -> None:
        call = SimpleNamespace(
            type="function_call",
            name="generate_illustration",
            arguments='{"prompt": "p", "label": "l"}',
            call_id="c1",
        )
        client = _client(_stream(_completed([call])))

        action = await AgentModel(client).stream_action([], MARKDOWN_TOOL_DEFINITIONS, lambda delta: None)

        assert action.tool_request == GenerateIllustrationRequest(prompt="p", label="l", call_id="c1")

    @pytest.mark.asyncio
    async def test_missing_completion_raises(self) -> None:
        client = _client(_stream(SimpleNamespace(type="response.output_text.delta", delta="a")))

        with pytest.raises(RuntimeError):
            await AgentModel(client).stream_action([], MARKDOWN_TOOL_DEFINITIONS, lambda delta: None)

    @pytest.mark.asyncio
    async def test_error_event_raises(self) -> None:
        client = _client(_stream(SimpleNamespace(type="error", message="overloaded")))

        with pytest.raises(RuntimeError):
            await AgentModel(client).stream_action([], MARKDOWN_TOOL_DEFINITIONS, lambda delta: None)
