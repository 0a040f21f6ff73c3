"""Pytest fixtures shared by the agent tests.

Every external capability is replaced by a fake from `fakes.py`, so the
suite runs offline.
"""

from types import SimpleNamespace

import pytest

from fakes import FakeClassifier, FakeImages, FakeModel, FakeSearch, FakeWriter, RecordingSink, make_article
from models.session_models import AgentSession
from services.streaming.event_emitter import EventEmitter
from utils.settings import Settings


@pytest.fixture
def settings() -> Settings:
    return Settings(openai_api_key="sk-test")


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def session(sink) -> AgentSession:
    return AgentSession(utterance="اكتب مقال عن الذكاء الاصطناعي", emitter=EventEmitter(sink))


@pytest.fixture
def providers(settings):
    return SimpleNamespace(
        settings=settings,
        model=FakeModel([]),
        classifier=FakeClassifier(None),
        writer=FakeWriter(make_article()),
        search=FakeSearch(),
        images=FakeImages(),
        openai_client=None,
    )
