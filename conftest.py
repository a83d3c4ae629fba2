import pytest
from fastapi.testclient import TestClient

from adventure.app import create_app
from adventure.config import Settings
from adventure.llm import LLMError
from adventure.models import GameState


class StubLLM:
    """Returns queued replies in order; an LLMError in the queue is raised instead."""

    def __init__(self, replies: list[str | LLMError] | None = None) -> None:
        self.replies = list(replies or [])
        self.prompts: list[str] = []

    async def __call__(self, stage: str, prompt: str) -> str:
        self.prompts.append(prompt)
        reply = self.replies.pop(0)
        if isinstance(reply, LLMError):
            raise reply
        return reply


@pytest.fixture
def state() -> GameState:
    """A session's state as it is right after a new game starts."""
    return GameState()


@pytest.fixture
def stub_llm() -> StubLLM:
    return StubLLM()


@pytest.fixture
def client(stub_llm):
    app = create_app(settings=Settings(), llm=stub_llm)
    with TestClient(app) as c:
        yield c
