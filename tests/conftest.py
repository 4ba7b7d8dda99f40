import copy
from types import SimpleNamespace

import httpx
import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.stability.image_generator import StabilityImageGenerator
from utils.settings import Settings


class FakeCompletions:
    """Stand-in for `AsyncOpenAI().chat.completions` recording every call."""

    def __init__(self) -> None:
        self.calls = []
        self.replies = []
        self.error = None

    async def create(self, **kwargs):
        self.calls.append(copy.deepcopy(kwargs))
        if self.error is not None:
            raise self.error
        reply = self.replies.pop(0) if self.replies else f"reply {len(self.calls)}"
        message = SimpleNamespace(role="assistant", content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], usage=None)


class FakeOpenAI:
    def __init__(self) -> None:
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        stability_api_key="test-stability-key",
        openai_api_key="test-openai-key",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def fake_openai():
    return FakeOpenAI()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app, fake_openai):
    with TestClient(app) as test_client:
        app.state.openai_client = fake_openai
        yield test_client


@pytest.fixture
def stability(app, client):
    """Route Stability traffic to a handler set by the test; records requests."""
    state = SimpleNamespace(handler=None, requests=[])

    def dispatch(request: httpx.Request) -> httpx.Response:
        state.requests.append(request)
        return state.handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(dispatch))
    app.state.http_client = http_client
    app.state.image_generator = StabilityImageGenerator(http_client, "test-stability-key")
    return state
