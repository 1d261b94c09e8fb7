import pytest
from fastapi.testclient import TestClient

from aeo_compare.config import Settings
from aeo_compare.main import create_app


class FakeProvider:
    """Stands in for OpenRouter; records the messages it was sent."""

    name = "fake"
    model = "test/model"

    def __init__(self, reply="Plain summary.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, messages):
        self.calls.append(messages)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, openrouter_api_key="sk-or-test-key")


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def app(settings, provider):
    return create_app(settings, provider)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
