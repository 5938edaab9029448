"""
Shared fixtures: a fake chat provider and an API client wired to it.
"""

import asyncio
from typing import List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from bottleneck_diagnostic.assistant.engine import AssistantProxy
from bottleneck_diagnostic.assistant.provider import ChatProvider
from bottleneck_diagnostic.api.routes import get_assistant_proxy
from bottleneck_diagnostic.config import Settings
from bottleneck_diagnostic.core.models import ConversationTurn
from bottleneck_diagnostic.main import app


class FakeProviderError(Exception):
    """Mimics an SDK error that carries an HTTP status and message."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status


class FakeProvider(ChatProvider):
    """Records calls and answers with a fixed reply or error."""

    def __init__(self, reply: str = "Hello", error: Optional[Exception] = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    async def send(self, system_prompt: str, history: Sequence[ConversationTurn], message: str) -> str:
        self.calls.append({
            "system_prompt": system_prompt,
            "history": list(history),
            "message": message,
        })
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def test_settings():
    return Settings(API_KEY="test-key", ASSISTANT_TIMEOUT_SECONDS=1.0)


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def client(provider, test_settings):
    proxy = AssistantProxy(provider=provider, settings=test_settings)
    app.dependency_overrides[get_assistant_proxy] = lambda: proxy
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
