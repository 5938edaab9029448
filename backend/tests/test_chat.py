"""
Tests for the chat surface and its HTTP transport.
"""

import json

import httpx
import pytest

from bottleneck_diagnostic.assistant.chat import (
    AssistantTransportError,
    ChatSession,
    HttpAssistantTransport,
    opening_message,
)
from bottleneck_diagnostic.assistant.prompts import AUTH_FAILURE_MESSAGE, FALLBACK_MESSAGE
from bottleneck_diagnostic.core.models import Category
from bottleneck_diagnostic.core.scoring import describe_result


class RecordingTransport:
    def __init__(self, reply="Here is more detail.", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def __call__(self, message, history, result):
        self.calls.append((message, list(history), result))
        if self.error is not None:
            raise self.error
        return self.reply


class TestChatSession:
    """Tests for ChatSession."""

    def test_opening_message(self):
        chat = ChatSession(Category.ROLE, RecordingTransport())

        assert len(chat.messages) == 1
        greeting = chat.messages[0]
        assert greeting.role == "model"
        assert "**Role & Ownership Bottleneck**" in greeting.text
        assert describe_result(Category.ROLE) in greeting.text
        assert greeting.text == opening_message(Category.ROLE)

    @pytest.mark.asyncio
    async def test_send_appends_turns(self):
        transport = RecordingTransport()
        chat = ChatSession(Category.PROCESS, transport)

        turn = await chat.send("  What now?  ")

        assert turn.text == "Here is more detail."
        assert [m.role for m in chat.messages] == ["model", "user", "model"]
        assert chat.messages[1].text == "What now?"

        message, history, result = transport.calls[0]
        assert message == "What now?"
        assert len(history) == 1
        assert result == "Process Bottleneck"
        assert not chat.is_loading

    @pytest.mark.asyncio
    async def test_blank_input_ignored(self):
        transport = RecordingTransport()
        chat = ChatSession(Category.PROCESS, transport)

        assert await chat.send("   ") is None
        assert transport.calls == []
        assert len(chat.messages) == 1

    @pytest.mark.asyncio
    async def test_send_while_loading_ignored(self):
        transport = RecordingTransport()
        chat = ChatSession(Category.PROCESS, transport)
        chat.is_loading = True

        assert await chat.send("Hello") is None
        assert transport.calls == []

    @pytest.mark.asyncio
    async def test_failure_appends_apology(self):
        chat = ChatSession(Category.VISIBILITY, RecordingTransport(error=AssistantTransportError("boom", 500)))

        turn = await chat.send("Hello")

        assert turn.role == "model"
        assert turn.text == FALLBACK_MESSAGE
        assert len(chat.messages) == 3
        assert not chat.is_loading

    @pytest.mark.asyncio
    async def test_auth_failure_message(self):
        chat = ChatSession(Category.VISIBILITY, RecordingTransport(error=AssistantTransportError("denied", 403)))

        turn = await chat.send("Hello")

        assert turn.text == AUTH_FAILURE_MESSAGE

    @pytest.mark.asyncio
    async def test_user_can_keep_typing_after_failure(self):
        transport = RecordingTransport(error=RuntimeError("network down"))
        chat = ChatSession(Category.PROCESS, transport)
        await chat.send("first")

        transport.error = None
        turn = await chat.send("second")

        assert turn.text == "Here is more detail."
        assert len(transport.calls[1][1]) == 3


class TestHttpAssistantTransport:
    """Tests for HttpAssistantTransport with a mocked server."""

    @pytest.mark.asyncio
    async def test_posts_payload(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"text": "Hello"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            transport = HttpAssistantTransport("http://testserver/", client=client)
            chat = ChatSession(Category.ROLE, transport)
            turn = await chat.send("Hi")

        assert turn.text == "Hello"
        assert seen["url"] == "http://testserver/api/assistant"
        assert seen["body"]["message"] == "Hi"
        assert seen["body"]["result"] == "Role & Ownership Bottleneck"
        assert seen["body"]["history"][0]["role"] == "model"

    @pytest.mark.asyncio
    async def test_error_status(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, json={"error": "API key not valid"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            transport = HttpAssistantTransport("http://testserver", client=client)
            with pytest.raises(AssistantTransportError) as exc_info:
                await transport("Hi", [], "Process Bottleneck")

        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "API key not valid"
        assert exc_info.value.is_auth_failure

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            transport = HttpAssistantTransport("http://testserver", client=client)
            with pytest.raises(AssistantTransportError) as exc_info:
                await transport("Hi", [], "Process Bottleneck")

        assert exc_info.value.status_code is None
