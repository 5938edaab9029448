import logging
from typing import Awaitable, Callable, List, Optional, Sequence

import httpx

from .prompts import OPENING_MESSAGE, FALLBACK_MESSAGE, AUTH_FAILURE_MESSAGE
from ..core.models import Category, ConversationTurn
from ..core.scoring import describe_result

logger = logging.getLogger(__name__)


class AssistantTransportError(Exception):
    """Assistant endpoint answered with an error or could not be reached"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_failure(self) -> bool:
        return self.status_code in (401, 403)


Transport = Callable[[str, Sequence[ConversationTurn], str], Awaitable[str]]


class HttpAssistantTransport:
    """Posts chat turns to the assistant endpoint"""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = 60.0,
                 client: Optional[httpx.AsyncClient] = None):
        self.url = base_url.rstrip("/") + "/api/assistant"
        self.timeout = timeout
        self.client = client

    async def __call__(self, message: str, history: Sequence[ConversationTurn], result: str) -> str:
        payload = {
            "message": message,
            "history": [turn.model_dump() for turn in history],
            "result": result,
        }
        try:
            if self.client is not None:
                response = await self.client.post(self.url, json=payload, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise AssistantTransportError(f"Failed to reach assistant: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            raise AssistantTransportError(
                data.get("error") or "Failed to fetch response",
                status_code=response.status_code,
            )
        return data.get("text", "")


class ChatSession:
    """
    Conversation shown to the visitor after the diagnostic

    History is append-only. Only one request may be outstanding; sends made
    while waiting are ignored. Failures become an apology from the assistant.
    """

    def __init__(self, result: Category, transport: Transport):
        self.result = result
        self.transport = transport
        self.is_loading = False
        self.messages: List[ConversationTurn] = [
            ConversationTurn(role="model", text=opening_message(result))
        ]

    async def send(self, text: str) -> Optional[ConversationTurn]:
        """
        Send a user message

        Returns:
            The assistant turn appended, or None when nothing was sent
        """
        user_message = (text or "").strip()
        if not user_message or self.is_loading:
            return None

        current_history = list(self.messages)
        self.messages.append(ConversationTurn(role="user", text=user_message))
        self.is_loading = True

        try:
            reply = await self.transport(user_message, current_history, self.result.value)
        except Exception as e:
            logger.error(f"Error communicating with assistant: {e}")
            if isinstance(e, AssistantTransportError) and e.is_auth_failure:
                reply = AUTH_FAILURE_MESSAGE
            else:
                reply = FALLBACK_MESSAGE
        finally:
            self.is_loading = False

        if not reply:
            return None
        turn = ConversationTurn(role="model", text=reply)
        self.messages.append(turn)
        return turn


def opening_message(result: Category) -> str:
    return OPENING_MESSAGE.format(result=result.value, description=describe_result(result))
