"""
Generative AI provider behind the assistant

The proxy only needs one capability: send a system prompt, the prior
conversation and a new message, and get reply text back.
"""

from abc import ABC, abstractmethod
import logging
from typing import List, Optional, Sequence

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from ..core.models import ConversationTurn

logger = logging.getLogger(__name__)


class ChatProvider(ABC):
    """Narrow capability interface used by the assistant proxy"""

    @abstractmethod
    async def send(
        self,
        system_prompt: str,
        history: Sequence[ConversationTurn],
        message: str,
    ) -> str:
        """
        Generate the reply to a new message.

        Args:
            system_prompt: Fixed persona instruction
            history: Prior turns, oldest first
            message: Newest user message

        Returns:
            Reply text

        Raises:
            Exception: provider failures propagate unchanged for the proxy to normalize
        """


def to_messages(system_prompt: str, history: Sequence[ConversationTurn], message: str) -> List[BaseMessage]:
    """Map conversation turns onto langchain chat messages"""
    messages: List[BaseMessage] = [SystemMessage(content=system_prompt)]
    for turn in history:
        if turn.role == "user":
            messages.append(HumanMessage(content=turn.text))
        else:
            messages.append(AIMessage(content=turn.text))
    messages.append(HumanMessage(content=message))
    return messages


def message_text(content) -> str:
    """Flatten chat model content, which may be a list of parts"""
    if isinstance(content, str):
        return content
    parts = []
    for part in content or []:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


class GeminiChatProvider(ChatProvider):
    """Google Gemini chat models through langchain"""

    def __init__(self, api_key: str, model: str, temperature: float = 0.7,
                 llm: Optional[ChatGoogleGenerativeAI] = None):
        self.model = model
        self.llm = llm or ChatGoogleGenerativeAI(
            model=model,
            google_api_key=api_key,
            temperature=temperature,
            max_retries=0,
        )
        logger.info(f"Gemini chat provider initialized with model {model}")

    async def send(
        self,
        system_prompt: str,
        history: Sequence[ConversationTurn],
        message: str,
    ) -> str:
        messages = to_messages(system_prompt, history, message)
        response = await self.llm.ainvoke(messages)
        return message_text(response.content)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(model={self.model!r})"
