import asyncio
import logging
from typing import Optional

from .prompts import SYSTEM_INSTRUCTION, AUTH_OPERATOR_HINT
from .provider import ChatProvider, GeminiChatProvider
from ..config import Settings, settings as default_settings
from ..core.errors import (
    ConfigurationError, InvalidRequestError, UpstreamError,
    UpstreamAuthError, UpstreamTimeoutError
)
from ..core.models import AssistantRequest

logger = logging.getLogger(__name__)

DEFAULT_UPSTREAM_STATUS = 500
DEFAULT_UPSTREAM_MESSAGE = "Internal Server Error"
AUTH_STATUSES = (401, 403)


def build_system_prompt(result: str, settings: Settings = default_settings) -> str:
    """Persona instruction naming the diagnostic and the user's result verbatim"""
    return SYSTEM_INSTRUCTION.format(
        brand_name=settings.BRAND_NAME,
        diagnostic_title=settings.DIAGNOSTIC_TITLE,
        result=result,
    )


def _upstream_status(exc: Exception) -> int:
    for attr in ("status_code", "code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool) and 400 <= value <= 599:
            return value
    return DEFAULT_UPSTREAM_STATUS


def _upstream_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    return str(exc) or DEFAULT_UPSTREAM_MESSAGE


def normalize_upstream_error(exc: Exception) -> UpstreamError:
    """Reduce a provider exception to its status code and message"""
    if isinstance(exc, UpstreamError):
        return exc
    status = _upstream_status(exc)
    message = _upstream_message(exc)
    if status in AUTH_STATUSES:
        return UpstreamAuthError(message, status_code=status, hint=AUTH_OPERATOR_HINT)
    return UpstreamError(message, status_code=status)


class AssistantProxy:
    """
    Stateless relay between the chat surface and the AI provider

    Each call carries the whole conversation; nothing is kept between calls.
    Calls are not idempotent, every one may produce a new billed generation.
    """

    def __init__(self, provider: Optional[ChatProvider], settings: Settings = default_settings):
        self.provider = provider
        self.settings = settings

    @classmethod
    def from_settings(cls, settings: Settings = default_settings) -> "AssistantProxy":
        """Build the proxy, leaving it unconfigured when no credential is set"""
        if not settings.assistant_configured:
            logger.warning("API_KEY not set - assistant requests will be rejected")
            return cls(provider=None, settings=settings)

        provider = GeminiChatProvider(
            api_key=settings.API_KEY.strip(),
            model=settings.ASSISTANT_MODEL,
            temperature=settings.ASSISTANT_TEMPERATURE,
        )
        return cls(provider=provider, settings=settings)

    @property
    def configured(self) -> bool:
        return self.provider is not None

    async def reply(self, request: AssistantRequest) -> str:
        """
        Forward one chat turn and return the model's reply verbatim

        Raises:
            InvalidRequestError: message missing or blank
            ConfigurationError: no provider credential
            UpstreamError: provider failed, with its status and message
            UpstreamTimeoutError: provider exceeded the configured wait
        """
        if not request.message or not request.message.strip():
            raise InvalidRequestError("Message is required")

        if self.provider is None:
            raise ConfigurationError()

        system_prompt = build_system_prompt(request.result, self.settings)

        try:
            text = await asyncio.wait_for(
                self.provider.send(system_prompt, request.history, request.message),
                timeout=self.settings.ASSISTANT_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Assistant provider timed out after {self.settings.ASSISTANT_TIMEOUT_SECONDS}s"
            )
            raise UpstreamTimeoutError()
        except Exception as e:
            logger.error(f"Assistant provider error: {e!r}", exc_info=True)
            error = normalize_upstream_error(e)
            if isinstance(error, UpstreamAuthError):
                logger.error(f"Provider rejected the credential ({error.status_code}). {AUTH_OPERATOR_HINT}")
            raise error from e

        logger.info(
            f"Assistant replied: history={len(request.history)} turns, "
            f"result={request.result!r}, reply_chars={len(text)}"
        )
        return text
