from fastapi import APIRouter, Depends, Request
from typing import Optional
import logging
from datetime import datetime

from ..assistant.engine import AssistantProxy
from ..core.errors import InvalidRequestError, MethodNotAllowedError, DiagnosticError
from ..core.models import (
    AssistantRequest, AssistantReply, ErrorResponse, ScoreRequest, ResultResponse
)
from ..core.questions import QUESTIONS, QUESTIONS_BY_ID
from ..core.scoring import calculate_result, describe_result, parse_category
from ..config import settings
from .. import __version__

logger = logging.getLogger(__name__)

router = APIRouter()

# Built on first use so the credential is read once per process
_assistant_proxy: Optional[AssistantProxy] = None

def get_assistant_proxy() -> AssistantProxy:
    """Dependency to get the assistant proxy instance"""
    global _assistant_proxy

    if _assistant_proxy is None:
        _assistant_proxy = AssistantProxy.from_settings(settings)

    return _assistant_proxy

# ASSISTANT ENDPOINTS

@router.post(
    "/assistant",
    response_model=AssistantReply,
    responses={
        400: {"model": ErrorResponse, "description": "Message is required"},
        503: {"model": ErrorResponse, "description": "Assistant is not configured"},
        504: {"model": ErrorResponse, "description": "Provider timed out"},
    },
)
async def assistant(request: AssistantRequest, proxy: AssistantProxy = Depends(get_assistant_proxy)):
    """Relay one chat turn to the AI assistant"""
    text = await proxy.reply(request)
    return AssistantReply(text=text)

@router.api_route(
    "/assistant",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def assistant_method_not_allowed(request: Request):
    logger.warning(f"Rejected {request.method} on assistant endpoint")
    raise MethodNotAllowedError()

# DIAGNOSTIC ENDPOINTS

@router.get("/questions")
async def list_questions():
    """Get the diagnostic questions in display order"""
    return {
        "title": settings.DIAGNOSTIC_TITLE,
        "questions": [question.model_dump(mode="json") for question in QUESTIONS],
        "total": len(QUESTIONS),
    }

@router.post("/diagnostic/score", response_model=ResultResponse)
async def score_diagnostic(request: ScoreRequest):
    """Score submitted answers and return the winning bottleneck"""
    unknown = sorted(qid for qid in request.answers if qid not in QUESTIONS_BY_ID)
    if unknown:
        raise InvalidRequestError(f"Unknown question ids: {unknown}")

    result = calculate_result(request.answers)
    logger.info(f"Scored diagnostic with {len(request.answers)} answers: {result.value}")
    return ResultResponse(result=result, description=describe_result(result))

@router.get(
    "/results/{category}",
    response_model=ResultResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_result_description(category: str):
    """Get the explanation shown for a result category"""
    result = parse_category(category)
    if result is None:
        raise DiagnosticError(f"Unknown result category: {category}", status_code=404)
    return ResultResponse(result=result, description=describe_result(result))

@router.get("/booking")
async def booking_link():
    """Consultation booking link, opened by clients in a new tab"""
    return {"url": settings.BOOKING_URL}

# SYSTEM ENDPOINTS

@router.get("/health")
async def health_check(proxy: AssistantProxy = Depends(get_assistant_proxy)):
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "service": settings.DIAGNOSTIC_TITLE,
        "version": __version__,
        "components": {
            "questions_loaded": len(QUESTIONS),
            "assistant": "configured" if proxy.configured else "not_configured",
        },
        "configuration": {
            "assistant_model": settings.ASSISTANT_MODEL,
            "assistant_timeout_seconds": settings.ASSISTANT_TIMEOUT_SECONDS,
        },
    }
