from __future__ import annotations

from typing import Dict, TypeVar

from fastapi import HTTPException

from ..context import AppContext, get_context
from ..gemini_client import GeminiClient
from ..results import Failure, FailureReason, Result
from ..services.common import ClientFactory
from ..services.feed import FeedStore, create_feed_store


T = TypeVar("T")

_STATUS_BY_REASON: Dict[FailureReason, int] = {
    FailureReason.VALIDATION: 400,
    FailureReason.BUSY: 409,
    FailureReason.NOT_CONFIGURED: 503,
    FailureReason.NETWORK: 504,
    FailureReason.AUTH: 502,
    FailureReason.UPSTREAM: 502,
    FailureReason.EMPTY_RESPONSE: 502,
    FailureReason.MALFORMED_RESPONSE: 502,
}


def http_status_for(reason: FailureReason) -> int:
    return _STATUS_BY_REASON.get(reason, 500)


def unwrap(result: Result[T]) -> T:
    if isinstance(result, Failure):
        raise HTTPException(
            status_code=http_status_for(result.reason),
            detail={"reason": result.reason.value, "message": result.message},
        )
    return result.value


def require_context(session_id: str) -> AppContext:
    ctx = get_context(session_id)
    if ctx is None:
        raise HTTPException(status_code=404, detail="Session not found or expired")
    return ctx


def get_feed_store() -> FeedStore:
    try:
        return create_feed_store()
    except ValueError as e:
        raise HTTPException(status_code=500, detail=str(e))


def get_client_factory() -> ClientFactory:
    return GeminiClient
