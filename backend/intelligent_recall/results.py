"""Outcome types for calls that leave the process (Gemini, the row store).

Services never raise for an expected failure; they return ``Failure`` with a
reason and let the HTTP layer decide how to present it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union


T = TypeVar("T")


class FailureReason(str, Enum):
    VALIDATION = "validation"
    BUSY = "busy"
    NOT_CONFIGURED = "not_configured"
    NETWORK = "network"
    AUTH = "auth"
    UPSTREAM = "upstream"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_RESPONSE = "malformed_response"


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    reason: FailureReason
    message: str

    @property
    def ok(self) -> bool:
        return False


Result = Union[Success[T], Failure]
