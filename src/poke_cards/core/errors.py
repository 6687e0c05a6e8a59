from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    USAGE = "usage_error"
    THROTTLE_EXHAUSTED = "throttle_exhausted"
    REQUEST_FAILED = "request_failed"
    EMPTY_PAYLOAD = "empty_payload"
    DESERIALIZATION_FAILED = "deserialization_failed"


class CardsError(RuntimeError):
    """Base exception for every failure the cards pipeline reports."""

    kind: ClassVar[ErrorKind]


class UsageError(CardsError):
    """Malformed or missing command-line arguments."""

    kind = ErrorKind.USAGE


class ProviderRequestError(CardsError):
    """Non-2xx response or transport failure (timeouts, connection errors)."""

    kind = ErrorKind.REQUEST_FAILED

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason


class ProviderRateLimited(ProviderRequestError):
    """Provider throttled the request (HTTP 429). Consumed by the retry loop."""


class ThrottleExhaustedError(CardsError):
    """Still throttled after the retry ceiling was reached."""

    kind = ErrorKind.THROTTLE_EXHAUSTED

    def __init__(self, attempts: int) -> None:
        super().__init__(f"429 detected at least [{attempts}] times, fast failing")
        self.attempts = attempts


class EmptyPayloadError(CardsError):
    """A successful response (or the debug fixture) had no body."""

    kind = ErrorKind.EMPTY_PAYLOAD


class DeserializationError(CardsError):
    """Payload text did not parse into the expected card page schema."""

    kind = ErrorKind.DESERIALIZATION_FAILED
