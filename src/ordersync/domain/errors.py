"""Error taxonomy shared by the sync engine and its adapters.

Every error raised on purpose by ordersync derives from :class:`OrderSyncError`
and carries an :class:`ErrorKind`, so callers can decide between retrying,
aborting the run, or skipping a single record without inspecting messages.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    FATAL = "fatal"
    TRANSIENT = "transient"
    RECOVERABLE = "recoverable"


class OrderSyncError(RuntimeError):
    """Base class for all ordersync errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.FATAL


class ApiError(OrderSyncError):
    """Raised when a remote API call does not succeed."""

    def __init__(self, message: str, *, status: int | None = None, body: str = "") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class FatalApiError(ApiError):
    """A non-retryable API failure, or a transient one that exhausted its retries."""

    kind = ErrorKind.FATAL


class CredentialError(OrderSyncError):
    """Raised when no usable source API token can be obtained."""

    kind = ErrorKind.FATAL


class RecordProcessingError(OrderSyncError):
    """Mapping or submission of a single order failed; the run carries on."""

    kind = ErrorKind.RECOVERABLE

    def __init__(self, order_id: str, cause: BaseException) -> None:
        super().__init__(f"Order {order_id} could not be processed: {cause}")
        self.order_id = order_id
        self.cause = cause


def error_kind(exc: BaseException) -> ErrorKind:
    """Return the kind of ``exc``; foreign exceptions count as fatal."""

    if isinstance(exc, OrderSyncError):
        return exc.kind
    return ErrorKind.FATAL


__all__ = [
    "ApiError",
    "CredentialError",
    "ErrorKind",
    "FatalApiError",
    "OrderSyncError",
    "RecordProcessingError",
    "error_kind",
]
