"""Helpers for the ISO-8601 watermark strings exchanged with the checkpoint store."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    Returns ``None`` for blank or unparseable input instead of raising, since
    timestamps coming back from the source API are not trusted.
    """

    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_timestamp(value: datetime) -> str:
    """Render ``value`` as ``YYYY-MM-DDTHH:MM:SSZ`` (seconds precision, UTC)."""

    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    rendered = value.astimezone(UTC).isoformat(timespec="seconds")
    return rendered.replace("+00:00", "Z")


def default_watermark(*, lookback: timedelta, clock: Clock = utcnow) -> str:
    return format_timestamp(clock() - lookback)


__all__ = ["Clock", "default_watermark", "format_timestamp", "parse_timestamp", "utcnow"]
