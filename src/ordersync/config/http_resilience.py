"""Configuration types for resilient HTTP clients."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import httpx

from .env import env_float, optional_env

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_USER_AGENT = "ordersync/shopify-to-netvisor"
DEFAULT_TIMEOUT_SECONDS = 20.0
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    max_attempts: int = 3
    initial_backoff_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    retry_statuses: frozenset[int] = field(
        default_factory=lambda: frozenset({429, *range(500, 600)})
    )
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    base_url: str | None = None
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    connect_timeout_seconds: float = DEFAULT_CONNECT_TIMEOUT_SECONDS
    proxy: str | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    default_headers: Mapping[str, str] | None = None


def get_resilience_config(
    name: str,
    *,
    base_url: str | None = None,
    retry: RetryPolicy | None = None,
) -> ResilienceConfig:
    """Build a client configuration from the shared ``HTTP_*`` environment variables."""

    return ResilienceConfig(
        name=name,
        base_url=base_url,
        timeout_seconds=env_float("HTTP_TIMEOUT", DEFAULT_TIMEOUT_SECONDS),
        connect_timeout_seconds=env_float("HTTP_CONNECT_TIMEOUT", DEFAULT_CONNECT_TIMEOUT_SECONDS),
        proxy=optional_env("HTTP_PROXY"),
        retry=retry or RetryPolicy(),
        default_headers={"User-Agent": DEFAULT_USER_AGENT},
    )
