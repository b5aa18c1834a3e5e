from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, TypedDict, Unpack

import httpx

from ordersync.config.http_resilience import ResilienceConfig, RetryPolicy
from ordersync.domain.errors import ErrorKind, FatalApiError

if TYPE_CHECKING:
    from types import TracebackType

    from httpx._types import (
        HeaderTypes,
        QueryParamTypes,
        RequestContent,
        TimeoutTypes,
        URLTypes,
    )

log = getLogger(__name__)

RequestFactory = Callable[[], httpx.Request]
Sleeper = Callable[[float], None]


class RequestOptions(TypedDict, total=False):
    content: RequestContent | None
    json: object
    params: QueryParamTypes | None
    headers: HeaderTypes | None


class ClientOptions(TypedDict, total=False):
    base_url: str
    timeout: TimeoutTypes
    headers: HeaderTypes
    proxy: str
    transport: httpx.BaseTransport


@dataclass(slots=True, frozen=True)
class ApiResponse:
    status: int
    text: str

    def json(self) -> object:
        try:
            return json.loads(self.text)
        except json.JSONDecodeError as exc:
            raise FatalApiError(
                "Response body is not valid JSON", status=self.status, body=self.text
            ) from exc


def classify_status(status: int, policy: RetryPolicy | None = None) -> ErrorKind | None:
    """Return ``None`` for success, otherwise whether the failure is worth retrying."""

    if 200 <= status < 300:
        return None
    retry_statuses = (policy or RetryPolicy()).retry_statuses
    if status in retry_statuses:
        return ErrorKind.TRANSIENT
    return ErrorKind.FATAL


class ResilientClient:
    """Blocking HTTP client with bounded exponential backoff.

    Requests are produced by a factory that is invoked again for every attempt, so
    callers that sign requests get a fresh timestamp and signature on each retry.
    """

    def __init__(
        self,
        config: ResilienceConfig,
        *,
        transport: httpx.BaseTransport | None = None,
        sleep: Sleeper = time.sleep,
    ) -> None:
        self.config = config
        self._sleep = sleep

        client_kwargs: ClientOptions = {
            "timeout": httpx.Timeout(
                config.timeout_seconds,
                connect=config.connect_timeout_seconds,
            ),
        }
        if config.base_url is not None:
            client_kwargs["base_url"] = config.base_url
        if config.default_headers is not None:
            client_kwargs["headers"] = dict(config.default_headers)
        if config.proxy is not None:
            client_kwargs["proxy"] = config.proxy
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.Client(**client_kwargs)

    def __enter__(self) -> ResilientClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def build_request(
        self,
        method: str,
        url: URLTypes,
        **kwargs: Unpack[RequestOptions],
    ) -> httpx.Request:
        return self._client.build_request(method, url, **kwargs)

    def post(self, url: URLTypes, **kwargs: Unpack[RequestOptions]) -> ApiResponse:
        return self.execute(lambda: self.build_request("POST", url, **kwargs))

    def execute(self, request_factory: RequestFactory) -> ApiResponse:
        policy = self.config.retry
        backoff = policy.initial_backoff_seconds
        status: int | None = None
        body = ""

        for attempt in range(1, policy.max_attempts + 1):
            request = request_factory()
            try:
                response = self._client.send(request)
            except policy.retry_on_exceptions as exc:
                kind = ErrorKind.TRANSIENT
                status, body = None, str(exc) or type(exc).__name__
            except httpx.HTTPError as exc:
                raise FatalApiError(f"{self.config.name} request failed: {exc}") from exc
            else:
                status, body = response.status_code, response.text
                outcome = classify_status(status, policy)
                if outcome is None:
                    return ApiResponse(status=status, text=body)
                kind = outcome

            if kind is ErrorKind.TRANSIENT and attempt < policy.max_attempts:
                log.warning(
                    "%s transient error, retrying in %.1fs: status=%s attempt=%s/%s",
                    self.config.name,
                    backoff,
                    status,
                    attempt,
                    policy.max_attempts,
                )
                self._sleep(backoff)
                backoff *= policy.backoff_multiplier
                continue

            log.error(
                "%s request failed: status=%s attempt=%s/%s body=%s",
                self.config.name,
                status,
                attempt,
                policy.max_attempts,
                body[:500],
            )
            label = f"HTTP {status}" if status is not None else body
            raise FatalApiError(
                f"{self.config.name} API error: {label}", status=status, body=body
            )

        raise FatalApiError(
            f"{self.config.name} API error: retries exhausted", status=status, body=body
        )
