"""HTTP client for the Shopify Admin GraphQL API."""

from __future__ import annotations

import time
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from ordersync.adapters.http_resilience import ResilientClient
from ordersync.domain.errors import CredentialError, FatalApiError
from ordersync.domain.model import CanonicalOrder, Credential

from .schema import AccessTokenResponse, OrderConnection, OrdersResponse
from .translator import normalize_order

if TYPE_CHECKING:
    from collections.abc import Callable

    from ordersync.config.http_resilience import ResilienceConfig
    from ordersync.config.shopify import ShopifyConfig
    from ordersync.domain.ports.checkpoint import CheckpointStore

log = getLogger(__name__)

DEFAULT_TOKEN_LIFETIME_SECONDS = 24 * 3600
TOKEN_SAFETY_BUFFER_SECONDS = 60

ORDERS_QUERY = """
query($first: Int!, $query: String!, $after: String) {
  orders(first: $first, query: $query, after: $after, sortKey: UPDATED_AT, reverse: false) {
    pageInfo { hasNextPage endCursor }
    edges {
      node {
        id
        name
        updatedAt
        processedAt
        totalPriceSet { shopMoney { amount currencyCode } }
        shippingAddress { name address1 address2 zip city country }
        customer { firstName lastName email }
        lineItems(first: 50) {
          edges {
            node {
              title
              quantity
              sku
              originalUnitPriceSet { shopMoney { amount currencyCode } }
            }
          }
        }
      }
    }
  }
}
"""


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def changed_since_filter(watermark: str) -> str:
    """Shopify search syntax selecting orders updated strictly after ``watermark``."""

    return f"updated_at:>{watermark}"


def exchange_client_credentials(
    client: ResilientClient,
    config: ShopifyConfig,
    *,
    clock: Callable[[], float] = time.time,
) -> tuple[str, int]:
    """Trade the app's client id and secret for an Admin API access token.

    Returns the token and its expiry as epoch seconds, already shortened by the
    refresh safety buffer.
    """

    if not (config.client_id and config.client_secret):
        raise CredentialError(
            "Shopify token missing. Provide SHOPIFY_ACCESS_TOKEN or "
            "SHOPIFY_CLIENT_ID + SHOPIFY_CLIENT_SECRET."
        )

    try:
        response = client.post(
            config.token_url,
            json={
                "client_id": config.client_id,
                "client_secret": config.client_secret,
                "grant_type": "client_credentials",
            },
        )
    except FatalApiError as exc:
        raise CredentialError(f"Shopify token fetch failed: HTTP {exc.status}") from exc

    if response.status != 200:
        log.error("Shopify token fetch failed: status=%s", response.status)
        raise CredentialError(f"Shopify token fetch failed: HTTP {response.status}")

    try:
        payload = AccessTokenResponse.model_validate(response.json())
    except (FatalApiError, ValidationError) as exc:
        raise CredentialError("Shopify token fetch returned invalid JSON") from exc

    if not payload.access_token:
        raise CredentialError("Shopify token fetch failed: missing access_token")

    expires_in = (
        payload.expires_in if payload.expires_in is not None else DEFAULT_TOKEN_LIFETIME_SECONDS
    )
    expires_at = int(clock()) + max(TOKEN_SAFETY_BUFFER_SECONDS, expires_in)
    expires_at -= TOKEN_SAFETY_BUFFER_SECONDS
    return payload.access_token, expires_at


class TokenState(StrEnum):
    ABSENT = "absent"
    STATIC = "statically_configured"
    CACHED = "cached"
    EXPIRED = "expired"
    REFRESHING = "refreshing"


class ShopifyTokenProvider:
    """Resolves the access token used for GraphQL calls.

    A statically configured token wins and never expires. Otherwise the token
    cached in the checkpoint store is reused until its expiry, after which a new
    one is obtained with the client-credentials grant and written back.
    """

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        store: CheckpointStore,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._store = store
        self._clock = clock
        self._credential: Credential | None = None
        self.state = TokenState.STATIC if config.access_token else TokenState.ABSENT

    def get_token(self, client: ResilientClient) -> str:
        if self._config.access_token:
            self.state = TokenState.STATIC
            return self._config.access_token

        now = self._clock()
        if self._credential is not None and self._credential.is_valid(now):
            return self._credential.access_token

        cached = self._store.get_credential()
        if cached is not None and cached.is_valid(now):
            self._credential = cached
            self.state = TokenState.CACHED
            return cached.access_token

        if cached is not None:
            self.state = TokenState.EXPIRED
        return self._refresh(client)

    def _refresh(self, client: ResilientClient) -> str:
        self.state = TokenState.REFRESHING
        token, expires_at = exchange_client_credentials(client, self._config, clock=self._clock)
        self._store.set_credential(token, expires_at)
        self._credential = Credential(access_token=token, expires_at=expires_at)
        self.state = TokenState.CACHED
        log.info("Shopify access token refreshed: expires_at=%s", expires_at)
        return token


class ShopifyOrderReader:
    """Reads every order changed since a watermark, following the cursor chain."""

    def __init__(
        self,
        *,
        config: ShopifyConfig,
        store: CheckpointStore,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or _default_client_factory
        self.tokens = ShopifyTokenProvider(config=config, store=store, clock=clock)

    def fetch_changed_since(self, watermark: str) -> list[CanonicalOrder]:
        orders: list[CanonicalOrder] = []
        after: str | None = None
        query = changed_since_filter(watermark)

        with self._client_factory(self._config.resilience) as client:
            token = self.tokens.get_token(client)
            for page_number in range(1, self._config.max_pages + 1):
                connection = self._request_page(client, token=token, query=query, after=after)
                for edge in connection.edges:
                    if edge.node is None:
                        continue
                    order = self._normalize(edge.node)
                    if order is not None:
                        orders.append(order)

                page_info = connection.page_info
                if not page_info.has_next_page:
                    break
                if not page_info.end_cursor:
                    log.warning(
                        "Shopify reported another page without a cursor, stopping at page %s",
                        page_number,
                    )
                    break
                after = page_info.end_cursor
            else:
                log.warning(
                    "Stopped paging after %s pages; remaining changes are picked up next run",
                    self._config.max_pages,
                )

        log.debug("Fetched %s orders changed since %s", len(orders), watermark)
        return orders

    def _normalize(self, node: dict[str, object]) -> CanonicalOrder | None:
        try:
            return normalize_order(node, customer_placeholder=self._config.customer_placeholder)
        except ValidationError as exc:
            log.error(
                "Skipping malformed Shopify order %s: %s",
                node.get("id"),
                exc.errors(include_url=False)[:3],
            )
            return None

    def _request_page(
        self,
        client: ResilientClient,
        *,
        token: str,
        query: str,
        after: str | None,
    ) -> OrderConnection:
        response = client.post(
            self._config.graphql_url,
            json={
                "query": ORDERS_QUERY,
                "variables": {"first": self._config.page_size, "query": query, "after": after},
            },
            headers={"X-Shopify-Access-Token": token},
        )

        try:
            payload = OrdersResponse.model_validate(response.json())
        except ValidationError as exc:
            raise FatalApiError(
                "Unexpected Shopify response payload", status=response.status, body=response.text
            ) from exc

        if payload.has_errors:
            log.error("Shopify GraphQL errors: %s", payload.errors)
            raise FatalApiError(
                "Shopify GraphQL returned errors", status=response.status, body=response.text
            )

        if payload.data is None or payload.data.orders is None:
            return OrderConnection()
        return payload.data.orders
