"""Public interface for the Shopify adapter."""

from __future__ import annotations

from .client import (
    ORDERS_QUERY,
    ShopifyOrderReader,
    ShopifyTokenProvider,
    TokenState,
    changed_since_filter,
    exchange_client_credentials,
)
from .schema import OrderNode, OrderNodeInput, OrdersResponse
from .translator import normalize_order

__all__ = [
    "ORDERS_QUERY",
    "OrderNode",
    "OrderNodeInput",
    "OrdersResponse",
    "ShopifyOrderReader",
    "ShopifyTokenProvider",
    "TokenState",
    "changed_since_filter",
    "exchange_client_credentials",
    "normalize_order",
]
