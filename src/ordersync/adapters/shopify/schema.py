"""Partial Pydantic models for the Shopify Admin GraphQL payloads we read.

Every field is optional: the source is allowed to omit or null anything, and the
translator supplies defaults.
"""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _to_text(value: object) -> str | None:
    """Keep strings, render numbers as text and drop anything else."""

    if isinstance(value, str):
        return value
    if isinstance(value, int | float) and not isinstance(value, bool):
        return str(value)
    return None


def _to_quantity(value: object) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


class ShopifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class Money(ShopifyBaseModel):
    amount: str | None = None
    currency_code: str | None = Field(default=None, alias="currencyCode")

    _normalize_text = field_validator("amount", "currency_code", mode="before")(_to_text)


class MoneyBag(ShopifyBaseModel):
    shop_money: Money | None = Field(default=None, alias="shopMoney")


class MailingAddress(ShopifyBaseModel):
    name: str | None = None
    address1: str | None = None
    address2: str | None = None
    zip: str | None = None
    city: str | None = None
    country: str | None = None

    _normalize_text = field_validator(
        "name", "address1", "address2", "zip", "city", "country", mode="before"
    )(_to_text)


class Customer(ShopifyBaseModel):
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    email: str | None = None

    _normalize_text = field_validator("first_name", "last_name", "email", mode="before")(_to_text)


class LineItemNode(ShopifyBaseModel):
    title: str | None = None
    sku: str | None = None
    quantity: int | None = None
    original_unit_price_set: MoneyBag | None = Field(default=None, alias="originalUnitPriceSet")

    _normalize_text = field_validator("title", "sku", mode="before")(_to_text)
    _normalize_quantity = field_validator("quantity", mode="before")(_to_quantity)


class LineItemEdge(ShopifyBaseModel):
    node: LineItemNode | None = None


class LineItemConnection(ShopifyBaseModel):
    edges: list[LineItemEdge] = Field(default_factory=list["LineItemEdge"])


class OrderNode(ShopifyBaseModel):
    id: str | None = None
    name: str | None = None
    updated_at: str | None = Field(default=None, alias="updatedAt")
    processed_at: str | None = Field(default=None, alias="processedAt")
    total_price_set: MoneyBag | None = Field(default=None, alias="totalPriceSet")
    shipping_address: MailingAddress | None = Field(default=None, alias="shippingAddress")
    customer: Customer | None = None
    line_items: LineItemConnection | None = Field(default=None, alias="lineItems")

    _normalize_text = field_validator(
        "id", "name", "updated_at", "processed_at", mode="before"
    )(_to_text)


class OrderEdge(ShopifyBaseModel):
    """The reader validates each node on its own."""

    node: dict[str, object] | None = None


class PageInfo(ShopifyBaseModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: str | None = Field(default=None, alias="endCursor")


class OrderConnection(ShopifyBaseModel):
    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    edges: list[OrderEdge] = Field(default_factory=list["OrderEdge"])


class OrdersData(ShopifyBaseModel):
    orders: OrderConnection | None = None


class OrdersResponse(ShopifyBaseModel):
    data: OrdersData | None = None
    errors: object | None = None

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


class AccessTokenResponse(ShopifyBaseModel):
    access_token: str | None = None
    expires_in: int | None = None
    scope: str | None = None


OrderNodeInput = OrderNode | Mapping[str, object]
