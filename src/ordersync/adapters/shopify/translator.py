"""Translate Shopify order payloads into :class:`CanonicalOrder` records."""

from __future__ import annotations

from ordersync.config.shopify import DEFAULT_CUSTOMER_PLACEHOLDER
from ordersync.domain.model import CanonicalOrder, LineItem, ShippingAddress

from .schema import (
    Customer,
    LineItemNode,
    MailingAddress,
    MoneyBag,
    OrderNode,
    OrderNodeInput,
)


def _ensure_order_node(payload: OrderNodeInput) -> OrderNode:
    if isinstance(payload, OrderNode):
        return payload
    return OrderNode.model_validate(payload)


def _amount(money: MoneyBag | None) -> str:
    if money is None or money.shop_money is None or money.shop_money.amount is None:
        return "0"
    return money.shop_money.amount


def _currency(money: MoneyBag | None, default: str) -> str:
    if money is None or money.shop_money is None or not money.shop_money.currency_code:
        return default
    return money.shop_money.currency_code


def _customer_name(ship: MailingAddress, customer: Customer, placeholder: str) -> str:
    if ship.name:
        return ship.name
    full_name = f"{customer.first_name or ''} {customer.last_name or ''}".strip()
    return full_name or placeholder


def _line_item(node: LineItemNode) -> LineItem:
    return LineItem(
        title=node.title or "",
        sku=node.sku or "",
        quantity=node.quantity or 0,
        unit_price=_amount(node.original_unit_price_set),
        currency=_currency(node.original_unit_price_set, ""),
    )


def normalize_order(
    payload: OrderNodeInput,
    *,
    customer_placeholder: str = DEFAULT_CUSTOMER_PLACEHOLDER,
) -> CanonicalOrder:
    node = _ensure_order_node(payload)
    ship = node.shipping_address or MailingAddress()
    customer = node.customer or Customer()
    line_edges = node.line_items.edges if node.line_items is not None else []

    return CanonicalOrder(
        id=node.id or "",
        name=node.name or "",
        updated_at=node.updated_at or "",
        processed_at=node.processed_at or "",
        currency=_currency(node.total_price_set, "EUR"),
        total_amount=_amount(node.total_price_set),
        customer_name=_customer_name(ship, customer, customer_placeholder),
        customer_email=customer.email or "",
        shipping_address=ShippingAddress(
            address1=ship.address1 or "",
            address2=ship.address2 or "",
            zip=ship.zip or "",
            city=ship.city or "",
            country=ship.country or "",
        ),
        lines=tuple(_line_item(edge.node) for edge in line_edges if edge.node is not None),
    )
