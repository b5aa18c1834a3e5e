"""Build Netvisor ``salesinvoice`` documents from canonical orders."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET  # noqa: N817
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING

from ordersync.domain.timestamps import utcnow

if TYPE_CHECKING:
    from ordersync.domain.model import CanonicalOrder, LineItem, MappingDefaults

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>\n'
FALLBACK_LINE_NAME = "Shopify order"
DEFAULT_LINE_NAME = "Item"

_CENT = Decimal("0.01")
# Characters XML 1.0 cannot carry, even escaped.
_ILLEGAL_XML_CHARS = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ud800-\udfff\ufffe\uffff]")


def format_money(value: str | float | None) -> str:
    """Render an amount as ``0.00`` with a dot separator.

    ``"721,9"`` is read as ``721.90``; anything unparseable becomes ``0.00``.
    """

    if value is None:
        return "0.00"
    text = str(value).strip().replace(",", ".")
    try:
        amount = Decimal(text)
    except InvalidOperation:
        return "0.00"
    if not amount.is_finite():
        return "0.00"
    return str(amount.quantize(_CENT, rounding=ROUND_HALF_UP))


def _format_number(value: float) -> str:
    return format(value, "g")


def _xml_text(value: str) -> str:
    return _ILLEGAL_XML_CHARS.sub("", value)


def _sub(parent: ET.Element, tag: str, text: str = "", **attrib: str) -> ET.Element:
    element = ET.SubElement(parent, tag, {key: _xml_text(val) for key, val in attrib.items()})
    element.text = _xml_text(text)
    return element


def _product_line(
    lines: ET.Element,
    *,
    product_code: str,
    name: str,
    unit_price: str,
    quantity: str,
    defaults: MappingDefaults,
) -> None:
    product_line = ET.SubElement(ET.SubElement(lines, "invoiceline"), "salesinvoiceproductline")
    _sub(product_line, "productidentifier", product_code, type="customer")
    _sub(product_line, "productname", name)
    _sub(product_line, "productunitprice", unit_price, type="gross")
    _sub(
        product_line,
        "productvatpercentage",
        _format_number(defaults.vat_percent),
        vatcode=defaults.vat_code,
    )
    _sub(product_line, "salesinvoiceproductlinequantity", quantity)


def _item_line(lines: ET.Element, item: LineItem, defaults: MappingDefaults) -> None:
    _product_line(
        lines,
        product_code=item.sku or defaults.product_code,
        name=item.title or DEFAULT_LINE_NAME,
        unit_price=format_money(item.unit_price),
        quantity=str(item.quantity),
        defaults=defaults,
    )


def map_sales_order(
    order: CanonicalOrder,
    defaults: MappingDefaults,
    *,
    today: date | None = None,
) -> str:
    """Serialize ``order`` as a Netvisor sales order.

    The invoice date is the import date in UTC, not the order's own date. An
    order without line items still gets one line carrying the order total.
    """

    invoice_date = today or utcnow().date()
    total = format_money(order.total_amount)
    address = order.shipping_address

    root = ET.Element("salesinvoice")
    _sub(root, "invoicetype", "order")
    _sub(root, "salesinvoicedate", invoice_date.isoformat())
    _sub(root, "salesinvoicestatus", "undelivered", type="netvisor")
    _sub(root, "invoicingcustomeridentifier", defaults.customer_code, type="customer")
    _sub(root, "invoicingcustomername", order.customer_name)
    _sub(root, "deliveryaddressline1", address.address1)
    _sub(root, "deliveryaddressline2", address.address2)
    _sub(root, "deliverypostcode", address.zip)
    _sub(root, "deliverycity", address.city)
    _sub(root, "deliverycountry", address.country)
    _sub(root, "salesinvoicereferencenumber", order.name)
    _sub(root, "paymenttermnetdays", str(defaults.payment_term_days))
    _sub(root, "salesinvoiceamount", total, iso4217currencycode=order.currency or "EUR")

    lines = ET.SubElement(root, "invoicelines")
    for item in order.lines:
        _item_line(lines, item, defaults)
    if not order.lines:
        _product_line(
            lines,
            product_code=defaults.product_code,
            name=FALLBACK_LINE_NAME,
            unit_price=total,
            quantity="1",
            defaults=defaults,
        )

    ET.indent(root)
    body = ET.tostring(root, encoding="unicode", short_empty_elements=False)
    return XML_DECLARATION + body + "\n"


__all__ = ["format_money", "map_sales_order"]
