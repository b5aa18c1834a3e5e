from __future__ import annotations

from ordersync.adapters.shopify import OrderNode, normalize_order
from ordersync.domain.model import LineItem, ShippingAddress


def _payload() -> dict[str, object]:
    return {
        "id": "gid://shopify/Order/1001",
        "name": "#1001",
        "updatedAt": "2025-01-01T00:05:00Z",
        "processedAt": "2025-01-01T00:01:00Z",
        "totalPriceSet": {"shopMoney": {"amount": "721.9", "currencyCode": "EUR"}},
        "shippingAddress": {
            "name": "Maija Meikäläinen",
            "address1": "Mannerheimintie 1",
            "address2": None,
            "zip": "00100",
            "city": "Helsinki",
            "country": "Finland",
        },
        "customer": {"firstName": "Matti", "lastName": "Meikäläinen", "email": "m@example.test"},
        "lineItems": {
            "edges": [
                {
                    "node": {
                        "title": "Sauna stone",
                        "quantity": 2,
                        "sku": "SS-1",
                        "originalUnitPriceSet": {
                            "shopMoney": {"amount": "350.95", "currencyCode": "EUR"}
                        },
                    }
                }
            ]
        },
        "unexpectedField": {"ignored": True},
    }


def test_normalize_full_order() -> None:
    order = normalize_order(_payload())

    assert order.id == "gid://shopify/Order/1001"
    assert order.name == "#1001"
    assert order.updated_at == "2025-01-01T00:05:00Z"
    assert order.processed_at == "2025-01-01T00:01:00Z"
    assert order.currency == "EUR"
    assert order.total_amount == "721.9"
    assert order.customer_name == "Maija Meikäläinen"
    assert order.customer_email == "m@example.test"
    assert order.shipping_address == ShippingAddress(
        address1="Mannerheimintie 1",
        address2="",
        zip="00100",
        city="Helsinki",
        country="Finland",
    )
    assert order.lines == (
        LineItem(title="Sauna stone", sku="SS-1", quantity=2, unit_price="350.95", currency="EUR"),
    )


def test_normalize_accepts_validated_model() -> None:
    node = OrderNode.model_validate(_payload())

    assert normalize_order(node) == normalize_order(_payload())


def test_customer_name_falls_back_to_customer_record() -> None:
    payload = _payload()
    payload["shippingAddress"] = None

    order = normalize_order(payload)

    assert order.customer_name == "Matti Meikäläinen"
    assert order.shipping_address == ShippingAddress()


def test_customer_name_falls_back_to_placeholder() -> None:
    payload = _payload()
    payload["shippingAddress"] = {"name": ""}
    payload["customer"] = None

    assert normalize_order(payload).customer_name == "Unknown"
    assert normalize_order(payload, customer_placeholder="Guest").customer_name == "Guest"


def test_missing_fields_get_defaults() -> None:
    order = normalize_order({"id": "gid://shopify/Order/1"})

    assert order.name == ""
    assert order.updated_at == ""
    assert order.total_amount == "0"
    assert order.currency == "EUR"
    assert order.customer_email == ""
    assert order.lines == ()


def test_numeric_amounts_are_kept_as_text() -> None:
    payload = _payload()
    payload["totalPriceSet"] = {"shopMoney": {"amount": 12.5, "currencyCode": "SEK"}}

    order = normalize_order(payload)

    assert order.total_amount == "12.5"
    assert order.currency == "SEK"


def test_line_without_price_defaults_to_zero() -> None:
    payload = _payload()
    payload["lineItems"] = {"edges": [{"node": {"title": "Gift", "quantity": 1}}, {"node": None}]}

    order = normalize_order(payload)

    assert order.lines == (LineItem(title="Gift", sku="", quantity=1, unit_price="0", currency=""),)


def test_wrongly_typed_scalars_are_coerced() -> None:
    payload = _payload()
    payload["id"] = 1001
    payload["name"] = 1001
    payload["customer"] = {"firstName": True, "email": ["m@example.test"]}
    payload["shippingAddress"] = {"zip": 100, "city": {"name": "Helsinki"}}
    payload["lineItems"] = {
        "edges": [
            {"node": {"title": 7, "sku": 12345, "quantity": " 3 "}},
            {"node": {"title": "Gift", "quantity": "abc"}},
            {"node": {"title": "Half", "quantity": 2.0}},
        ]
    }

    order = normalize_order(payload)

    assert order.id == "1001"
    assert order.name == "1001"
    assert order.customer_name == "Unknown"
    assert order.customer_email == ""
    assert order.shipping_address == ShippingAddress(zip="100")
    assert [(line.title, line.sku, line.quantity) for line in order.lines] == [
        ("7", "12345", 3),
        ("Gift", "", 0),
        ("Half", "", 2),
    ]
