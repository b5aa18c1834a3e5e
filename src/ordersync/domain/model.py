"""Domain records passed between the source reader, the mapper and the orchestrator."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class ShippingAddress:
    address1: str = ""
    address2: str = ""
    zip: str = ""
    city: str = ""
    country: str = ""


@dataclass(frozen=True, slots=True)
class LineItem:
    title: str = ""
    sku: str = ""
    quantity: int = 0
    unit_price: str = "0"
    currency: str = ""


@dataclass(frozen=True, slots=True)
class CanonicalOrder:
    """A source order normalized into the shape the sync engine works with.

    ``updated_at`` is kept as the raw ISO-8601 string reported by the source; the
    orchestrator parses it defensively when tracking the watermark.
    """

    id: str
    name: str = ""
    updated_at: str = ""
    processed_at: str = ""
    currency: str = "EUR"
    total_amount: str = "0"
    customer_name: str = ""
    customer_email: str = ""
    shipping_address: ShippingAddress = field(default_factory=ShippingAddress)
    lines: tuple[LineItem, ...] = ()


@dataclass(frozen=True, slots=True)
class SentRecord:
    sent_at: str
    netvisor_key: str = ""


@dataclass(frozen=True, slots=True)
class Credential:
    """Bearer token for the source API; ``expires_at`` is epoch seconds."""

    access_token: str
    expires_at: int | None = None

    def is_valid(self, now_epoch: float) -> bool:
        if not self.access_token:
            return False
        if self.expires_at is None:
            return True
        return now_epoch < self.expires_at


@dataclass(frozen=True, slots=True)
class SubmissionReceipt:
    """What the destination reported for one submitted document."""

    status: int
    body: str = ""
    netvisor_key: str = ""


@dataclass(frozen=True, slots=True)
class MappingDefaults:
    customer_code: str = "CASH"
    payment_term_days: int = 14
    vat_percent: float = 25.5
    vat_code: str = "KOMY"
    product_code: str = "SHOPIFY_ITEM"
