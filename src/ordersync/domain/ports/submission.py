"""Ports for turning orders into destination documents and delivering them."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ordersync.domain.model import CanonicalOrder, MappingDefaults, SubmissionReceipt


@runtime_checkable
class SalesOrderMapper(Protocol):
    def __call__(self, order: CanonicalOrder, defaults: MappingDefaults) -> str: ...


@runtime_checkable
class SalesOrderSink(Protocol):
    """Delivers one serialized sales-order document to the destination."""

    def submit(self, document: str, *, order_id: str) -> SubmissionReceipt: ...


__all__ = ["SalesOrderMapper", "SalesOrderSink"]
