"""Ports for reading orders from the source system."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ordersync.domain.model import CanonicalOrder


@runtime_checkable
class OrderSource(Protocol):
    """Returns every order changed after ``watermark``, oldest change first."""

    def fetch_changed_since(self, watermark: str) -> Sequence[CanonicalOrder]: ...


__all__ = ["OrderSource"]
