"""Port for the durable sync state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ordersync.domain.model import Credential


@runtime_checkable
class CheckpointStore(Protocol):
    def get_watermark(self) -> str: ...

    def set_watermark(self, watermark: str) -> None: ...

    def was_submitted(self, order_id: str) -> bool: ...

    def mark_submitted(self, order_id: str, destination_key: str = "") -> None: ...

    def get_credential(self) -> Credential | None: ...

    def set_credential(self, token: str, expires_at: int) -> None: ...


__all__ = ["CheckpointStore"]
