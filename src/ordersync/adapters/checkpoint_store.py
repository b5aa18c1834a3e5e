"""JSON file implementation of the checkpoint store.

The whole state lives in one JSON document::

    {
      "lastRunIso": "2025-01-01T00:04:30Z",
      "sent": {"gid://shopify/Order/1001": {"sentAt": "...", "netvisorKey": "K1"}},
      "shopify": {"access_token": "...", "expires_at": 1735689600}
    }

It is loaded once at construction and rewritten in full after every mutation:
the document is written to ``<path>.tmp`` under an exclusive ``flock`` and then
moved over ``<path>`` with ``os.replace``, so readers only ever see the previous
or the next complete document. A failed write is logged and dropped; the
in-memory state stays authoritative for the rest of the process.

Only one process may use a given path at a time. The lock guards the write
itself, not read-modify-write cycles across processes.
"""

from __future__ import annotations

import fcntl
import os
from collections.abc import Mapping
from datetime import timedelta
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ordersync.config.sync import DEFAULT_FIRST_RUN_LOOKBACK_SECONDS
from ordersync.domain.model import Credential, SentRecord
from ordersync.domain.ports.checkpoint import CheckpointStore
from ordersync.domain.timestamps import default_watermark, format_timestamp, utcnow

if TYPE_CHECKING:
    from ordersync.domain.timestamps import Clock

log = getLogger(__name__)


def _mapping_or_empty(value: object) -> object:
    # Older state files may carry ``[]`` where an empty object is expected.
    if isinstance(value, Mapping):
        return value
    return {}


class _StateBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class SentRecordState(_StateBaseModel):
    sent_at: str = Field(default="", alias="sentAt")
    netvisor_key: str = Field(default="", alias="netvisorKey")

    @field_validator("sent_at", "netvisor_key", mode="before")
    @classmethod
    def _stringify(cls, value: object) -> str:
        return "" if value is None else str(value)


class CredentialState(_StateBaseModel):
    access_token: str | None = None
    expires_at: int | None = None

    @field_validator("access_token", mode="before")
    @classmethod
    def _token_or_none(cls, value: object) -> str | None:
        return value if isinstance(value, str) and value else None

    @field_validator("expires_at", mode="before")
    @classmethod
    def _epoch_or_none(cls, value: object) -> int | None:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value


class CheckpointState(_StateBaseModel):
    last_run_iso: str | None = Field(default=None, alias="lastRunIso")
    sent: dict[str, SentRecordState] = Field(default_factory=dict)
    shopify: CredentialState = Field(default_factory=CredentialState)

    @field_validator("last_run_iso", mode="before")
    @classmethod
    def _watermark_or_none(cls, value: object) -> str | None:
        return value if isinstance(value, str) and value.strip() else None

    @field_validator("sent", mode="before")
    @classmethod
    def _normalize_sent(cls, value: object) -> object:
        if not isinstance(value, Mapping):
            return {}
        # Presence of the id is what matters, so malformed entries are kept as empty records.
        return {str(key): _mapping_or_empty(entry) for key, entry in value.items()}  # pyright: ignore[reportUnknownVariableType]

    _normalize_shopify = field_validator("shopify", mode="before")(_mapping_or_empty)


class JsonCheckpointStore:
    """File-backed :class:`CheckpointStore` with atomic, locked rewrites."""

    def __init__(
        self,
        path: Path | str,
        *,
        first_run_lookback: timedelta = timedelta(seconds=DEFAULT_FIRST_RUN_LOOKBACK_SECONDS),
        clock: Clock = utcnow,
    ) -> None:
        self.path = Path(path)
        self._tmp_path = self.path.with_name(self.path.name + ".tmp")
        self._first_run_lookback = first_run_lookback
        self._clock = clock
        self._state = self._load()

    # Watermark

    def get_watermark(self) -> str:
        if self._state.last_run_iso is not None:
            return self._state.last_run_iso
        return default_watermark(lookback=self._first_run_lookback, clock=self._clock)

    def set_watermark(self, watermark: str) -> None:
        self._state.last_run_iso = watermark
        self._save()

    # Idempotency

    def was_submitted(self, order_id: str) -> bool:
        return order_id in self._state.sent

    def mark_submitted(self, order_id: str, destination_key: str = "") -> None:
        self._state.sent[order_id] = SentRecordState(
            sent_at=format_timestamp(self._clock()),
            netvisor_key=destination_key,
        )
        self._save()

    def get_sent_record(self, order_id: str) -> SentRecord | None:
        entry = self._state.sent.get(order_id)
        if entry is None:
            return None
        return SentRecord(sent_at=entry.sent_at, netvisor_key=entry.netvisor_key)

    # Source API token cache

    def get_credential(self) -> Credential | None:
        cached = self._state.shopify
        if cached.access_token is None:
            return None
        return Credential(access_token=cached.access_token, expires_at=cached.expires_at)

    def set_credential(self, token: str, expires_at: int) -> None:
        self._state.shopify.access_token = token
        self._state.shopify.expires_at = expires_at
        self._save()

    # File IO

    def _load(self) -> CheckpointState:
        if not self.path.is_file():
            return CheckpointState()
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            log.error("Failed to read state file %s, starting from empty state: %s", self.path, exc)
            return CheckpointState()
        if not raw.strip():
            return CheckpointState()
        try:
            return CheckpointState.model_validate_json(raw)
        except ValidationError as exc:
            log.error(
                "State file %s is corrupt, starting from empty state: %s",
                self.path,
                exc.errors(include_url=False)[:3],
            )
            return CheckpointState()

    def _save(self) -> None:
        data = self._state.model_dump_json(by_alias=True, indent=2)
        if not self._write_temp(data):
            return
        try:
            os.replace(self._tmp_path, self.path)
        except OSError as exc:
            log.error("Failed to replace state file %s: %s", self.path, exc)

    def _write_temp(self, data: str) -> bool:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd = os.open(self._tmp_path, os.O_WRONLY | os.O_CREAT, 0o644)
        except OSError as exc:
            log.error("Failed to open temp state file for writing %s: %s", self._tmp_path, exc)
            return False

        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            try:
                fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            except OSError as exc:
                log.error("Failed to acquire lock for state file %s: %s", self._tmp_path, exc)
                return False
            try:
                handle.truncate(0)
                handle.write(data)
                handle.flush()
                os.fsync(handle.fileno())
            except OSError as exc:
                log.error("Failed to write state file %s: %s", self._tmp_path, exc)
                return False
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)
        return True


if TYPE_CHECKING:
    _store_check: CheckpointStore = JsonCheckpointStore("state.json")
