"""Incremental order sync: source orders changed since the watermark go to the sink."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from ordersync.domain.errors import RecordProcessingError, error_kind
from ordersync.domain.timestamps import (
    format_timestamp,
    parse_timestamp,
    utcnow,
)

if TYPE_CHECKING:
    from datetime import datetime

    from ordersync.domain.model import CanonicalOrder, MappingDefaults
    from ordersync.domain.ports.checkpoint import CheckpointStore
    from ordersync.domain.ports.fetching import OrderSource
    from ordersync.domain.ports.submission import SalesOrderMapper, SalesOrderSink
    from ordersync.domain.timestamps import Clock

log = getLogger(__name__)

DEFAULT_OVERLAP = timedelta(seconds=30)
DEFAULT_FALLBACK_LOOKBACK = timedelta(seconds=1800)


class RecordOutcome(StrEnum):
    SUBMITTED = "submitted"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True)
class SyncRunResult:
    """Outcome of one sync pass."""

    start_watermark: str
    new_watermark: str = ""
    fetched: int = 0
    ignored: int = 0
    outcomes: list[tuple[str, RecordOutcome]] = field(
        default_factory=list["tuple[str, RecordOutcome]"]
    )

    def ids(self, outcome: RecordOutcome) -> list[str]:
        return [order_id for order_id, recorded in self.outcomes if recorded is outcome]

    @property
    def submitted(self) -> list[str]:
        return self.ids(RecordOutcome.SUBMITTED)

    @property
    def skipped(self) -> list[str]:
        return self.ids(RecordOutcome.SKIPPED)

    @property
    def failed(self) -> list[str]:
        return self.ids(RecordOutcome.FAILED)


@dataclass(slots=True)
class _WatermarkTracker:
    start: datetime
    max_seen: datetime
    advanced: bool = False
    unparseable: list[str] = field(default_factory=list["str"])

    def observe(self, order: CanonicalOrder) -> None:
        updated_at = parse_timestamp(order.updated_at)
        if updated_at is None:
            self.unparseable.append(order.id)
            return
        if updated_at > self.max_seen:
            self.max_seen = updated_at
            self.advanced = True


class OrderSyncService:
    """Runs one incremental pass from an order source to a sales-order sink.

    Progress is kept in the checkpoint store: the watermark decides what gets
    fetched, and the sent map makes repeated submissions of the same order a
    no-op. Per-order failures are logged and left for the next run, which will
    fetch the order again because the watermark trails the newest change seen.
    """

    def __init__(
        self,
        *,
        store: CheckpointStore,
        source: OrderSource,
        mapper: SalesOrderMapper,
        sink: SalesOrderSink,
        defaults: MappingDefaults,
        overlap: timedelta = DEFAULT_OVERLAP,
        fallback_lookback: timedelta = DEFAULT_FALLBACK_LOOKBACK,
        clock: Clock = utcnow,
    ) -> None:
        self._store = store
        self._source = source
        self._mapper = mapper
        self._sink = sink
        self._defaults = defaults
        self._overlap = overlap
        self._fallback_lookback = fallback_lookback
        self._clock = clock

    def run(self) -> SyncRunResult:
        start_raw = self._store.get_watermark()
        start = parse_timestamp(start_raw)
        if start is None:
            start = (self._clock() - self._fallback_lookback).replace(microsecond=0)
            log.warning(
                "Stored watermark %r is not a timestamp, using %s",
                start_raw,
                format_timestamp(start),
            )
            start_raw = format_timestamp(start)

        orders = self._source.fetch_changed_since(start_raw)
        result = SyncRunResult(start_watermark=start_raw, fetched=len(orders))
        tracker = _WatermarkTracker(start=start, max_seen=start)
        log.info("Fetched %s orders changed since %s", len(orders), start_raw)

        for order in orders:
            if not order.id:
                log.warning("Skipping order without id (name=%r)", order.name)
                result.ignored += 1
                continue
            tracker.observe(order)
            result.outcomes.append((order.id, self._process(order)))

        new_watermark = self._next_watermark(tracker, fetched=len(orders))
        result.new_watermark = format_timestamp(new_watermark)
        self._store.set_watermark(result.new_watermark)

        log.info(
            "Sync finished: fetched=%s submitted=%s skipped=%s failed=%s watermark=%s",
            result.fetched,
            len(result.submitted),
            len(result.skipped),
            len(result.failed),
            result.new_watermark,
        )
        return result

    def _process(self, order: CanonicalOrder) -> RecordOutcome:
        if self._store.was_submitted(order.id):
            log.debug("Order %s already submitted, skipping", order.id)
            return RecordOutcome.SKIPPED

        try:
            document = self._mapper(order, self._defaults)
            receipt = self._sink.submit(document, order_id=order.id)
        except Exception as exc:  # noqa: BLE001
            error = RecordProcessingError(order.id, exc)
            log.error("%s (kind=%s); retrying next run", error, error_kind(exc))
            return RecordOutcome.FAILED

        self._store.mark_submitted(order.id, receipt.netvisor_key)
        log.info("Submitted order %s (%s) key=%s", order.id, order.name, receipt.netvisor_key)
        return RecordOutcome.SUBMITTED

    def _next_watermark(self, tracker: _WatermarkTracker, *, fetched: int) -> datetime:
        max_seen = tracker.max_seen
        if fetched and not tracker.advanced:
            max_seen = self._clock()
            log.warning(
                "No order advanced the watermark; moving it to now. Unparseable updated_at on: %s",
                ", ".join(tracker.unparseable) or "none",
            )
        return max(tracker.start, max_seen - self._overlap)


__all__ = ["OrderSyncService", "RecordOutcome", "SyncRunResult"]
