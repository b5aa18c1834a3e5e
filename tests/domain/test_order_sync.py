from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from ordersync.adapters.http_resilience import ResilientClient
from ordersync.adapters.netvisor import NetvisorClient, map_sales_order
from ordersync.config import NetvisorAuth, NetvisorConfig, ResilienceConfig
from ordersync.domain.model import MappingDefaults, SubmissionReceipt
from ordersync.domain.order_sync import OrderSyncService, RecordOutcome, SyncRunResult
from tests.helpers.fakes import (
    FakeOrderSource,
    FixedClock,
    InMemoryCheckpointStore,
    RecordingSink,
    echo_mapper,
    make_order,
)


def _service(
    store: InMemoryCheckpointStore,
    source: FakeOrderSource,
    sink: object,
    *,
    clock: FixedClock | None = None,
    mapper: object = echo_mapper,
) -> OrderSyncService:
    return OrderSyncService(
        store=store,
        source=source,
        mapper=mapper,  # type: ignore[arg-type]
        sink=sink,  # type: ignore[arg-type]
        defaults=MappingDefaults(),
        clock=clock or FixedClock(),
    )


class _KeyedSink:
    def __init__(self, key: str) -> None:
        self.key = key

    def submit(self, document: str, *, order_id: str) -> SubmissionReceipt:
        return SubmissionReceipt(status=200, body="", netvisor_key=self.key)


def test_successful_submission_records_key_and_trails_watermark() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource([make_order("1001", "2025-01-01T00:05:00Z")])

    result = _service(store, source, _KeyedSink("K1")).run()

    assert source.calls == ["2025-01-01T00:00:00Z"]
    assert store.was_submitted("1001")
    assert store.sent["1001"].netvisor_key == "K1"
    assert store.watermark == "2025-01-01T00:04:30Z"
    assert result.submitted == ["1001"]
    assert result.new_watermark == "2025-01-01T00:04:30Z"


def test_failed_submission_still_advances_watermark(caplog: pytest.LogCaptureFixture) -> None:
    attempts: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        return httpx.Response(500, text="<Error>boom</Error>")

    config = NetvisorConfig(
        mode="live",
        auth=NetvisorAuth(
            sender="s", partner_id="p", customer_id="c", token="t", mac_key="k"
        ),
    )
    resilient = ResilientClient(
        ResilienceConfig(name="netvisor"),
        transport=httpx.MockTransport(handler),
        sleep=lambda _seconds: None,
    )
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource([make_order("1001", "2025-01-01T00:05:00Z")])

    with (
        NetvisorClient(config, client=resilient) as sink,
        caplog.at_level(logging.ERROR, logger="ordersync.domain.order_sync"),
    ):
        result = _service(store, source, sink, mapper=map_sales_order).run()

    assert len(attempts) == 3
    assert not store.was_submitted("1001")
    assert store.watermark == "2025-01-01T00:04:30Z"
    assert result.failed == ["1001"]
    assert any("1001" in record.getMessage() for record in caplog.records)


def test_second_run_skips_already_submitted_orders() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource(
        [make_order("1001", "2025-01-01T00:05:00Z"), make_order("1002", "2025-01-01T00:06:00Z")]
    )
    sink = RecordingSink()

    first = _service(store, source, sink).run()
    second = _service(store, source, sink).run()

    assert [order_id for order_id, _ in sink.submitted] == ["1001", "1002"]
    assert first.submitted == ["1001", "1002"]
    assert second.skipped == ["1001", "1002"]
    assert second.submitted == []
    assert source.calls == ["2025-01-01T00:00:00Z", "2025-01-01T00:05:30Z"]


def test_failed_order_is_retried_on_next_run() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource([make_order("1001"), make_order("1002", "2025-01-01T00:06:00Z")])
    sink = RecordingSink(fail_for={"1001"})

    first = _service(store, source, sink).run()
    sink.fail_for.clear()
    second = _service(store, source, sink).run()

    assert first.failed == ["1001"]
    assert first.submitted == ["1002"]
    assert second.submitted == ["1001"]
    assert second.skipped == ["1002"]


def test_mapper_error_is_isolated_to_the_order() -> None:
    def flaky_mapper(order: object, _defaults: object) -> str:
        if getattr(order, "id", "") == "bad":
            raise ValueError("cannot map")
        return "<salesinvoice/>"

    store = InMemoryCheckpointStore()
    source = FakeOrderSource([make_order("bad"), make_order("good")])
    sink = RecordingSink()

    result = _service(store, source, sink, mapper=flaky_mapper).run()

    assert result.outcomes == [("bad", RecordOutcome.FAILED), ("good", RecordOutcome.SUBMITTED)]
    assert not store.was_submitted("bad")
    assert store.was_submitted("good")


def test_orders_without_id_are_ignored() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource(
        [make_order("", "2025-01-01T09:00:00Z"), make_order("1001", "2025-01-01T00:05:00Z")]
    )
    sink = RecordingSink()

    result = _service(store, source, sink).run()

    assert result.ignored == 1
    assert [order_id for order_id, _ in sink.submitted] == ["1001"]
    assert store.watermark == "2025-01-01T00:04:30Z"


def test_empty_fetch_leaves_watermark_unchanged() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")

    result = _service(store, FakeOrderSource([]), RecordingSink()).run()

    assert result.fetched == 0
    assert store.watermark == "2025-01-01T00:00:00Z"


def test_unparseable_timestamps_fall_back_to_now(caplog: pytest.LogCaptureFixture) -> None:
    clock = FixedClock(datetime(2025, 1, 1, 12, 0, tzinfo=UTC))
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource([make_order("1001", "not-a-timestamp")])

    with caplog.at_level(logging.WARNING, logger="ordersync.domain.order_sync"):
        result = _service(store, source, RecordingSink(), clock=clock).run()

    assert result.submitted == ["1001"]
    assert store.watermark == "2025-01-01T11:59:30Z"
    assert any("1001" in record.getMessage() for record in caplog.records)


def test_watermark_never_moves_backwards() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource([make_order("1001", "2025-01-01T00:00:10Z")])

    _service(store, source, RecordingSink()).run()

    assert store.watermark == "2025-01-01T00:00:00Z"


def test_watermark_tracks_maximum_not_last_order() -> None:
    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    source = FakeOrderSource(
        [
            make_order("1", "2025-01-01T01:00:00Z"),
            make_order("2", "2025-01-01T00:10:00+00:00"),
            make_order("3", "2025-01-01T03:00:00+02:00"),
        ]
    )

    _service(store, source, RecordingSink()).run()

    assert store.watermark == "2025-01-01T00:59:30Z"


def test_unparseable_stored_watermark_uses_default_window() -> None:
    clock = FixedClock(datetime(2025, 1, 1, 12, 0, tzinfo=UTC))
    store = InMemoryCheckpointStore(watermark="garbage")
    source = FakeOrderSource([])

    service = OrderSyncService(
        store=store,
        source=source,
        mapper=echo_mapper,  # type: ignore[arg-type]
        sink=RecordingSink(),
        defaults=MappingDefaults(),
        fallback_lookback=timedelta(minutes=30),
        clock=clock,
    )
    result = service.run()

    assert source.calls == ["2025-01-01T11:30:00Z"]
    assert result.start_watermark == "2025-01-01T11:30:00Z"
    assert store.watermark == "2025-01-01T11:30:00Z"


def test_fetch_failure_leaves_watermark_untouched() -> None:
    class BrokenSource:
        def fetch_changed_since(self, watermark: str) -> list[object]:
            raise RuntimeError("source down")

    store = InMemoryCheckpointStore(watermark="2025-01-01T00:00:00Z")
    service = OrderSyncService(
        store=store,
        source=BrokenSource(),  # type: ignore[arg-type]
        mapper=echo_mapper,  # type: ignore[arg-type]
        sink=RecordingSink(),
        defaults=MappingDefaults(),
    )

    with pytest.raises(RuntimeError):
        service.run()

    assert store.watermark_writes == []


def test_run_result_groups_outcomes() -> None:
    result = SyncRunResult(
        start_watermark="2025-01-01T00:00:00Z",
        outcomes=[
            ("a", RecordOutcome.SUBMITTED),
            ("b", RecordOutcome.SKIPPED),
            ("c", RecordOutcome.FAILED),
            ("d", RecordOutcome.SUBMITTED),
        ],
    )

    assert result.submitted == ["a", "d"]
    assert result.skipped == ["b"]
    assert result.failed == ["c"]
