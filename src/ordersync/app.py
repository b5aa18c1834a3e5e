"""Application orchestration entry points."""

from __future__ import annotations

import time
from contextlib import ExitStack
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING

from ordersync.adapters.checkpoint_store import JsonCheckpointStore
from ordersync.adapters.http_resilience import ResilientClient
from ordersync.adapters.netvisor import (
    FileDropSalesOrderSink,
    NetvisorClient,
    RequestSigner,
    map_sales_order,
)
from ordersync.adapters.shopify import ShopifyOrderReader, exchange_client_credentials
from ordersync.config import get_app_config, get_shopify_config
from ordersync.domain.errors import CredentialError
from ordersync.domain.order_sync import OrderSyncService, SyncRunResult
from ordersync.domain.timestamps import utcnow

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from ordersync.config import AppConfig, NetvisorConfig, ShopifyConfig
    from ordersync.domain.ports import CheckpointStore, OrderSource, SalesOrderSink
    from ordersync.domain.timestamps import Clock

log = getLogger(__name__)


def build_sales_order_sink(config: NetvisorConfig) -> NetvisorClient | FileDropSalesOrderSink:
    """Pick the destination for the configured Netvisor mode."""

    if config.mode == "live":
        return NetvisorClient(config)

    signer = RequestSigner(config.auth, debug=True) if config.debug_auth else None
    return FileDropSalesOrderSink(config.out_dir, signer=signer, url=config.sales_invoice_url)


def run_order_sync(
    *,
    config: AppConfig | None = None,
    state_file: Path | None = None,
    store: CheckpointStore | None = None,
    source: OrderSource | None = None,
    sink: SalesOrderSink | None = None,
    clock: Clock = utcnow,
) -> SyncRunResult:
    """Run one Shopify to Netvisor pass using the configured adapters."""

    effective_config = config or get_app_config()
    effective_state = state_file or effective_config.state_file
    effective_store = store or JsonCheckpointStore(
        effective_state,
        first_run_lookback=timedelta(seconds=effective_config.sync.first_run_lookback_seconds),
        clock=clock,
    )
    effective_source = source or ShopifyOrderReader(
        config=effective_config.shopify, store=effective_store
    )

    log.info(
        "Starting order sync: shop=%s netvisor_mode=%s state=%s",
        effective_config.shopify.shop_domain,
        effective_config.netvisor.mode,
        effective_state,
    )

    with ExitStack() as stack:
        effective_sink = sink
        if effective_sink is None:
            built = build_sales_order_sink(effective_config.netvisor)
            if isinstance(built, NetvisorClient):
                stack.enter_context(built)
            effective_sink = built

        service = OrderSyncService(
            store=effective_store,
            source=effective_source,
            mapper=map_sales_order,
            sink=effective_sink,
            defaults=effective_config.netvisor.defaults,
            overlap=timedelta(seconds=effective_config.sync.overlap_seconds),
            fallback_lookback=timedelta(seconds=effective_config.sync.first_run_lookback_seconds),
            clock=clock,
        )
        return service.run()


def fetch_shopify_token(
    *,
    config: ShopifyConfig | None = None,
    client_factory: Callable[[ShopifyConfig], ResilientClient] | None = None,
    clock: Callable[[], float] = time.time,
) -> tuple[str, int]:
    """Exchange the configured client credentials for a fresh access token.

    Returns the token and the number of seconds it stays usable.
    """

    effective_config = config or get_shopify_config()
    if not effective_config.has_client_credentials:
        raise CredentialError(
            "Missing SHOPIFY_CLIENT_ID / SHOPIFY_CLIENT_SECRET for the token exchange"
        )

    factory = client_factory or (lambda cfg: ResilientClient(cfg.resilience))
    with factory(effective_config) as client:
        token, expires_at = exchange_client_credentials(client, effective_config, clock=clock)
    return token, max(0, expires_at - int(clock()))
