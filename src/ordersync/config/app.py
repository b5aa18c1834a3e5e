"""Top-level configuration assembled from the per-system sections."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .errors import MissingConfigurationError
from .netvisor import NetvisorConfig, get_netvisor_config
from .shopify import ShopifyConfig, get_shopify_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

if TYPE_CHECKING:
    from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    state_file: Path
    shopify: ShopifyConfig
    netvisor: NetvisorConfig
    sync: SyncConfig


def get_app_config(*, storage: StorageConfig | None = None) -> AppConfig:
    """Load every section, reporting all missing variables in a single error."""

    storage_config = storage or get_storage_config()
    missing: list[str] = []

    shopify: ShopifyConfig | None = None
    netvisor: NetvisorConfig | None = None
    try:
        shopify = get_shopify_config()
    except MissingConfigurationError as exc:
        missing.extend(exc.missing)
    try:
        netvisor = get_netvisor_config(storage=storage_config)
    except MissingConfigurationError as exc:
        missing.extend(exc.missing)

    if missing or shopify is None or netvisor is None:
        raise MissingConfigurationError(missing)

    return AppConfig(
        state_file=storage_config.state_path(),
        shopify=shopify,
        netvisor=netvisor,
        sync=get_sync_config(),
    )
