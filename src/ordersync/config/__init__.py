"""Application configuration helpers."""

from __future__ import annotations

from .app import AppConfig, get_app_config
from .env import env_flag, env_float, env_int, optional_env, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import ResilienceConfig, RetryPolicy, get_resilience_config
from .netvisor import NetvisorAuth, NetvisorConfig, get_mapping_defaults, get_netvisor_config
from .shopify import ShopifyConfig, get_shopify_config
from .storage import StorageConfig, get_storage_config
from .sync import SyncConfig, get_sync_config

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "MissingConfigurationError",
    "NetvisorAuth",
    "NetvisorConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "ShopifyConfig",
    "StorageConfig",
    "SyncConfig",
    "env_flag",
    "env_float",
    "env_int",
    "get_app_config",
    "get_mapping_defaults",
    "get_netvisor_config",
    "get_resilience_config",
    "get_shopify_config",
    "get_storage_config",
    "get_sync_config",
    "optional_env",
    "require_env_vars",
]
