"""Netvisor configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import Literal

from ordersync.domain.model import MappingDefaults

from .env import env_flag, env_float, env_int, optional_env, require_env_vars
from .http_resilience import ResilienceConfig, get_resilience_config
from .storage import StorageConfig, get_storage_config

log = getLogger(__name__)

DEFAULT_NETVISOR_BASE_URL = "https://isvapi.netvisor.fi"
DEFAULT_MAC_ALGORITHM = "HMACSHA256"

NetvisorMode = Literal["live", "mock"]

_LIVE_AUTH_VARS = (
    "NETVISOR_SENDER",
    "NETVISOR_PARTNER_ID",
    "NETVISOR_CUSTOMER_ID",
    "NETVISOR_TOKEN",
    "NETVISOR_MAC_KEY",
)


@dataclass(frozen=True, slots=True)
class NetvisorAuth:
    sender: str = ""
    partner_id: str = ""
    customer_id: str = ""
    token: str = ""
    mac_key: str = ""
    language: str = "FI"
    organization_id: str = ""
    use_http_status_codes: bool = True
    mac_algorithm: str = DEFAULT_MAC_ALGORITHM


@dataclass(frozen=True)
class NetvisorConfig:
    base_url: str = DEFAULT_NETVISOR_BASE_URL
    mode: NetvisorMode = "mock"
    out_dir: Path = Path("out") / "netvisor"
    debug_auth: bool = False
    auth: NetvisorAuth = field(default_factory=NetvisorAuth)
    defaults: MappingDefaults = field(default_factory=MappingDefaults)
    resilience: ResilienceConfig = field(default_factory=lambda: ResilienceConfig(name="netvisor"))

    @property
    def sales_invoice_url(self) -> str:
        return self.base_url.rstrip("/") + "/salesinvoice.nv"


def _resolve_mode(raw: str | None) -> NetvisorMode:
    value = (raw or "mock").lower()
    if value == "live":
        return "live"
    if value != "mock":
        log.warning("Unknown NETVISOR_MODE %r, falling back to mock", raw)
    return "mock"


def get_mapping_defaults() -> MappingDefaults:
    return MappingDefaults(
        customer_code=optional_env("NETVISOR_DEFAULT_CUSTOMER_CODE", "CASH") or "CASH",
        payment_term_days=env_int("NETVISOR_DEFAULT_PAYMENT_TERM", 14),
        vat_percent=env_float("NETVISOR_DEFAULT_VAT_PERCENT", 25.5),
        vat_code=optional_env("NETVISOR_DEFAULT_VAT_CODE", "KOMY") or "KOMY",
        product_code=optional_env("NETVISOR_DEFAULT_PRODUCT_CODE", "SHOPIFY_ITEM")
        or "SHOPIFY_ITEM",
    )


def get_netvisor_config(
    *,
    storage: StorageConfig | None = None,
    resilience: ResilienceConfig | None = None,
) -> NetvisorConfig:
    mode = _resolve_mode(optional_env("NETVISOR_MODE"))

    if mode == "live":
        require_env_vars(_LIVE_AUTH_VARS)

    auth = NetvisorAuth(
        sender=optional_env("NETVISOR_SENDER", "") or "",
        partner_id=optional_env("NETVISOR_PARTNER_ID", "") or "",
        customer_id=optional_env("NETVISOR_CUSTOMER_ID", "") or "",
        token=optional_env("NETVISOR_TOKEN", "") or "",
        mac_key=optional_env("NETVISOR_MAC_KEY", "") or "",
        language=optional_env("NETVISOR_LANGUAGE", "FI") or "FI",
        organization_id=optional_env("NETVISOR_ORG_ID", "") or "",
        use_http_status_codes=env_flag("NETVISOR_USE_HTTP_STATUS", default=True),
        mac_algorithm=optional_env("NETVISOR_MAC_ALGO", DEFAULT_MAC_ALGORITHM)
        or DEFAULT_MAC_ALGORITHM,
    )

    base_url = optional_env("NETVISOR_BASE_URL", DEFAULT_NETVISOR_BASE_URL)
    out_dir = optional_env("NETVISOR_OUT_DIR")
    storage_config = storage or get_storage_config()

    return NetvisorConfig(
        base_url=base_url or DEFAULT_NETVISOR_BASE_URL,
        mode=mode,
        out_dir=Path(out_dir) if out_dir else storage_config.default_out_dir(),
        debug_auth=env_flag("NETVISOR_DEBUG_AUTH", default=False),
        auth=auth,
        defaults=get_mapping_defaults(),
        resilience=resilience or get_resilience_config("netvisor"),
    )
