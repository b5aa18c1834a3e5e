from __future__ import annotations

import pytest

_ORDERSYNC_ENV_VARS = (
    "STATE_FILE",
    "ORDERSYNC_DATA_DIR",
    "SHOPIFY_SHOP_DOMAIN",
    "SHOPIFY_API_VERSION",
    "SHOPIFY_ACCESS_TOKEN",
    "SHOPIFY_CLIENT_ID",
    "SHOPIFY_CLIENT_SECRET",
    "SHOPIFY_PAGE_SIZE",
    "NETVISOR_BASE_URL",
    "NETVISOR_MODE",
    "NETVISOR_OUT_DIR",
    "NETVISOR_DEBUG_AUTH",
    "NETVISOR_SENDER",
    "NETVISOR_PARTNER_ID",
    "NETVISOR_CUSTOMER_ID",
    "NETVISOR_TOKEN",
    "NETVISOR_MAC_KEY",
    "NETVISOR_LANGUAGE",
    "NETVISOR_ORG_ID",
    "NETVISOR_USE_HTTP_STATUS",
    "NETVISOR_MAC_ALGO",
    "NETVISOR_DEFAULT_CUSTOMER_CODE",
    "NETVISOR_DEFAULT_PAYMENT_TERM",
    "NETVISOR_DEFAULT_VAT_PERCENT",
    "NETVISOR_DEFAULT_VAT_CODE",
    "NETVISOR_DEFAULT_PRODUCT_CODE",
    "HTTP_TIMEOUT",
    "HTTP_CONNECT_TIMEOUT",
    "HTTP_PROXY",
    "SYNC_OVERLAP_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ORDERSYNC_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def shopify_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHOPIFY_SHOP_DOMAIN", "demo.myshopify.com")
    monkeypatch.setenv("SHOPIFY_ACCESS_TOKEN", "shpat_static")


@pytest.fixture
def netvisor_live_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NETVISOR_MODE", "live")
    monkeypatch.setenv("NETVISOR_SENDER", "ordersync")
    monkeypatch.setenv("NETVISOR_PARTNER_ID", "partner")
    monkeypatch.setenv("NETVISOR_CUSTOMER_ID", "customer")
    monkeypatch.setenv("NETVISOR_TOKEN", "nv-token")
    monkeypatch.setenv("NETVISOR_MAC_KEY", "secret-key")
