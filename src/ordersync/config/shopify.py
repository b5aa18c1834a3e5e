"""Shopify configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_int, optional_env
from .errors import MissingConfigurationError
from .http_resilience import ResilienceConfig, get_resilience_config

DEFAULT_SHOPIFY_API_VERSION = "2026-01"
DEFAULT_PAGE_SIZE = 50
DEFAULT_MAX_PAGES = 50
DEFAULT_CUSTOMER_PLACEHOLDER = "Unknown"


@dataclass(frozen=True)
class ShopifyConfig:
    """Holds Shopify Admin API configuration values.

    Either ``access_token`` (a long-lived custom-app token) or the
    ``client_id``/``client_secret`` pair must be present.
    """

    shop_domain: str
    api_version: str = DEFAULT_SHOPIFY_API_VERSION
    access_token: str | None = None
    client_id: str | None = None
    client_secret: str | None = None
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES
    customer_placeholder: str = DEFAULT_CUSTOMER_PLACEHOLDER
    resilience: ResilienceConfig = field(default_factory=lambda: ResilienceConfig(name="shopify"))

    @property
    def has_client_credentials(self) -> bool:
        return bool(self.client_id and self.client_secret)

    @property
    def graphql_url(self) -> str:
        return f"https://{self.shop_domain}/admin/api/{self.api_version}/graphql.json"

    @property
    def token_url(self) -> str:
        return f"https://{self.shop_domain}/admin/oauth/access_token"


def get_shopify_config(*, resilience: ResilienceConfig | None = None) -> ShopifyConfig:
    shop_domain = optional_env("SHOPIFY_SHOP_DOMAIN")
    access_token = optional_env("SHOPIFY_ACCESS_TOKEN")
    client_id = optional_env("SHOPIFY_CLIENT_ID")
    client_secret = optional_env("SHOPIFY_CLIENT_SECRET")

    missing: list[str] = []
    if shop_domain is None:
        missing.append("SHOPIFY_SHOP_DOMAIN")
    if access_token is None and not (client_id and client_secret):
        missing.append("SHOPIFY_ACCESS_TOKEN (or SHOPIFY_CLIENT_ID + SHOPIFY_CLIENT_SECRET)")
    if missing or shop_domain is None:
        raise MissingConfigurationError(missing)

    return ShopifyConfig(
        shop_domain=shop_domain,
        api_version=optional_env("SHOPIFY_API_VERSION", DEFAULT_SHOPIFY_API_VERSION)
        or DEFAULT_SHOPIFY_API_VERSION,
        access_token=access_token,
        client_id=client_id,
        client_secret=client_secret,
        page_size=env_int("SHOPIFY_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        resilience=resilience or get_resilience_config("shopify"),
    )
