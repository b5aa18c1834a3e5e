"""Configuration error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ordersync.domain.errors import ErrorKind, OrderSyncError

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(OrderSyncError):
    """Raised when configuration values are invalid."""

    kind = ErrorKind.FATAL


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(sorted(set(missing)))
        super().__init__(f"Missing configuration for: {', '.join(self.missing)}")
