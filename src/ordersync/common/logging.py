"""Shared logging helpers for ordersync."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once for scheduled runs.

    Records carry the full date so log files from separate runs stay readable.
    httpx request logging is kept at WARNING or above. Pass ``force=True`` to
    reconfigure during tests.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        force=force,
    )
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))


def preview_secret(value: str, *, head: int = 10, tail: int = 6) -> str:
    """Return a shortened form of a secret that is safe to print."""

    if len(value) <= head + tail:
        return "*" * len(value)
    return f"{value[:head]}...{value[-tail:]}"
