from __future__ import annotations

from .logging import configure_logging, preview_secret

__all__ = ["configure_logging", "preview_secret"]
