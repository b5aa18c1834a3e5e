"""Domain port definitions for adapters."""

from __future__ import annotations

from .checkpoint import CheckpointStore
from .fetching import OrderSource
from .submission import SalesOrderMapper, SalesOrderSink

__all__ = [
    "CheckpointStore",
    "OrderSource",
    "SalesOrderMapper",
    "SalesOrderSink",
]
