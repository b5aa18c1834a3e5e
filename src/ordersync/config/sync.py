"""Synchronization defaults for the order sync run."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_int

DEFAULT_OVERLAP_SECONDS = 30
DEFAULT_FIRST_RUN_LOOKBACK_SECONDS = 1800


@dataclass(frozen=True, slots=True)
class SyncConfig:
    overlap_seconds: int = DEFAULT_OVERLAP_SECONDS
    first_run_lookback_seconds: int = DEFAULT_FIRST_RUN_LOOKBACK_SECONDS


def get_sync_config() -> SyncConfig:
    return SyncConfig(overlap_seconds=env_int("SYNC_OVERLAP_SECONDS", DEFAULT_OVERLAP_SECONDS))
