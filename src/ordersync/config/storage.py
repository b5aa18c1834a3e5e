"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from .env import optional_env

APP_DIR_NAME: Final[str] = "ordersync"
DEFAULT_STATE_FILENAME: Final[str] = "state.json"
DEFAULT_OUT_DIR: Final[Path] = Path("out") / "netvisor"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    state_file: Path | None = None
    state_filename: str = DEFAULT_STATE_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def state_path(self) -> Path:
        if self.state_file is not None:
            return self.state_file.expanduser().resolve()
        return self.resolve_data_dir() / self.state_filename

    def default_out_dir(self) -> Path:
        return self.resolve_data_dir() / DEFAULT_OUT_DIR


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = optional_env("ORDERSYNC_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    state_file = optional_env("STATE_FILE")
    return StorageConfig(data_dir=data_dir, state_file=Path(state_file) if state_file else None)
