"""Configuration loading from environment variables and decision-log.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_STORAGE_ROOT = Path.home() / ".claude" / "decision-log"
_CONFIG_FILENAME = "decision-log.toml"


@dataclass
class DecisionLogConfig:
    """Top-level decision-log configuration."""

    storage_root: Path = _DEFAULT_STORAGE_ROOT
    git_timeout: float = 5.0
    log_level: str = "WARNING"


def load_config(config_path: Path | None = None) -> DecisionLogConfig:
    """Load configuration from environment variables and optional decision-log.toml.

    Priority: environment variables > decision-log.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.claude/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".claude" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    storage_root = os.getenv("DECISION_LOG_ROOT", file_data.get("storage_root"))
    return DecisionLogConfig(
        storage_root=Path(storage_root).expanduser() if storage_root else _DEFAULT_STORAGE_ROOT,
        git_timeout=float(os.getenv("DECISION_LOG_GIT_TIMEOUT", file_data.get("git_timeout", 5.0))),
        log_level=os.getenv("DECISION_LOG_LOG_LEVEL", file_data.get("log_level", "WARNING")),
    )
