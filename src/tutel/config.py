"""
Runtime settings for tutel.

Settings come from the environment, falling back to the defaults below:

    TUTEL_FILE_NAME   name of the per-directory task-list file
    TUTEL_MAX_DEPTH   how many directory levels to descend looking for child lists
    TUTEL_DATA_DIR    where the navigation registry lives
    TUTEL_LOG_LEVEL   logging level for the CLI (DEBUG, INFO, WARNING, ...)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

log = logging.getLogger(__name__)

PROJECT_FILE_NAME = ".tutel.toml"
DEPTH_LIMIT = 5
NAV_FILE_NAME = "tutelnav"
DEFAULT_LOG_LEVEL = "WARNING"


def _default_data_dir(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    xdg = env.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return Path.home() / ".local" / "share"


def _as_int(value: Optional[str], default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        log.warning("Ignoring non-integer setting value %r", value)
        return default


@dataclass(frozen=True)
class Settings:
    file_name: str = PROJECT_FILE_NAME
    max_depth: int = DEPTH_LIMIT
    data_dir: Path = field(default_factory=_default_data_dir)
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def nav_file(self) -> Path:
        return self.data_dir / NAV_FILE_NAME


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from environment variables (os.environ by default)."""
    env = os.environ if environ is None else environ

    data_dir = env.get("TUTEL_DATA_DIR")
    return Settings(
        file_name=env.get("TUTEL_FILE_NAME") or PROJECT_FILE_NAME,
        max_depth=max(0, _as_int(env.get("TUTEL_MAX_DEPTH"), DEPTH_LIMIT)),
        data_dir=Path(data_dir).expanduser() if data_dir else _default_data_dir(env),
        log_level=(env.get("TUTEL_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
