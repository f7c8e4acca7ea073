"""
Retro Micro-OS Configuration
Runtime settings with environment-variable overrides.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from core.logging import LogLevel


_TRUE_VALUES = ("1", "true", "yes", "on")


def _default_state_dir() -> str:
    return os.path.expanduser("~/.retroos")


@dataclass
class ConsoleConfig:
    """Settings shared by the shell, the editor and storage."""
    state_dir: str = field(default_factory=_default_state_dir)
    persist: bool = True
    completion_columns: int = 4
    completion_width: int = 20
    history_limit: int = 0           # 0 = unbounded
    boot_line_delay: float = 0.3
    boot_logo_delay: float = 0.1
    log_level: LogLevel = LogLevel.INFO
    log_file: Optional[str] = None   # system log is appended here when set

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ConsoleConfig":
        """Build a config, overriding defaults from RETROOS_* variables."""
        if environ is None:
            environ = dict(os.environ)

        config = cls()

        if environ.get("RETROOS_STATE_DIR"):
            config.state_dir = os.path.expanduser(environ["RETROOS_STATE_DIR"])

        if "RETROOS_PERSIST" in environ:
            config.persist = environ["RETROOS_PERSIST"].strip().lower() in _TRUE_VALUES

        if environ.get("RETROOS_LOG_FILE"):
            config.log_file = os.path.expanduser(environ["RETROOS_LOG_FILE"])

        level_name = environ.get("RETROOS_LOG_LEVEL", "").strip().upper()
        if level_name:
            try:
                config.log_level = LogLevel[level_name]
            except KeyError:
                raise ValueError(f"Unknown log level: {level_name}")

        delay = environ.get("RETROOS_BOOT_DELAY", "").strip()
        if delay:
            try:
                value = float(delay)
            except ValueError:
                raise ValueError(f"Invalid boot delay: {delay}")
            config.boot_line_delay = value
            config.boot_logo_delay = value / 3

        return config
