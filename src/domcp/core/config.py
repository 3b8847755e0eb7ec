"""
User-level configuration for DOMCP.

Sources, lowest to highest precedence:

1. Built-in defaults
2. ``~/.domcp/config.toml``::

       [store]
       db_path = "~/.domcp/domcp.db"

       [logging]
       level = "INFO"

3. Environment: ``DOMCP_DB_PATH``, ``DOMCP_LOG_LEVEL``

The CLI ``--db`` option overrides the resulting ``db_path``.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import DomcpError

DOMCP_HOME = Path.home() / ".domcp"
DEFAULT_DB_PATH = DOMCP_HOME / "domcp.db"
DEFAULT_CONFIG_PATH = DOMCP_HOME / "config.toml"

ENV_DB_PATH = "DOMCP_DB_PATH"
ENV_LOG_LEVEL = "DOMCP_LOG_LEVEL"


@dataclass
class Settings:
    """Resolved runtime settings."""

    db_path: Path = field(default_factory=lambda: DEFAULT_DB_PATH)
    log_level: str = "INFO"


def load_settings(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """
    Resolve settings from defaults, the config file and the environment.

    Args:
        config_path: Config file to read (default ``~/.domcp/config.toml``);
            a missing file is not an error
        environ: Environment mapping (default ``os.environ``)

    Raises:
        DomcpError: If the config file exists but is not valid TOML
    """
    config_path = config_path or DEFAULT_CONFIG_PATH
    env = os.environ if environ is None else environ
    settings = Settings()

    if config_path.is_file():
        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise DomcpError(f"Invalid config file {config_path}: {e}") from e

        store = data.get("store", {})
        if store.get("db_path"):
            settings.db_path = Path(store["db_path"]).expanduser()
        logging_data = data.get("logging", {})
        if logging_data.get("level"):
            settings.log_level = str(logging_data["level"]).upper()

    if env.get(ENV_DB_PATH):
        settings.db_path = Path(env[ENV_DB_PATH]).expanduser()
    if env.get(ENV_LOG_LEVEL):
        settings.log_level = env[ENV_LOG_LEVEL].upper()

    return settings


__all__ = [
    "DEFAULT_DB_PATH",
    "DEFAULT_CONFIG_PATH",
    "Settings",
    "load_settings",
]
