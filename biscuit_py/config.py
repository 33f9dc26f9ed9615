"""
Configuration file support for Biscuit.

Loads settings from ``~/.config/biscuit/config.yaml`` (or
``$XDG_CONFIG_HOME/biscuit/config.yaml``) and exposes them as a typed
dataclass that the CLI can merge with command-line flags.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger("biscuit.config")

DEFAULT_ROOT_PATH = "/"
DEFAULT_DB_PATH = "/var/lib/pacman"


def default_config_path() -> Path:
    """Return the default configuration file path.

    Uses ``$XDG_CONFIG_HOME/biscuit/config.yaml`` when set, otherwise
    falls back to ``~/.config/biscuit/config.yaml``.
    """
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "biscuit" / "config.yaml"
    return Path.home() / ".config" / "biscuit" / "config.yaml"


@dataclass
class BiscuitConfig:
    """Top-level configuration loaded from the YAML file."""

    root_path: Optional[Path] = None
    db_path: Optional[Path] = None
    output_dir: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BiscuitConfig":
        """Construct a ``BiscuitConfig`` from a parsed YAML dictionary."""
        if not isinstance(data, dict):
            return cls()

        def _path(key: str) -> Optional[Path]:
            value = data.get(key)
            if value is None:
                return None
            if not isinstance(value, str):
                logger.warning("Ignoring non-string %s value: %s", key, value)
                return None
            return Path(value).expanduser()

        return cls(
            root_path=_path("root_path"),
            db_path=_path("db_path"),
            output_dir=_path("output_dir"),
        )

    @classmethod
    def from_file(cls, path: Path) -> "BiscuitConfig":
        """Read a YAML file and return a ``BiscuitConfig``.

        Returns an empty default config on any error.
        """
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f.read())
            if data is None:
                return cls()
            return cls.from_dict(data)
        except (IOError, yaml.YAMLError) as e:
            logger.error("Failed to load config from %s: %s", path, e)
            return cls()

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "BiscuitConfig":
        """Load config from *config_path* or the default location.

        Returns an empty config if the file does not exist. A missing file
        that was asked for explicitly is reported as a warning.
        """
        path = config_path or default_config_path()
        if not path.exists():
            if config_path is not None:
                logger.warning("Config file %s not found; using defaults", path)
            else:
                logger.debug("No config file at %s; using defaults", path)
            return cls()
        logger.debug("Loading config from %s", path)
        return cls.from_file(path)

    def resolve_root_path(self, flag: Optional[str]) -> Path:
        """Root path from the flag, ``$BISCUIT_ROOT_PATH``, config, or default."""
        return _resolve(flag, "BISCUIT_ROOT_PATH", self.root_path, DEFAULT_ROOT_PATH)

    def resolve_db_path(self, flag: Optional[str]) -> Path:
        """Database path from the flag, ``$BISCUIT_DB_PATH``, config, or default."""
        return _resolve(flag, "BISCUIT_DB_PATH", self.db_path, DEFAULT_DB_PATH)

    def resolve_output_path(self, flag: Optional[str], name: str) -> Path:
        """Output file from the flag, or ``<name>.toml`` in ``output_dir``."""
        if flag:
            return Path(flag)
        filename = f"{name}.toml"
        if self.output_dir:
            return self.output_dir / filename
        return Path(filename)


def _resolve(
    flag: Optional[str], env_var: str, configured: Optional[Path], default: str
) -> Path:
    value = flag or os.environ.get(env_var)
    if value:
        return Path(value)
    if configured:
        return configured
    return Path(default)
