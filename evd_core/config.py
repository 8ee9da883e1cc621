"""Load listener declarations from TOML or YAML configuration files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import tomllib
import yaml
from platformdirs import user_config_dir

from evd_core.errors import ConfigError
from evd_core.loader import import_object

__all__ = ["ListenerConfig", "default_config_path", "CONFIG_ENV_VAR", "CONFIG_FILE_NAME"]

DEFAULT_APP_NAME = "evd"
CONFIG_FILE_NAME = "listeners.toml"
CONFIG_ENV_VAR = "EVD_LISTENERS_CONFIG"
_YAML_SUFFIXES = (".yml", ".yaml")


def default_config_path(env: Mapping[str, str] | None = None) -> Path:
    """Return the listener config path, honouring ``EVD_LISTENERS_CONFIG``."""

    environ = os.environ if env is None else env
    override = environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    base_dir = Path(user_config_dir(DEFAULT_APP_NAME, appauthor=False))
    return base_dir / CONFIG_FILE_NAME


def _read_document(path: Path) -> dict[str, Any]:
    try:
        if path.suffix in _YAML_SUFFIXES:
            with path.open("r", encoding="utf-8") as handle:
                document = yaml.safe_load(handle) or {}
        else:
            with path.open("rb") as handle:
                document = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"unable to read listener config at {path}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"listener config at {path} must be a table")
    return document


@dataclass(frozen=True)
class ListenerConfig:
    """Listener sources declared in a ``[dispatcher]`` section."""

    listeners: tuple[str, ...] = ()
    path: Path | None = None

    @classmethod
    def load(cls, path: Path | str | None = None) -> "ListenerConfig":
        """Read ``path`` (or the default location); a missing file is empty."""

        resolved = Path(path) if path is not None else default_config_path()
        if not resolved.exists():
            return cls(path=resolved)

        document = _read_document(resolved)
        section = document.get("dispatcher", {})
        if not isinstance(section, dict):
            raise ConfigError("malformed [dispatcher] section")

        raw = section.get("listeners", [])
        if not isinstance(raw, list):
            raise ConfigError("'listeners' must be a list")

        listeners: list[str] = []
        for item in raw:
            if not isinstance(item, str) or not item.strip():
                raise ConfigError(f"listener entries must be non-empty strings, got {item!r}")
            listeners.append(item.strip())
        return cls(listeners=tuple(listeners), path=resolved)

    def sources(self) -> tuple[str, ...]:
        """Return the declared sources after checking each one imports."""

        for entry in self.listeners:
            try:
                import_object(entry)
            except ImportError as exc:
                raise ConfigError(f"cannot import listener {entry!r}: {exc}") from exc
        return self.listeners
