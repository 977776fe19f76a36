"""StoreConfig: where to look for the osu! store and how to open it.

Everything has a built-in default; nothing needs configuring for a stock
osu! install. Overrides come from, in increasing priority:

    cleanup-rulesets.toml   # found in the working directory or a parent,
                            # or named by CLEANUP_RULESETS_CONFIG
    .env                    # KEY=VALUE lines next to the toml (optional)
    process environment     # OSU_LAZER_PATH, OSU_DATA_PATH, ...

cleanup-rulesets.toml example:

    [store]
    # file_name = "client.realm"
    # settings_file_name = "storage.ini"
    # schema_version = 0          # version this tool pins on first open
    # fallback_pipe_path = "/tmp/lazer"
"""

from __future__ import annotations

import os
import tempfile
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cleanup_rulesets.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Mapping

_CONFIG_FILENAME = "cleanup-rulesets.toml"
_CONFIG_ENV_VAR = "CLEANUP_RULESETS_CONFIG"

DEFAULT_FILE_NAME = "client.realm"
DEFAULT_SETTINGS_FILE_NAME = "storage.ini"
# OSU_DATA_PATH is the alias advertised by osu! tooling; checked second.
DEFAULT_ENV_VARS = ("OSU_LAZER_PATH", "OSU_DATA_PATH")
DEFAULT_SCHEMA_VERSION = 0
# Online ids reserved for the built-in rulesets (osu, taiko, catch, mania).
OFFICIAL_ONLINE_IDS = range(0, 4)


def _default_pipe_path() -> Path:
    return Path(tempfile.gettempdir()) / "lazer"


@dataclass
class StoreConfig:
    """Resolved configuration for locating and opening a store."""

    file_name: str = DEFAULT_FILE_NAME
    settings_file_name: str = DEFAULT_SETTINGS_FILE_NAME
    env_vars: tuple[str, ...] = DEFAULT_ENV_VARS
    schema_version: int = DEFAULT_SCHEMA_VERSION
    fallback_pipe_path: Path = field(default_factory=_default_pipe_path)
    official_ids: range = OFFICIAL_ONLINE_IDS
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    source: Path | None = None      # toml file this was loaded from, if any

    def env_overrides(self) -> list[str]:
        """Non-blank values of the override variables, in lookup order."""
        values = []
        for name in self.env_vars:
            value = self.environ.get(name, "")
            if value and value.strip():
                values.append(value)
        return values


def _load_env(root: Path) -> dict[str, str]:
    """Parse a simple KEY=VALUE .env file (no external dependency)."""
    env_file = root / ".env"
    if not env_file.exists():
        return {}
    env: dict[str, str] = {}
    for line in env_file.read_text().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and "=" in line:
            k, _, v = line.partition("=")
            env[k.strip()] = v.strip().strip('"').strip("'")
    return env


def _find_config(start: Path) -> Path | None:
    """Walk upward from start looking for cleanup-rulesets.toml."""
    for directory in (start, *start.parents):
        candidate = directory / _CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Could not read {path}: {exc}") from exc


def _typed(section: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = section.get(key, default)
    # bool is an int subclass; a schema version of `true` is a typo, not 1.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise ConfigError(f"[store] {key} must be {kind.__name__}, got {value!r}")
    return value


def load_config(root: Path | str | None = None, environ: Mapping[str, str] | None = None) -> StoreConfig:
    """Load configuration from toml/.env/environment (see module docstring)."""
    process_env = dict(os.environ if environ is None else environ)
    start = Path(root) if root else Path.cwd()

    explicit = process_env.get(_CONFIG_ENV_VAR, "").strip()
    if explicit:
        config_path: Path | None = Path(explicit).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"{_CONFIG_ENV_VAR} points at a missing file: {config_path}")
    else:
        config_path = _find_config(start)

    raw: dict[str, Any] = _read_toml(config_path) if config_path else {}
    env_root = config_path.parent if config_path else start

    # Real environment wins over .env
    merged_env = {**_load_env(env_root), **process_env}

    store = raw.get("store", {})
    if not isinstance(store, dict):
        raise ConfigError("[store] must be a table")

    pipe = _typed(store, "fallback_pipe_path", str, "")

    return StoreConfig(
        file_name=_typed(store, "file_name", str, DEFAULT_FILE_NAME),
        settings_file_name=_typed(store, "settings_file_name", str, DEFAULT_SETTINGS_FILE_NAME),
        schema_version=_typed(store, "schema_version", int, DEFAULT_SCHEMA_VERSION),
        fallback_pipe_path=Path(pipe).expanduser() if pipe else _default_pipe_path(),
        environ=merged_env,
        source=config_path,
    )
