"""Locate the osu! store file.

Candidates, highest priority first:

    1. the PATH argument given on the command line
    2. OSU_LAZER_PATH, then OSU_DATA_PATH
    3. the platform default storage directory, or the directory named by a
       ``FullPath = ...`` line in its storage.ini

Each candidate may name the store file itself or the directory holding it.
The first normalized candidate that exists as a file wins.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from cleanup_rulesets.errors import StoreNotFoundError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from cleanup_rulesets.config import StoreConfig

logger = logging.getLogger("cleanup_rulesets.paths")

_SEPARATORS = "/\\" if os.sep == "\\" else "/"
_FULL_PATH_KEY = "fullpath ="


def expand_home(path: str, home: str | None = None) -> str:
    """Expand a leading ``~`` or ``~/rest``; ``~user`` forms are left alone."""
    if not path or path[0] != "~":
        return path

    if home is None:
        home = os.path.expanduser("~")
        if home == "~":
            home = ""
    if not home:
        return path.lstrip("~")

    if len(path) == 1:
        return home
    if path[1] in "/\\":
        return os.path.join(home, path[2:])
    return path


def storage_path(config: StoreConfig, *, platform: str | None = None) -> str:
    """Return the osu! data directory for this user and platform."""
    platform = platform or sys.platform
    home = os.path.expanduser("~")

    if platform.startswith("win"):
        appdata = config.environ.get("APPDATA") or os.path.join(home, "AppData", "Roaming")
        base = os.path.join(appdata, "osu")
    elif platform == "darwin":
        base = os.path.join(home, "Library", "Application Support", "osu")
    elif platform.startswith("linux"):
        base = os.path.join(home, ".local", "share", "osu")
    else:
        base = os.getcwd()

    override = read_storage_override(os.path.join(base, config.settings_file_name))
    if override:
        logger.debug("storage redirected by %s to %s", config.settings_file_name, override)
        return override
    return base


def read_storage_override(settings_file: str | Path) -> str | None:
    """Return the ``FullPath = ...`` value from a storage.ini, if set."""
    path = Path(settings_file)
    if not path.is_file():
        return None
    with path.open(encoding="utf-8-sig", errors="replace") as f:
        for line in f:
            if line.lower().startswith(_FULL_PATH_KEY):
                value = line[len(_FULL_PATH_KEY):].strip()
                if value:
                    return value
    return None


def default_store_path(config: StoreConfig, *, platform: str | None = None) -> str:
    return os.path.join(storage_path(config, platform=platform), config.file_name)


def normalize_path(raw: str, config: StoreConfig, *, platform: str | None = None) -> str:
    """Turn a user-supplied location into an absolute store file path.

    Blank input means the default location. Directories (and extensionless
    paths that don't exist yet) get the store file name appended. Applying
    this to its own output returns the output unchanged.
    """
    if not raw or not raw.strip():
        return os.path.abspath(default_store_path(config, platform=platform))

    expanded = expand_home(os.path.expandvars(raw.strip()))

    stripped = expanded.rstrip(_SEPARATORS)
    # Keep "/" and "C:\" intact
    if stripped and not stripped.endswith(":"):
        expanded = stripped

    if os.path.isdir(expanded) or (
        not os.path.isfile(expanded) and not os.path.splitext(expanded)[1]
    ):
        expanded = os.path.join(expanded, config.file_name)

    return os.path.abspath(expanded)


def candidate_paths(argument: str | None, config: StoreConfig, *, platform: str | None = None) -> Iterator[str]:
    """Yield raw candidates in priority order (not yet normalized)."""
    if argument and argument.strip():
        yield argument
    yield from config.env_overrides()
    yield default_store_path(config, platform=platform)


def _ordinal_upper(path: str) -> str:
    # Per-character uppercase only: "ß" must not fold to "SS".
    return "".join(u if len(u := c.upper()) == 1 else c for c in path)


def dedupe(paths: Iterable[str]) -> list[str]:
    """Drop case-insensitive duplicates, keeping the first occurrence."""
    seen: set[str] = set()
    unique: list[str] = []
    for path in paths:
        key = _ordinal_upper(path)
        if key not in seen:
            seen.add(key)
            unique.append(path)
    return unique


def checked_locations(argument: str | None, config: StoreConfig, *, platform: str | None = None) -> list[str]:
    """Normalized, de-duplicated candidate list in lookup order."""
    return dedupe(
        normalize_path(raw, config, platform=platform)
        for raw in candidate_paths(argument, config, platform=platform)
    )


def resolve_store_path(argument: str | None, config: StoreConfig, *, platform: str | None = None) -> Path:
    """Return the first candidate that exists as a file.

    Raises StoreNotFoundError listing every location checked.
    """
    candidates = checked_locations(argument, config, platform=platform)
    for candidate in candidates:
        if os.path.isfile(candidate):
            logger.debug("store found at %s", candidate)
            return Path(candidate)
        logger.debug("no store at %s", candidate)
    raise StoreNotFoundError(candidates)
