"""Find an osu! client store and remove custom rulesets from it.

Store layout (SQLite):
    Ruleset(ShortName PK, OnlineID indexed, Name, InstantiationInfo,
            LastAppliedDifficultyVersion, Available)
    PRAGMA user_version   # schema version the store was last written with

Rulesets with online ids 0-3 are the built-in ones and are never offered
for deletion.
"""

from cleanup_rulesets.catalog import is_official, load_rulesets
from cleanup_rulesets.config import StoreConfig, load_config
from cleanup_rulesets.db import open_store, store_session
from cleanup_rulesets.deletion import delete_rulesets
from cleanup_rulesets.errors import (
    CleanupError,
    ConfigError,
    SelectionParseError,
    StoreNotFoundError,
    StoreOpenError,
    StoreReadError,
    StoreWriteError,
)
from cleanup_rulesets.models import RulesetInfo
from cleanup_rulesets.paths import resolve_store_path
from cleanup_rulesets.selection import Selection, SelectionKind, is_confirmed, parse_selection

__all__ = [
    "CleanupError",
    "ConfigError",
    "RulesetInfo",
    "Selection",
    "SelectionKind",
    "SelectionParseError",
    "StoreConfig",
    "StoreNotFoundError",
    "StoreOpenError",
    "StoreReadError",
    "StoreWriteError",
    "delete_rulesets",
    "is_confirmed",
    "is_official",
    "load_config",
    "load_rulesets",
    "open_store",
    "parse_selection",
    "resolve_store_path",
    "store_session",
]
