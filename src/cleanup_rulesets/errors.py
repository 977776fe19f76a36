"""Exception types raised by cleanup_rulesets."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence


class CleanupError(Exception):
    """Base class for every error this package raises."""


class ConfigError(CleanupError):
    """cleanup-rulesets.toml could not be read or holds a bad value."""


class StoreNotFoundError(CleanupError):
    """No candidate location held a store file."""

    def __init__(self, checked: Sequence[str]) -> None:
        self.checked = list(checked)
        super().__init__("Could not locate osu! realm database")


class StoreOpenError(CleanupError):
    """The store exists but could not be opened."""


class StoreReadError(CleanupError):
    """Records could not be read, or a stored value has the wrong type."""


class StoreWriteError(CleanupError):
    """A write transaction failed and was rolled back."""


class SelectionParseError(CleanupError):
    """Operator selection held a bad or out-of-range token."""

    def __init__(self, token: str, reason: str) -> None:
        self.token = token
        self.reason = reason
        super().__init__(f"{token!r}: {reason}")
