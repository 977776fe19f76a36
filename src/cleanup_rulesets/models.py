"""Data model for ruleset records stored in the client database."""

from __future__ import annotations

import dataclasses
import functools
from dataclasses import dataclass
from typing import Any

RULESET_TABLE = "Ruleset"

# Column name -> declaration, in table order.
RULESET_COLUMNS: dict[str, str] = {
    "ShortName": "TEXT PRIMARY KEY NOT NULL",
    "OnlineID": "INTEGER NOT NULL DEFAULT -1",
    "Name": "TEXT NOT NULL DEFAULT ''",
    "InstantiationInfo": "TEXT NOT NULL DEFAULT ''",
    "LastAppliedDifficultyVersion": "INTEGER NOT NULL DEFAULT 0",
    "Available": "INTEGER NOT NULL DEFAULT 0",
}


@functools.total_ordering
@dataclass(eq=False)
class RulesetInfo:
    """A ruleset registered in the store.

    Identity is the short name alone: two records with the same ``short_name``
    are equal and hash alike whatever their other fields hold.
    """

    short_name: str = ""
    online_id: int = -1                      # negative = locally defined / unofficial
    name: str = ""
    instantiation_info: str = ""             # opaque payload used to construct the ruleset
    last_applied_difficulty_version: int = 0
    available: bool = False

    @classmethod
    def from_row(cls, row: Any) -> RulesetInfo:
        """Build a record from a ``SELECT`` over :data:`RULESET_COLUMNS`, in order."""
        short_name, online_id, name, info, difficulty_version, available = row
        return cls(
            short_name=short_name,
            online_id=int(online_id),
            name=name or "",
            instantiation_info=info or "",
            last_applied_difficulty_version=int(difficulty_version or 0),
            available=bool(available),
        )

    def _sort_key(self) -> tuple[int, int, str]:
        # Official rulesets (non-negative ids) always come first.
        if self.online_id >= 0:
            return (0, self.online_id, self.short_name)
        return (1, 0, self.short_name)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, RulesetInfo):
            return NotImplemented
        return self.short_name == other.short_name

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RulesetInfo):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __hash__(self) -> int:
        return hash(self.short_name)

    def __str__(self) -> str:
        return self.name

    def clone(self) -> RulesetInfo:
        return dataclasses.replace(self)
