"""Parse the operator's ruleset selection and confirmation answers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from cleanup_rulesets.errors import SelectionParseError

_SEPARATORS_RE = re.compile(r"[, \t;]+")
_INTEGER_RE = re.compile(r"\s*[+-]?[0-9]+\s*")


class SelectionKind(Enum):
    KEEP_ALL = "keep-all"      # blank input: delete nothing
    ALL = "all"                # the literal "all"
    INDICES = "indices"        # explicit index list


@dataclass(frozen=True)
class Selection:
    kind: SelectionKind
    indices: frozenset[int] = field(default_factory=frozenset)

    def __len__(self) -> int:
        return len(self.indices)

    def sorted(self) -> list[int]:
        return sorted(self.indices)


def parse_selection(text: str | None, count: int) -> Selection:
    """Parse a selection line against a listing of ``count`` entries.

    Raises SelectionParseError if any token is not an integer in
    ``[0, count)``; nothing is selected in that case.
    """
    text = (text or "").strip()
    if not text:
        return Selection(SelectionKind.KEEP_ALL)
    if text.lower() == "all":
        return Selection(SelectionKind.ALL, frozenset(range(count)))

    indices: set[int] = set()
    for token in _SEPARATORS_RE.split(text):
        if not token:
            continue
        if not _INTEGER_RE.fullmatch(token):
            raise SelectionParseError(token, "not an integer")
        index = int(token)
        if not 0 <= index < count:
            raise SelectionParseError(token, f"out of range 0..{count - 1}")
        indices.add(index)

    return Selection(SelectionKind.INDICES, frozenset(indices))


def is_confirmed(answer: str | None) -> bool:
    """Only the word "yes" (any case) confirms."""
    return answer is not None and answer.lower() == "yes"
