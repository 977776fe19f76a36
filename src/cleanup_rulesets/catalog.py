"""List the rulesets eligible for deletion."""

from __future__ import annotations

import sqlite3

from cleanup_rulesets.config import OFFICIAL_ONLINE_IDS
from cleanup_rulesets.errors import StoreReadError
from cleanup_rulesets.models import RULESET_COLUMNS, RULESET_TABLE, RulesetInfo


def is_official(ruleset: RulesetInfo, official_ids: range = OFFICIAL_ONLINE_IDS) -> bool:
    return ruleset.online_id in official_ids


def load_rulesets(conn: sqlite3.Connection, official_ids: range = OFFICIAL_ONLINE_IDS) -> list[RulesetInfo]:
    """Every non-official ruleset, by online id then short name (ordinal).

    Raises StoreReadError if the table can't be read or a row doesn't fit the model.
    """
    columns = ", ".join(RULESET_COLUMNS)
    try:
        rows = conn.execute(f"SELECT {columns} FROM {RULESET_TABLE}").fetchall()
    except sqlite3.Error as exc:
        raise StoreReadError(f"Could not read {RULESET_TABLE}: {exc}") from exc

    rulesets = []
    for row in rows:
        try:
            rulesets.append(RulesetInfo.from_row(row))
        except (TypeError, ValueError) as exc:
            raise StoreReadError(f"Bad {RULESET_TABLE} row {row[0]!r}: {exc}") from exc

    return sorted(
        (r for r in rulesets if not is_official(r, official_ids)),
        key=lambda r: (r.online_id, r.short_name),
    )
