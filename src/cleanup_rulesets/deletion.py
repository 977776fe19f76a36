"""Remove rulesets from the store in a single transaction."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from cleanup_rulesets.db import write_transaction
from cleanup_rulesets.models import RULESET_TABLE

if TYPE_CHECKING:
    import sqlite3
    from collections.abc import Iterable

    from cleanup_rulesets.models import RulesetInfo

logger = logging.getLogger("cleanup_rulesets.deletion")


def delete_rulesets(conn: sqlite3.Connection, targets: Iterable[RulesetInfo]) -> int:
    """Delete targets by short name; all or nothing. Returns rows removed.

    Raises StoreWriteError (after rolling back) if the store rejects any delete.
    """
    removed = 0
    with write_transaction(conn):
        for ruleset in targets:
            cur = conn.execute(f"DELETE FROM {RULESET_TABLE} WHERE ShortName = ?", (ruleset.short_name,))
            logger.debug("delete %s: %d row(s)", ruleset.short_name, cur.rowcount)
            removed += cur.rowcount
    return removed
