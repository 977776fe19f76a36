"""Open the osu! store: sqlite3, schema-version adaptive.

The store records the schema version it was last written with in
``PRAGMA user_version``. The first open pins the version this tool was built
against; if the file reports a different one, the open is retried exactly
once pinned to the reported version. Anything else is fatal.
"""

from __future__ import annotations

import contextlib
import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from cleanup_rulesets.errors import StoreOpenError, StoreWriteError
from cleanup_rulesets.models import RULESET_COLUMNS, RULESET_TABLE

if TYPE_CHECKING:
    from collections.abc import Iterator

    from cleanup_rulesets.config import StoreConfig

logger = logging.getLogger("cleanup_rulesets.db")


@dataclass
class Opened:
    conn: sqlite3.Connection
    schema_version: int


@dataclass(frozen=True)
class VersionMismatch:
    reported: int                  # version the file was last written with


@dataclass(frozen=True)
class OpenFailed:
    cause: str


OpenResult = Opened | VersionMismatch | OpenFailed


def ensure_fallback_pipe_path(config: StoreConfig) -> Path:
    """Create the temp-dir coordination path used by the store's writers."""
    path = config.fallback_pipe_path
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StoreOpenError(f"Could not create {path}: {exc}") from exc
    return path


def _missing_columns(conn: sqlite3.Connection) -> list[str]:
    present = {row[1] for row in conn.execute(f"PRAGMA table_info({RULESET_TABLE})")}
    return [name for name in RULESET_COLUMNS if name not in present]


def try_open(path: Path | str, schema_version: int) -> OpenResult:
    """Single open attempt pinned to schema_version. Never raises sqlite3 errors."""
    # mode=rw: never create a store that isn't there
    uri = f"{Path(path).resolve().as_uri()}?mode=rw"
    try:
        conn = sqlite3.connect(uri, uri=True, isolation_level=None)
    except sqlite3.Error as exc:
        return OpenFailed(str(exc))

    try:
        (on_disk,) = conn.execute("PRAGMA user_version").fetchone()
        if on_disk != schema_version:
            conn.close()
            return VersionMismatch(on_disk)

        missing = _missing_columns(conn)
        if missing:
            conn.close()
            return OpenFailed(f"table {RULESET_TABLE} is missing column(s): {', '.join(missing)}")

        conn.execute("PRAGMA foreign_keys=ON")
    except sqlite3.Error as exc:
        conn.close()
        return OpenFailed(str(exc))

    return Opened(conn, on_disk)


def open_store(path: Path | str, config: StoreConfig) -> sqlite3.Connection:
    """Open the store, retrying once on a schema-version mismatch.

    Raises StoreOpenError on any other failure or a second mismatch.
    """
    ensure_fallback_pipe_path(config)

    result = try_open(path, config.schema_version)
    if isinstance(result, VersionMismatch):
        logger.warning(
            "store schema version %d differs from %d; reopening with %d",
            result.reported, config.schema_version, result.reported,
        )
        result = try_open(path, result.reported)

    if isinstance(result, Opened):
        logger.debug("opened %s at schema version %d", path, result.schema_version)
        return result.conn
    if isinstance(result, VersionMismatch):
        msg = f"Could not open {path}: schema version changed again (now {result.reported})"
        raise StoreOpenError(msg)
    raise StoreOpenError(f"Could not open {path}: {result.cause}")


@contextlib.contextmanager
def store_session(path: Path | str, config: StoreConfig) -> Iterator[sqlite3.Connection]:
    """Open the store for the duration of a with-block; always closes it."""
    conn = open_store(path, config)
    try:
        yield conn
    finally:
        conn.close()
        logger.debug("closed %s", path)


@contextlib.contextmanager
def write_transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Run the block as one write transaction: commit on success, else roll back.

    sqlite3 errors are re-raised as StoreWriteError after the rollback.
    """
    try:
        conn.execute("BEGIN IMMEDIATE")
    except sqlite3.Error as exc:
        raise StoreWriteError(f"Could not start write transaction: {exc}") from exc

    try:
        yield conn
        conn.execute("COMMIT")
    except sqlite3.Error as exc:
        _rollback(conn)
        raise StoreWriteError(f"Write transaction rolled back: {exc}") from exc
    except BaseException:
        _rollback(conn)
        raise
    logger.debug("write transaction committed")


def _rollback(conn: sqlite3.Connection) -> None:
    if conn.in_transaction:
        conn.execute("ROLLBACK")
    logger.warning("write transaction rolled back")
