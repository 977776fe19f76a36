"""Pytest configuration and fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Callable, Iterable
from pathlib import Path

import pytest

from cleanup_rulesets.config import StoreConfig
from cleanup_rulesets.models import RULESET_COLUMNS, RULESET_TABLE, RulesetInfo

StoreFactory = Callable[..., Path]

RULESET_DDL = (
    f"CREATE TABLE {RULESET_TABLE} (\n"
    + ",\n".join(f"    {name} {decl}" for name, decl in RULESET_COLUMNS.items())
    + "\n);\n"
    f"CREATE INDEX idx_{RULESET_TABLE}_OnlineID ON {RULESET_TABLE}(OnlineID);\n"
)


def ruleset(short_name: str, online_id: int = -1, **kwargs) -> RulesetInfo:
    return RulesetInfo(short_name=short_name, online_id=online_id, name=kwargs.pop("name", short_name.upper()), **kwargs)


def write_store(path: Path, rulesets: Iterable[RulesetInfo], schema_version: int = 0) -> Path:
    """Create a store file at path holding the given rulesets."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(RULESET_DDL)
        conn.executemany(
            "INSERT INTO Ruleset VALUES (?, ?, ?, ?, ?, ?)",
            [
                (
                    r.short_name,
                    r.online_id,
                    r.name,
                    r.instantiation_info,
                    r.last_applied_difficulty_version,
                    int(r.available),
                )
                for r in rulesets
            ],
        )
        conn.execute(f"PRAGMA user_version = {int(schema_version)}")
        conn.commit()
    finally:
        conn.close()
    return path


def short_names_in(path: Path) -> set[str]:
    conn = sqlite3.connect(path)
    try:
        return {row[0] for row in conn.execute("SELECT ShortName FROM Ruleset")}
    finally:
        conn.close()


@pytest.fixture
def make_store(tmp_path: Path) -> StoreFactory:
    """Factory: make_store(rulesets, schema_version=0, name="client.realm")."""

    def _make(rulesets: Iterable[RulesetInfo] = (), schema_version: int = 0, name: str = "client.realm") -> Path:
        return write_store(tmp_path / name, rulesets, schema_version)

    return _make


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """An empty home directory, so platform defaults never hit a real install."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("USERPROFILE", str(home_dir))
    return home_dir


@pytest.fixture
def cfg(tmp_path: Path, home: Path) -> StoreConfig:
    return StoreConfig(environ={}, fallback_pipe_path=tmp_path / "pipe")


@pytest.fixture
def cli_env(tmp_path: Path, home: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the CLI from the caller's environment and working directory."""
    for name in ("OSU_LAZER_PATH", "OSU_DATA_PATH", "FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
        monkeypatch.delenv(name, raising=False)

    work = tmp_path / "work"
    work.mkdir()
    config_file = work / "cleanup-rulesets.toml"
    config_file.write_text(f'[store]\nfallback_pipe_path = "{(tmp_path / "pipe").as_posix()}"\n')
    monkeypatch.setenv("CLEANUP_RULESETS_CONFIG", str(config_file))
    monkeypatch.chdir(work)
    return work
