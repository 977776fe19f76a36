"""cleanup-rulesets CLI: remove custom rulesets from an osu! client store.

Flow:
    resolve store path -> open (schema-version adaptive) -> list custom rulesets
    -> read selection -> confirm -> delete in one transaction -> report
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.text import Text

from cleanup_rulesets.catalog import load_rulesets
from cleanup_rulesets.config import StoreConfig, load_config
from cleanup_rulesets.db import store_session
from cleanup_rulesets.deletion import delete_rulesets
from cleanup_rulesets.errors import (
    ConfigError,
    SelectionParseError,
    StoreNotFoundError,
    StoreOpenError,
    StoreReadError,
    StoreWriteError,
)
from cleanup_rulesets.paths import resolve_store_path
from cleanup_rulesets.selection import SelectionKind, is_confirmed, parse_selection

if TYPE_CHECKING:
    import sqlite3
    from pathlib import Path

    from cleanup_rulesets.models import RulesetInfo

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_cfg() -> StoreConfig:
    try:
        return load_config()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc


def _ask(message: str) -> str:
    """Print message and read one line. End of input reads as blank."""
    click.echo(message)
    try:
        return click.prompt("", default="", show_default=False, prompt_suffix="> ")
    except click.Abort:
        click.echo()
        return ""


def _print_rulesets(rulesets: list[RulesetInfo]) -> None:
    console = Console(highlight=False)
    for i, ruleset in enumerate(rulesets):
        console.print(
            Text.assemble(
                (f"[{i}] ", "bold"),
                (f"{ruleset.short_name:<12}", "cyan"),
                f" | {ruleset.name} | OnlineID={ruleset.online_id}",
            ),
            soft_wrap=True,
        )
        if ruleset.instantiation_info.strip():
            console.print(Text(f"      Instantiation: {ruleset.instantiation_info}", style="dim"), soft_wrap=True)


def _report_not_found(exc: StoreNotFoundError) -> None:
    click.echo("Could not locate osu! realm database. Checked the following locations:", err=True)
    for candidate in exc.checked:
        click.echo(f"  - {candidate}", err=True)
    click.echo(
        "Pass the path to the database (or its directory) as the first argument if it lives elsewhere.",
        err=True,
    )


# ---------------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------------


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("path", required=False)
@click.option("-v", "--verbose", is_flag=True, help="Log path lookup and store activity to stderr.")
@click.version_option(package_name="cleanup-rulesets")
def cli(path: str | None, verbose: bool) -> None:
    """Delete custom rulesets from the osu! client.realm database.

    \b
    PATH may be the database file or the directory holding it. Without it,
    OSU_LAZER_PATH, then OSU_DATA_PATH, then the default osu! data folder
    (honouring FullPath in its storage.ini) are tried.

    \b
    Every ruleset outside the official range (online ids 0-3) is listed.
    Enter the indices to delete, 'all' to remove every listed ruleset, or
    nothing to keep them all. Deletion happens only after typing 'yes'.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(message)s")

    cfg = _load_cfg()

    try:
        store_path = resolve_store_path(path, cfg)
    except StoreNotFoundError as exc:
        _report_not_found(exc)
        raise SystemExit(1) from exc

    try:
        with store_session(store_path, cfg) as conn:
            _run(conn, store_path, cfg)
    except (StoreOpenError, StoreReadError) as exc:
        raise click.ClickException(str(exc)) from exc


def _run(conn: sqlite3.Connection, store_path: Path, cfg: StoreConfig) -> None:
    rulesets = load_rulesets(conn, cfg.official_ids)
    if not rulesets:
        click.echo("No rulesets found in the database.")
        return

    click.echo(f"Loaded {len(rulesets)} ruleset(s) from '{store_path}'.")
    click.echo()
    _print_rulesets(rulesets)
    click.echo()

    answer = _ask(
        "Enter the indices (space/comma separated) of rulesets to delete, "
        "'all' to delete every one, or press Enter to keep all:"
    )
    try:
        selection = parse_selection(answer, len(rulesets))
    except SelectionParseError as exc:
        click.echo(f"Could not parse selection ({exc}). No changes were made.", err=True)
        raise SystemExit(1) from exc

    if selection.kind is SelectionKind.KEEP_ALL:
        click.echo("No rulesets selected. Exiting.")
        return

    if selection.kind is SelectionKind.ALL:
        if not is_confirmed(_ask("You are about to delete ALL rulesets. Type 'yes' to confirm.")):
            click.echo("Deletion cancelled.")
            return
    elif not selection:
        click.echo("No valid indices provided. Exiting.")
        return

    chosen = selection.sorted()
    click.echo(f"You selected {len(chosen)} ruleset(s) for deletion: {', '.join(map(str, chosen))}.")
    if not is_confirmed(_ask("Type 'yes' to confirm deletion, or anything else to cancel:")):
        click.echo("Deletion cancelled.")
        return

    try:
        removed = delete_rulesets(conn, [rulesets[i] for i in chosen])
    except StoreWriteError as exc:
        raise click.ClickException(f"{exc}. No changes were made.") from exc
    click.echo(f"Deleted {removed} ruleset(s).")


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    cli(standalone_mode=True)


if __name__ == "__main__":
    main()
