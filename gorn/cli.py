"""Command line interface for gorn."""

from __future__ import annotations

import json
import sys
from typing import Sequence

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from . import __version__, config as config_module
from .cache import CacheStore
from .config import DEFAULT_MENU, Config, Settings, load_config, settings_from_env
from .errors import (
    LaunchError,
    MenuUnavailableError,
    SelectionCancelled,
    UnresolvedExecutableError,
)
from .log import configure_logging
from .output import format_mtime, format_status_icon, plural_suffix
from .services.session_service import (
    SessionRunner,
    clear_history,
    history_entries,
    prune_history,
    refresh_and_save,
)
from .services.system_service import (
    DetachedLauncher,
    SubprocessMenu,
    run_all_doctor_checks,
)
from .text import Messages, Styles

EXIT_CANCELLED = 1
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127
SUBCOMMANDS = frozenset({"launch", "cache", "history", "config", "doctor"})
GLOBAL_FLAGS = frozenset({"--help", "--version"})

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help=Messages.APP_HELP,
    context_settings={"help_option_names": ["--help"]},
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"gorn v{__version__}")
        raise typer.Exit()


def _styled(text: str, style: str) -> str:
    return f"[{style}]{text}[/{style}]"


def _load_config_or_default() -> Config:
    try:
        return load_config()
    except (json.JSONDecodeError, OSError, UnicodeDecodeError, ValueError) as exc:
        err_console.print(
            _styled(
                Messages.ERROR_CONFIG_INVALID.format(
                    path=config_module.config_file_path(), reason=str(exc)
                ),
                Styles.WARNING,
            )
        )
        return Config()


def _load_settings() -> Settings:
    return settings_from_env(config=_load_config_or_default())


def _store_for(settings: Settings) -> CacheStore:
    return CacheStore(settings.cache_file, history_limit=settings.history_limit)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    )
) -> None:
    """Global Typer callback for shared options."""
    return None


@app.command(
    help=Messages.HELP_LAUNCH,
    context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
)
def launch(ctx: typer.Context) -> None:
    """Prompt with PATH executables and start the selection."""
    configure_logging()
    settings = _load_settings()
    runner = SessionRunner(
        settings,
        SubprocessMenu(settings.menu_command, list(ctx.args)),
        DetachedLauncher(),
        store=_store_for(settings),
    )
    try:
        runner.run()
    except SelectionCancelled:
        raise typer.Exit(code=EXIT_CANCELLED)
    except UnresolvedExecutableError as exc:
        err_console.print(_styled(Messages.ERROR_UNRESOLVED.format(name=exc.name), Styles.ERROR))
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except MenuUnavailableError as exc:
        err_console.print(
            _styled(
                Messages.ERROR_MENU_UNAVAILABLE.format(command=exc.command, reason=exc.reason),
                Styles.ERROR,
            )
        )
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except LaunchError as exc:
        err_console.print(
            _styled(
                Messages.ERROR_LAUNCH_FAILED.format(path=exc.path, reason=exc.reason),
                Styles.ERROR,
            )
        )
        raise typer.Exit(code=EXIT_NOT_EXECUTABLE)


@app.command(help=Messages.HELP_CACHE)
def cache(
    show: bool = typer.Option(False, "--show", help=Messages.HELP_CACHE_SHOW),
    clear: bool = typer.Option(False, "--clear", help=Messages.HELP_CACHE_CLEAR),
    refresh: bool = typer.Option(False, "--refresh", help=Messages.HELP_CACHE_REFRESH),
) -> None:
    """Manage the cached PATH index."""
    configure_logging()
    settings = _load_settings()
    store = _store_for(settings)

    if clear:
        if store.clear():
            console.print(_styled(Messages.INFO_CACHE_CLEARED.format(path=store.path), Styles.SUCCESS))
        else:
            console.print(_styled(Messages.INFO_CACHE_CLEAR_NONE.format(path=store.path), Styles.WARNING))
        if not (refresh or show):
            return

    if refresh:
        rescanned = refresh_and_save(settings, store)
        console.print(
            _styled(
                Messages.INFO_CACHE_REFRESHED.format(
                    count=len(rescanned), plural=plural_suffix(len(rescanned))
                ),
                Styles.SUCCESS,
            )
        )
        if not show:
            return

    _render_cache(settings, store)


@app.command(help=Messages.HELP_HISTORY)
def history(
    clear: bool = typer.Option(False, "--clear", help=Messages.HELP_HISTORY_CLEAR),
    prune: bool = typer.Option(False, "--prune", help=Messages.HELP_HISTORY_PRUNE),
    limit: int = typer.Option(0, "--limit", "-n", min=0, help=Messages.HELP_HISTORY_LIMIT),
) -> None:
    """List or edit the launch history."""
    configure_logging()
    settings = _load_settings()
    store = _store_for(settings)

    if clear:
        count = clear_history(settings, store)
        console.print(
            _styled(
                Messages.INFO_HISTORY_CLEARED.format(count=count, plural=plural_suffix(count)),
                Styles.SUCCESS,
            )
        )
        return
    if prune:
        pruned = prune_history(settings, store)
        console.print(
            _styled(
                Messages.INFO_HISTORY_PRUNED.format(
                    count=len(pruned), plural=plural_suffix(len(pruned))
                ),
                Styles.SUCCESS,
            )
        )
        for entry in pruned:
            console.print(Text(f"  - {entry}", style=Styles.INFO))
        return

    entries = history_entries(settings, store)
    if not entries:
        console.print(_styled(Messages.INFO_HISTORY_EMPTY, Styles.INFO))
        return
    if limit:
        entries = entries[:limit]
    _render_history(entries)


@app.command(help=Messages.HELP_CONFIG)
def config(
    show: bool = typer.Option(False, "--show", help=Messages.HELP_CONFIG_SHOW),
    set_menu_option: str | None = typer.Option(
        None,
        "--set-menu",
        help=Messages.HELP_SET_MENU,
    ),
    reset_menu: bool = typer.Option(False, "--reset-menu", help=Messages.HELP_RESET_MENU),
) -> None:
    """Show or change gorn configuration."""
    changed = False
    if set_menu_option is not None:
        if not set_menu_option.strip():
            raise typer.BadParameter(Messages.ERROR_MENU_EMPTY)
        updated = config_module.set_menu(set_menu_option)
        console.print(_styled(Messages.INFO_MENU_SET.format(value=updated.menu), Styles.SUCCESS))
        changed = True
    elif reset_menu:
        config_module.set_menu(None)
        console.print(_styled(Messages.INFO_MENU_RESET.format(value=DEFAULT_MENU), Styles.SUCCESS))
        changed = True

    if show or not changed:
        settings = _load_settings()
        console.print(
            _styled(
                Messages.INFO_CONFIG_SUMMARY.format(
                    menu=settings.menu_command,
                    limit=settings.history_limit or "unlimited",
                    config=config_module.config_file_path(),
                    cache=settings.cache_file,
                ),
                Styles.INFO,
            )
        )


@app.command(help=Messages.HELP_DOCTOR)
def doctor() -> None:
    """Run diagnostic checks for the menu program and cache."""
    console.print(_styled(Messages.DOCTOR_TITLE.format(version=__version__), Styles.TITLE))
    console.print()

    settings = _load_settings()
    results = run_all_doctor_checks(settings)

    has_failure = False
    for result in results:
        icon = format_status_icon(result.passed, console=console)
        if not result.passed:
            has_failure = True

        console.print(f"  {icon} [bold]{result.name}:[/bold] {result.message}")
        if result.detail:
            console.print(f"      [dim]{result.detail}[/dim]")

    console.print()
    if has_failure:
        console.print(_styled(Messages.DOCTOR_SOME_FAILED, Styles.WARNING))
        raise typer.Exit(code=1)
    console.print(_styled(Messages.DOCTOR_ALL_PASSED, Styles.SUCCESS))


def _render_cache(settings: Settings, store: CacheStore) -> None:
    state = store.load()
    console.print(_styled(Messages.INFO_CACHE_PATH.format(path=store.path), Styles.INFO))
    if not len(state.paths):
        console.print(_styled(Messages.INFO_CACHE_EMPTY, Styles.INFO))
        return
    on_path = set(settings.search_paths)
    table = Table(
        title=Messages.TABLE_TITLE,
        show_header=True,
        header_style=Styles.TABLE_HEADER,
    )
    table.add_column(Messages.TABLE_HEADER_DIRECTORY, overflow="fold")
    table.add_column(Messages.TABLE_HEADER_EXECUTABLES, justify="right")
    table.add_column(Messages.TABLE_HEADER_MTIME)
    table.add_column(Messages.TABLE_HEADER_ON_PATH, justify="center")
    for directory, index in state.paths.items():
        table.add_row(
            Text(directory),
            str(len(index.executables)),
            format_mtime(index.mtime),
            "yes" if directory in on_path else "no",
        )
    console.print(table)


def _render_history(entries: Sequence[str]) -> None:
    table = Table(
        title=Messages.TABLE_HISTORY_TITLE,
        show_header=True,
        header_style=Styles.TABLE_HEADER,
    )
    table.add_column(Messages.TABLE_HEADER_INDEX, justify="right")
    table.add_column(Messages.TABLE_HEADER_COMMAND, overflow="fold")
    for idx, entry in enumerate(entries, start=1):
        table.add_row(str(idx), Text(entry))
    console.print(table)


def route_args(args: Sequence[str]) -> list[str]:
    """Send everything to `launch` unless it names a gorn command or flag."""

    values = list(args)
    if values and values[0] in SUBCOMMANDS:
        return values
    if len(values) == 1 and values[0] in GLOBAL_FLAGS:
        return values
    return ["launch", "--", *values]


def run(argv: list[str] | None = None) -> None:
    """Entry point wrapper allowing optional argument override."""
    args = list(argv) if argv is not None else sys.argv[1:]
    app(args=route_args(args), prog_name="gorn")
