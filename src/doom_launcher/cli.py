"""CLI interface for the Doom launcher."""

import logging
from pathlib import Path
from random import Random
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from doom_launcher import __version__
from doom_launcher.catalog import (
    CatalogKind,
    ConfigNotFoundError,
    ConfigParseError,
    InvariantViolation,
    LauncherConfig,
    catalog_for,
    create_default_settings,
    load_launcher_config,
)
from doom_launcher.config import Settings, get_settings
from doom_launcher.constants import (
    EXIT_CONFIG_NOT_FOUND,
    EXIT_CONFIG_PARSE_FAILURE,
    EXIT_LAUNCH_FAILED,
)
from doom_launcher.core.history import HistoryLog
from doom_launcher.core.launcher import (
    GameLauncher,
    build_launch_arguments,
    format_command_line,
    resolve_executable,
)
from doom_launcher.core.session import Session, SessionView
from doom_launcher.core.state_machine import SelectionStateMachine, SessionAborted
from doom_launcher.data.batch_parser import (
    DEFAULT_MOD_RANGE,
    DEFAULT_PATH_PREFIX,
    BatchParseError,
    TitleRange,
    parse_batch_script,
    write_entries,
)
from doom_launcher.display import ConsoleDisplay, ConsoleInput

app = typer.Typer(
    name="doom-launcher",
    help="Pick a mod, level and mutators, then launch a Doom source port",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"doom-launcher version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, is_eager=True),
    ] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
):
    """Doom Launcher - menu-driven mod/level/mutator picker."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


# --- Shared helpers ---


def _load_config(settings_path: Path) -> LauncherConfig:
    """Load settings or exit with the status for the failure kind."""
    try:
        return load_launcher_config(settings_path)
    except ConfigNotFoundError:
        create_default_settings(settings_path)
        console.print(
            "[red]Failed to load configuration settings.[/]\n"
            f"A default empty settings file was created at {escape(str(settings_path))}."
        )
        raise typer.Exit(EXIT_CONFIG_NOT_FOUND)
    except ConfigParseError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(EXIT_CONFIG_PARSE_FAILURE)


def _settings_with(settings_path: Optional[Path]) -> Settings:
    settings = get_settings()
    if settings_path:
        return settings.model_copy(update={"settings_path": settings_path})
    return settings


def _parse_range(value: str) -> tuple[int, int]:
    try:
        start, end = value.split(":")
        return int(start), int(end)
    except ValueError:
        raise typer.BadParameter(f"Expected START:END, got {value!r}")


def _parse_title_range(value: str) -> TitleRange:
    parts = value.split(":", 2)
    if len(parts) != 3:
        raise typer.BadParameter(f"Expected START:END:Category, got {value!r}")
    start, end = _parse_range(f"{parts[0]}:{parts[1]}")
    return TitleRange(start, end, parts[2])


# --- Commands ---


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    ctx: typer.Context,
    settings_path: Annotated[Optional[Path], typer.Option("--settings", "-s", help="Settings file")] = None,
    executable: Annotated[Optional[str], typer.Option("--exec", "-e", help="Executable code")] = None,
    history: Annotated[bool, typer.Option("--history/--no-history", help="Append to the history log")] = True,
    seed: Annotated[Optional[int], typer.Option("--seed", help="Seed for random picks")] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the command instead of launching")] = False,
):
    """Pick entries from the menus and launch the game.

    Arguments after the options are passed through to the source port.

    Examples:
        doom-launcher run
        doom-launcher run --exec GZ -- -skill 4 -warp 1
    """
    settings = _settings_with(settings_path)
    config = _load_config(settings.settings_path)

    exe_code = executable or settings.executable
    exe = config.find_executable(exe_code)
    if exe is None:
        console.print(f"[red]Executable not configured: {escape(exe_code or '(first)')}[/]")
        raise typer.Exit(EXIT_LAUNCH_FAILED)

    session = Session(executable=exe)
    machine = SelectionStateMachine(
        config,
        session,
        ConsoleInput(console),
        ConsoleDisplay(console),
        mutator_token=settings.mutator_token,
        random_token=settings.random_token,
        rng=Random(seed),
    )

    try:
        machine.run()
        arguments = build_launch_arguments(config, session, ctx.args)
    except SessionAborted as e:
        console.print(f"\n[yellow]{escape(str(e))}[/]")
        raise typer.Exit(EXIT_LAUNCH_FAILED)
    except InvariantViolation as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/]")
        raise typer.Exit(EXIT_LAUNCH_FAILED)

    console.print(f"[dim]{escape(exe.path)} {escape(format_command_line(arguments))}[/]")
    if dry_run:
        return

    result = GameLauncher(exe).launch(arguments)
    if not result.success:
        console.print(f"[red]{escape(result.message)}[/]")
        raise typer.Exit(EXIT_LAUNCH_FAILED)
    console.print(f"[green]{escape(result.message)}[/]")

    if history and settings.history_enabled:
        HistoryLog(settings.history_path).append(SessionView(config, session).summary_codes())


@app.command()
def init(
    settings_path: Annotated[Optional[Path], typer.Option("--settings", "-s", help="Settings file")] = None,
    force: Annotated[bool, typer.Option("--force", "-f", help="Overwrite an existing file")] = False,
):
    """Create a skeleton settings file."""
    settings = _settings_with(settings_path)
    path = settings.settings_path
    if path.exists() and not force:
        console.print(f"[yellow]{escape(str(path))} already exists (use --force to overwrite)[/]")
        raise typer.Exit(1)
    create_default_settings(path)
    console.print(f"[green]Wrote default settings:[/] {escape(str(path))}")


@app.command("list")
def list_entries(
    kind: Annotated[CatalogKind, typer.Argument(help="Catalog to list")] = CatalogKind.MODS,
    settings_path: Annotated[Optional[Path], typer.Option("--settings", "-s", help="Settings file")] = None,
):
    """List the entries of one catalog, grouped by category."""
    settings = _settings_with(settings_path)
    config = _load_config(settings.settings_path)
    ConsoleDisplay(console, clear=False).show_listing(catalog_for(config, kind))


@app.command()
def info(
    settings_path: Annotated[Optional[Path], typer.Option("--settings", "-s", help="Settings file")] = None,
):
    """Show configuration and status information."""
    settings = _settings_with(settings_path)

    table = Table(title="Doom Launcher Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")
    table.add_column("Status")

    path = settings.settings_path
    status = "[green]Found[/]" if path.exists() else "[red]Not found[/]"
    table.add_row("Settings file", str(path), status)

    history = str(settings.history_path) if settings.history_enabled else "Disabled"
    table.add_row("History log", history, "")
    table.add_row("Mutator token", settings.mutator_token, "")
    table.add_row("Random token", settings.random_token, "")

    if path.exists():
        try:
            config = load_launcher_config(path)
        except ConfigParseError as e:
            table.add_row("Catalogs", "", f"[red]{escape(str(e))}[/]")
        else:
            for exe in config.executables:
                exe_status = "[green]OK[/]" if resolve_executable(exe.path) else "[red]Missing[/]"
                table.add_row(f"Executable {exe.code}", exe.path, exe_status)
            for kind in CatalogKind:
                catalog = catalog_for(config, kind)
                table.add_row(
                    kind.value.capitalize(),
                    f"{len(catalog)} entries in {len(catalog.categories)} categories",
                    "",
                )

    console.print(table)


@app.command("parse-batch")
def parse_batch(
    batch_file: Annotated[Path, typer.Argument(help="Legacy doomlauncher.bat")],
    output: Annotated[Path, typer.Option("--output", "-o", help="Output JSON file")] = Path("output.json"),
    mods: Annotated[Optional[str], typer.Option("--mods", help="Mod block lines START:END")] = None,
    titles: Annotated[Optional[list[str]], typer.Option("--titles", help="Menu lines START:END:Category (repeatable)")] = None,
    path_prefix: Annotated[str, typer.Option("--path-prefix", help="Prefix marking WAD paths")] = DEFAULT_PATH_PREFIX,
):
    """Convert a legacy batch launcher into v1 catalog entries.

    Example: doom-launcher parse-batch doomlauncher.bat --titles 19:24:Vanilla
    """
    if not batch_file.exists():
        console.print(f"[red]File not found: {escape(str(batch_file))}[/]")
        raise typer.Exit(1)

    lines = batch_file.read_text(encoding="utf-8", errors="replace").splitlines()
    mod_range = _parse_range(mods) if mods else DEFAULT_MOD_RANGE
    title_ranges = [_parse_title_range(t) for t in titles] if titles else None

    try:
        entries = parse_batch_script(
            lines, mod_range=mod_range, title_ranges=title_ranges, path_prefix=path_prefix
        )
    except BatchParseError as e:
        console.print(f"[red]Error: {escape(str(e))}[/]")
        raise typer.Exit(1)

    write_entries(entries, output)
    console.print(output.read_text(encoding="utf-8"), markup=False, highlight=False)
    console.print(f"[bold green]Written to:[/] {escape(str(output))}")
