"""CLI entrypoint for foxcfg."""

import json
import logging
from enum import StrEnum
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from foxcfg.config import AutoConfig
from foxcfg.diagnostics import Diagnostics
from foxcfg.errors import PreferenceError, ScriptEvaluationError
from foxcfg.loader import ScriptLoader

EXIT_OK = 0
EXIT_OPERATIONAL_ERROR = 1
EXIT_PREF_ERROR = 2

app = typer.Typer(help="foxcfg: evaluate Firefox autoconfig scripts and read preferences.")
console = Console()
err_console = Console(stderr=True)


class PrefType(StrEnum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"


_LOCAL_OPTION = typer.Option(
    None,
    "--local",
    envvar="FOXCFG_LOCAL_CONFIG",
    help="Read the local autoconfig script from this path instead of next to the app.",
)
_FAILOVER_OPTION = typer.Option(
    None,
    "--failover",
    envvar="FOXCFG_FAILOVER",
    help="Read failover.jsc from this path instead of the Firefox profile.",
)
_APP_OPTION = typer.Option(
    None,
    "--app",
    envvar="FOXCFG_APP_PATH",
    help="Application executable whose directory holds the *.cfg file (default: parent process).",
)
_PROFILE_OPTION = typer.Option(
    None,
    "--profile",
    envvar="FOXCFG_PROFILE",
    help="Firefox profile directory holding failover.jsc (default: discovered profile).",
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log each resolution step to stderr."
    ),
) -> None:
    """Evaluate Firefox autoconfig scripts and read preferences."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


@app.command("get")
def get(
    key: str = typer.Argument(..., help="Preference key, e.g. app.update.enabled."),
    pref_type: PrefType = typer.Option(
        PrefType.STRING, "--type", "-t", help="Coerce the value to this type."
    ),
    json_output: bool = typer.Option(False, "--json", help="Emit the result as JSON."),
    local: Path | None = _LOCAL_OPTION,
    failover: Path | None = _FAILOVER_OPTION,
    app_path: Path | None = _APP_OPTION,
    profile: Path | None = _PROFILE_OPTION,
) -> None:
    """Print one preference value."""
    config = _load_config(local, failover, app_path, profile)
    try:
        if pref_type is PrefType.INTEGER:
            value: str | int | bool = config.get_integer(key)
        elif pref_type is PrefType.BOOLEAN:
            value = config.get_boolean(key)
        else:
            value = config.get_string(key)
    except PreferenceError as exc:
        err_console.print(f"[red]Preference error: {exc}[/red]")
        raise typer.Exit(code=EXIT_PREF_ERROR) from exc

    if json_output:
        typer.echo(json.dumps({"key": key, "type": pref_type.value, "value": value}))
    elif isinstance(value, bool):
        typer.echo("true" if value else "false")
    else:
        typer.echo(str(value))
    raise typer.Exit(code=EXIT_OK)


@app.command("dump")
def dump(
    json_output: bool = typer.Option(False, "--json", help="Emit both maps as JSON."),
    local: Path | None = _LOCAL_OPTION,
    failover: Path | None = _FAILOVER_OPTION,
    app_path: Path | None = _APP_OPTION,
    profile: Path | None = _PROFILE_OPTION,
) -> None:
    """List every preference the scripts define."""
    config = _load_config(local, failover, app_path, profile)
    snapshot = config.preferences()

    if json_output:
        typer.echo(json.dumps(snapshot.model_dump(mode="json"), indent=2, sort_keys=True))
        raise typer.Exit(code=EXIT_OK)

    entries = snapshot.resolved()
    if not entries:
        console.print("[yellow]No preferences defined.[/yellow]")
        raise typer.Exit(code=EXIT_OK)

    table = Table(title="Autoconfig Preferences")
    table.add_column("Key")
    table.add_column("Layer")
    table.add_column("Value")
    table.add_column("Overrides default")
    for entry in entries:
        table.add_row(
            entry.key,
            entry.layer,
            json.dumps(entry.value),
            "yes" if entry.shadowed_default else "no",
        )
    console.print(table)
    raise typer.Exit(code=EXIT_OK)


@app.command("locate")
def locate(
    local: Path | None = _LOCAL_OPTION,
    failover: Path | None = _FAILOVER_OPTION,
    app_path: Path | None = _APP_OPTION,
    profile: Path | None = _PROFILE_OPTION,
) -> None:
    """Show which script files would be evaluated."""
    loader = _build_loader(local, failover, app_path, profile)
    sources = [loader.load_local_source(), loader.load_remote_source()]

    table = Table(title="Autoconfig Scripts")
    table.add_column("Origin")
    table.add_column("Path")
    table.add_column("Characters", justify="right")
    for source in sources:
        table.add_row(
            source.origin,
            str(source.path) if source.path is not None else "-",
            str(len(source.text)),
        )
    console.print(table)

    if len(loader.diagnostics):
        console.print("Resolution steps:")
        for entry in loader.diagnostics:
            console.print(f"  - {entry}")
    raise typer.Exit(code=EXIT_OK)


def _build_loader(
    local: Path | None,
    failover: Path | None,
    app_path: Path | None,
    profile: Path | None,
) -> ScriptLoader:
    return ScriptLoader(
        local_path=local.expanduser() if local is not None else None,
        failover_path=failover.expanduser() if failover is not None else None,
        app_path=app_path.expanduser() if app_path is not None else None,
        profile_dir=profile.expanduser() if profile is not None else None,
        diagnostics=Diagnostics(),
    )


def _load_config(
    local: Path | None,
    failover: Path | None,
    app_path: Path | None,
    profile: Path | None,
) -> AutoConfig:
    loader = _build_loader(local, failover, app_path, profile)
    try:
        return AutoConfig(loader)
    except ScriptEvaluationError as exc:
        err_console.print(f"[red]Operational error: {exc}[/red]")
        raise typer.Exit(code=EXIT_OPERATIONAL_ERROR) from exc
