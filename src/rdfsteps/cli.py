# src/rdfsteps/cli.py
"""rdfsteps command line.

Commands:
    check SETTINGS   load a settings file and build every step it declares
    plugins          list the registered step plugins
"""

from __future__ import annotations

import functools
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import typer
import yaml
from dynaconf.vendor.ruamel.yaml.parser import ParserError as YamlParserError
from dynaconf.vendor.ruamel.yaml.scanner import ScannerError as YamlScannerError
from pydantic import ValidationError

from rdfsteps import __version__
from rdfsteps.contracts.errors import StepError
from rdfsteps.core.config import load_settings

if TYPE_CHECKING:
    from rdfsteps.core.config import RdfstepsSettings
    from rdfsteps.plugins.manager import PluginManager

__all__ = [
    "app",
]

app = typer.Typer(
    name="rdfsteps",
    help="Group rows by key and merge the RDF graphs they carry.",
    no_args_is_help=True,
)


@functools.cache
def _manager() -> PluginManager:
    """Plugin manager with the built-in steps registered, built on first use."""
    from rdfsteps.plugins.manager import PluginManager

    manager = PluginManager()
    manager.register_builtin_plugins()
    return manager


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"rdfsteps version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=_show_version,
        is_eager=True,
        help="Print the rdfsteps version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log at DEBUG instead of INFO.",
    ),
    json_logs: bool = typer.Option(
        False,
        "--json-logs",
        help="Write log records to stderr as JSON lines.",
    ),
) -> None:
    """Group rows by key and merge the RDF graphs they carry."""
    from rdfsteps.core.logging import configure_logging

    ctx.obj = {"verbose": verbose, "json_logs": json_logs}
    configure_logging(json_output=json_logs, level="DEBUG" if verbose else "INFO")


def _apply_logging_settings(ctx: typer.Context, config: RdfstepsSettings) -> None:
    """Reconfigure logging from the settings file; command-line flags win."""
    from rdfsteps.core.logging import configure_logging

    flags = ctx.obj or {}
    configure_logging(
        json_output=flags.get("json_logs", False) or config.logging.json_output,
        level="DEBUG" if flags.get("verbose", False) else config.logging.level,
    )


def _error_panel(
    title: str,
    message: str,
    *,
    details: Sequence[str] = (),
    hint: str | None = None,
) -> None:
    """Print a red error panel to stderr."""
    from rich.console import Console
    from rich.panel import Panel
    from rich.text import Text

    body = Text(message)
    if details:
        body.append("\n")
        for line in details:
            body.append(f"\n  - {line}", style="dim")
    if hint:
        body.append("\n\nHint: ", style="bold yellow")
        body.append(hint, style="yellow")

    Console(stderr=True).print(Panel(body, title=f"[bold red]{title}[/]", border_style="red", padding=(0, 1)))


def _load_or_exit(settings_path: Path) -> RdfstepsSettings:
    try:
        return load_settings(settings_path)
    except FileNotFoundError:
        _error_panel(
            "File Not Found",
            f"No settings file at {settings_path}",
            hint="Pass the path of an existing YAML settings file.",
        )
    except (YamlParserError, YamlScannerError) as e:
        problem = getattr(e, "problem", None)
        _error_panel(
            "YAML Syntax Error",
            f"{settings_path.name} is not valid YAML",
            details=[str(problem)] if problem else (),
            hint="Look for bad indentation, unclosed brackets or stray tabs.",
        )
    except ValidationError as e:
        _error_panel(
            "Settings Validation Failed",
            f"{settings_path.name} does not describe a valid pipeline",
            details=[f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()],
            hint="Every step needs a name and a plugin; step names must be unique.",
        )
    raise typer.Exit(1)


def _resolve_steps_or_exit(config: RdfstepsSettings) -> dict[str, dict[str, Any]]:
    """Build each declared step and return its resolved options, keyed by step name."""
    resolved: dict[str, dict[str, Any]] = {}
    for declared in config.steps:
        try:
            step = _manager().create_step(declared.plugin, declared.options)
        except StepError as e:
            _error_panel(
                "Step Configuration Error",
                f"Step '{declared.name}' ({declared.plugin}): {e.message}",
                hint="Run 'rdfsteps plugins' to see the available steps.",
            )
            raise typer.Exit(1) from None
        resolved[declared.name] = {"plugin": step.name, "options": step.describe()}
    return resolved


@app.command()
def check(
    ctx: typer.Context,
    settings: Path = typer.Argument(
        ...,
        help="Settings YAML file declaring the steps.",
    ),
) -> None:
    """Validate a settings file and build every step it declares."""
    config = _load_or_exit(settings.expanduser())
    _apply_logging_settings(ctx, config)
    resolved = _resolve_steps_or_exit(config)

    typer.echo("Settings valid!")
    typer.echo(f"  Steps: {len(resolved)}")
    typer.echo(f"  Logging: level={config.logging.level}, json_output={config.logging.json_output}")
    typer.echo()
    typer.echo(yaml.safe_dump(resolved, sort_keys=False).rstrip())


@dataclass(frozen=True)
class StepListing:
    """One line of `rdfsteps plugins` output."""

    name: str
    version: str
    summary: str


def _summary_line(step_cls: type) -> str:
    doc = (step_cls.__doc__ or "").strip()
    if doc:
        return doc.splitlines()[0].strip()
    return f"{getattr(step_cls, 'name', step_cls.__name__)} step"


def _list_steps() -> list[StepListing]:
    """Registered steps, sorted by plugin name."""
    listings = [
        StepListing(name=cls.name, version=cls.plugin_version, summary=_summary_line(cls))
        for cls in _manager().get_steps()
    ]
    return sorted(listings, key=lambda listing: listing.name)


@app.command()
def plugins() -> None:
    """List the registered step plugins."""
    listings = _list_steps()

    typer.echo("\nSTEPS:")
    if not listings:
        typer.echo("  (none registered)")
    for listing in listings:
        typer.echo(f"  {listing.name:20} {listing.version:8} - {listing.summary}")
    typer.echo()


if __name__ == "__main__":
    app()
