"""CLI entry point for agentsurface-sdk.

Invoked as::

    agentsurface [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m agentsurface.cli.main
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from agentsurface.surface import ConfigSurface

console = Console()
error_console = Console(stderr=True, style="bold red")


def _load_surface(schema: str, settings_path: str | None) -> ConfigSurface:
    from agentsurface.config.loader import SettingsLoader
    from agentsurface.schema.errors import ConfigurationError
    from agentsurface.surface import ConfigSurface

    loader = SettingsLoader()
    try:
        settings = loader.load_yaml(settings_path) if settings_path else loader.load_auto()
        return ConfigSurface.from_file(schema, settings)
    except ConfigurationError as exc:
        error_console.print(f"Could not load schema: {exc}")
        raise SystemExit(1) from exc


def _parse_value(raw: str) -> object:
    """Interpret a command-line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


settings_option = click.option(
    "--settings",
    "-s",
    "settings_path",
    default=None,
    help="Path to an agentsurface settings file.",
)

format_option = click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    show_default=True,
    help="Output format.",
)


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="agentsurface-sdk")
def cli() -> None:
    """Describe, validate and merge the configurable surface of an agent"""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from agentsurface import __version__

    console.print(f"[bold]agentsurface-sdk[/bold] v{__version__}")
    console.print(f"Python {sys.version}")


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


@cli.command(name="init")
@click.option(
    "--directory",
    "-d",
    default=".",
    show_default=True,
    help="Directory in which to create the settings file.",
)
def init_command(directory: str) -> None:
    """Initialise an agentsurface settings file in DIRECTORY."""
    target_dir = Path(directory).resolve()
    settings_path = target_dir / "agentsurface.yaml"

    if settings_path.exists():
        console.print(
            f"[yellow]Settings already exist at {settings_path}. Skipping.[/yellow]"
        )
        return

    default_yaml = """\
# agentsurface engine settings
max_predicate_length: 2000
max_predicate_nodes: 256
max_predicate_int_bits: 4096
predicate_cache_size: 1024
validate_category_values: true
skip_validator_for_unchanged: true
"""
    try:
        target_dir.mkdir(parents=True, exist_ok=True)
        settings_path.write_text(default_yaml, encoding="utf-8")
        console.print(f"[green]Created agentsurface settings at {settings_path}[/green]")
    except OSError as exc:
        error_console.print(f"Failed to create settings: {exc}")
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# describe
# ---------------------------------------------------------------------------


@cli.command(name="describe")
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@settings_option
@format_option
def describe_command(schema: str, settings_path: str | None, output_format: str) -> None:
    """Render the field descriptors of SCHEMA."""
    from agentsurface.schema.errors import AuthoringError

    surface = _load_surface(schema, settings_path)
    try:
        descriptors = surface.describe()
    except AuthoringError as exc:
        error_console.print(f"Invalid configuration schema: {exc}")
        raise SystemExit(1) from exc

    if output_format == "json":
        console.print_json(json.dumps(descriptors.to_dict(), default=str))
        return

    table = Table(title="Configurable fields", header_style="bold cyan")
    table.add_column("Name")
    table.add_column("Label")
    table.add_column("Category")
    table.add_column("UI type")
    table.add_column("Default")
    table.add_column("Validator", style="dim")

    for descriptor in descriptors:
        ui_type = descriptor.ui_type.value
        if descriptor.degraded:
            ui_type = f"[yellow]{ui_type} (degraded)[/yellow]"
        table.add_row(
            descriptor.name,
            descriptor.label,
            descriptor.category.value,
            ui_type,
            json.dumps(descriptor.effective_default, default=str),
            descriptor.validator.predicate_source if descriptor.validator else "",
        )
    console.print(table)


# ---------------------------------------------------------------------------
# check
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@settings_option
@format_option
def check_command(schema: str, settings_path: str | None, output_format: str) -> None:
    """Report authoring defects in SCHEMA; exit 1 when it cannot be deployed."""
    from agentsurface.report import SurfaceStatus

    report = _load_surface(schema, settings_path).check()

    if output_format == "json":
        console.print_json(json.dumps(report.to_dict(), default=str))
    else:
        status_colour = {
            SurfaceStatus.VALID: "green",
            SurfaceStatus.DEGRADED: "yellow",
            SurfaceStatus.INVALID: "red",
        }
        colour = status_colour.get(report.status, "white")
        console.print(
            f"Overall status: [{colour}]{report.status.value.upper()}[/{colour}]"
        )
        if report.defects:
            table = Table(header_style="bold cyan")
            table.add_column("Field")
            table.add_column("Error")
            table.add_column("Message")
            for defect in report.defects:
                table.add_row(defect.field_name, type(defect).__name__, str(defect))
            console.print(table)

    if report.blocks_deployment():
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@click.argument("field_name")
@click.argument("value")
@settings_option
def validate_command(schema: str, field_name: str, value: str, settings_path: str | None) -> None:
    """Validate VALUE (JSON, or a plain string) for FIELD_NAME of SCHEMA."""
    result = _load_surface(schema, settings_path).validate(field_name, _parse_value(value))
    if result.passed:
        console.print(f"[green]{field_name}: ok[/green]")
        return
    error_console.print(f"{field_name}: {result.message}")
    raise SystemExit(1)


# ---------------------------------------------------------------------------
# merge
# ---------------------------------------------------------------------------


@cli.command(name="merge")
@click.argument("schema", type=click.Path(exists=True, dir_okay=False))
@click.argument("submission", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--previous",
    "-p",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Previous runtime configuration (JSON or YAML); omit for creation.",
)
@settings_option
def merge_command(
    schema: str,
    submission: str,
    previous: str | None,
    settings_path: str | None,
) -> None:
    """Merge the SUBMISSION file into the configuration of SCHEMA."""
    from agentsurface.config.loader import load_document
    from agentsurface.schema.errors import AuthoringError, ConfigurationError

    surface = _load_surface(schema, settings_path)
    try:
        submitted = load_document(submission)
        previous_config = load_document(previous) if previous else None
    except ConfigurationError as exc:
        error_console.print(f"Could not load submission: {exc}")
        raise SystemExit(1) from exc

    if not isinstance(submitted, dict) or (
        previous_config is not None and not isinstance(previous_config, dict)
    ):
        error_console.print("Submission and previous configuration must be mappings.")
        raise SystemExit(1)

    try:
        result = surface.merge(submitted, previous_config)
    except AuthoringError as exc:
        error_console.print(f"Invalid configuration schema: {exc}")
        raise SystemExit(1) from exc

    console.print_json(json.dumps(result.config.to_dict(), default=str))

    if result.rejections:
        table = Table(title="Rejected fields", header_style="bold red")
        table.add_column("Field")
        table.add_column("Error")
        table.add_column("Message")
        for error in result.rejections:
            table.add_row(error.field_name, type(error).__name__, str(error))
        error_console.print(table)
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
