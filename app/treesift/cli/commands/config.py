"""Settings commands.

Shows the effective search settings, writes a default settings file,
and prints where that file lives.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from treesift.cli.display import OutputFormat
from treesift.core.paths import ensure_config_dir, get_settings_path
from treesift.core.settings import SearchSettings, SettingsError, load_settings, save_settings
from treesift.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize search settings.",
    no_args_is_help=True,
)


@app.command()
def show(
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Show the effective search settings."""
    try:
        settings = load_settings()
    except SettingsError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps(settings.model_dump()))
        return

    _print_table(settings)
    path = get_settings_path()
    source = str(path) if path.exists() else f"defaults ({path} not found)"
    console.print(f"\n[dim]Source: {source}[/dim]")


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing settings file."),
    ] = False,
) -> None:
    """Write a settings file with the default values."""
    path = get_settings_path()
    if path.exists() and not force:
        print_info(f"Settings file already exists: {path}")
        print_info("Use --force to overwrite.")
        return

    try:
        ensure_config_dir()
        saved = save_settings(SearchSettings(), path)
    except (RuntimeError, SettingsError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Settings written to {saved}")


@app.command()
def path() -> None:
    """Print the settings file path."""
    console.print(str(get_settings_path()), highlight=False, soft_wrap=True)


def _print_table(settings: SearchSettings) -> None:
    """Display settings as a Rich table."""
    table = Table(
        title="Search Settings",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value", style="info")
    table.add_column("Description", style="muted")

    for name, field in SearchSettings.model_fields.items():
        value = getattr(settings, name)
        if isinstance(value, list):
            value = ", ".join(value) or "-"
        table.add_row(name, str(value), field.description or "")

    console.print(table)
