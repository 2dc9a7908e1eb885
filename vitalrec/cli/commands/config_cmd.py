"""Config command for viewing and managing vitalrec configuration."""

from dataclasses import fields

import typer

from ..app import app, console, get_json_mode
from ...config import (
    CONFIG_FILE,
    GenerationConfig,
    OutputConfig,
    VitalrecConfig,
    coerce_value,
    get_config,
    reset_config,
)
from ...core.errors import InvalidArgument
from ..utils import Output


VALID_KEYS = {f"generation.{f.name}" for f in fields(GenerationConfig)} | {
    f"output.{f.name}" for f in fields(OutputConfig)
}

# Counts that fall back to a derived default when set to "auto"
AUTO_FIELDS = {"person_count", "marriage_count", "death_count"}


@app.command("config")
def config_command(
    action: str = typer.Argument(
        ...,
        help="Action: show, set, reset",
    ),
    key: str | None = typer.Argument(
        None,
        help="Config key (e.g. generation.records_count, output.output_dir)",
    ),
    value: str | None = typer.Argument(
        None,
        help="Value to set",
    ),
):
    """View or modify vitalrec configuration.

    Examples:
        vitalrec config show
        vitalrec config set generation.records_count 3000
        vitalrec config set output.output_dir ./bench
        vitalrec config set generation.person_count auto
        vitalrec config set output.create_indexes false
        vitalrec config reset
    """
    if action == "show":
        _show_config()
    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage:[/red] vitalrec config set <key> <value>")
            console.print()
            _print_valid_keys()
            raise typer.Exit(1)
        _set_config(key, value)
    elif action == "reset":
        _reset_config()
    else:
        console.print(f"[red]Unknown action:[/red] {action}")
        console.print("Valid actions: show, set, reset")
        raise typer.Exit(1)


def _print_valid_keys():
    console.print("Available keys:")
    for k in sorted(VALID_KEYS):
        console.print(f"  {k}")


def _unset_hint(config: VitalrecConfig, field_name: str) -> str | None:
    """What an empty setting falls back to."""
    gen = config.generation
    hints = {
        "person_count": f"derived: {gen.resolve_person_count()}",
        "marriage_count": "1.2x eligible brides",
        "death_count": "all eligible persons",
        "corpora_path": "bundled",
    }
    return hints.get(field_name)


def _print_section(config: VitalrecConfig, title: str, section) -> None:
    console.print()
    console.print(f"[bold cyan]{title}[/bold cyan]")
    for f in fields(section):
        value = getattr(section, f.name)
        if value is None or value == "":
            hint = _unset_hint(config, f.name)
            value = f"[dim]({hint or 'unset'})[/dim]"
        console.print(f"  {f.name:<18} = {value}")


def _show_config():
    """Display current resolved configuration."""
    config = get_config()

    if get_json_mode():
        out = Output(console=console, json_mode=True)
        out.set_data("config", config.to_dict())
        out.set_data("config_file", str(CONFIG_FILE))
        out.finish()
        return

    console.print()
    console.print("[bold]Vitalrec Configuration[/bold]")
    console.print("─" * 40)
    _print_section(config, "Generation", config.generation)
    _print_section(config, "Output", config.output)

    console.print()
    if CONFIG_FILE.exists():
        console.print(f"Config file: {CONFIG_FILE}")
    else:
        console.print(f"Config file: [dim]not created yet[/dim] ({CONFIG_FILE})")
    console.print()


def _set_config(key: str, value: str):
    """Set a config value and save."""
    if key not in VALID_KEYS:
        console.print(f"[red]Unknown key:[/red] {key}")
        console.print()
        _print_valid_keys()
        raise typer.Exit(1)

    config = get_config()
    zone, field_name = key.split(".", 1)
    target = config.generation if zone == "generation" else config.output

    if field_name in AUTO_FIELDS and value.lower() == "auto":
        setattr(target, field_name, None)
    else:
        try:
            setattr(target, field_name, coerce_value(field_name, value))
        except ValueError:
            console.print(f"[red]Invalid integer value:[/red] {value}")
            raise typer.Exit(1)

    try:
        config.generation.validate()
    except InvalidArgument as e:
        console.print(f"[red]Invalid value:[/red] {e}")
        reset_config()
        raise typer.Exit(1)

    config.save()
    reset_config()  # Clear cached singleton so next get_config() reloads

    console.print(f"[green]✓[/green] Set {key} = {value}")
    console.print(f"  Saved to {CONFIG_FILE}")


def _reset_config():
    """Reset config to defaults."""
    if CONFIG_FILE.exists():
        CONFIG_FILE.unlink()
        reset_config()
        console.print("[green]✓[/green] Config reset to defaults")
        console.print(f"  Removed {CONFIG_FILE}")
    else:
        console.print("Config already at defaults (no config file exists)")
