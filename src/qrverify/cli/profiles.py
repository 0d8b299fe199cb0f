"""qrverify profiles command."""

from __future__ import annotations

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from qrverify.errors import ConfigurationError

console = Console()


def _fmt(values: tuple[float, ...]) -> str:
    return ", ".join(f"{v:g}" for v in values) if values else "-"


def profiles(
    profiles_path: Optional[str] = typer.Option(
        None, "--profiles", help="YAML file with custom tolerance profiles"
    ),
) -> None:
    """List tolerance profiles and how many attempts each makes per image."""
    from qrverify.core.profiles import BUILTIN_PROFILES, load_profiles

    try:
        available = load_profiles(profiles_path) if profiles_path else BUILTIN_PROFILES
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(2)

    table = Table(title="Tolerance profiles")
    table.add_column("Name", style="bold cyan")
    table.add_column("Contrast")
    table.add_column("Brightness")
    table.add_column("Blur")
    table.add_column("Attempts", justify="right")
    for name, profile in available.items():
        table.add_row(
            name,
            _fmt(profile.contrast),
            _fmt(profile.brightness),
            _fmt(profile.blur),
            str(profile.attempts),
        )
    console.print(table)
