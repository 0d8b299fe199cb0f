"""Interactive wizard — questionary prompts for qrverify (no args)."""

from __future__ import annotations

from pathlib import Path

import questionary
from rich.console import Console

from qrverify.cli.panel import decision_panel
from qrverify.core.profiles import BUILTIN_PROFILES
from qrverify.errors import ConfigurationError
from qrverify.io.image_reader import discover_images
from qrverify.models.config import MODE_TITLES, Mode, VerifyConfig

console = Console()


def _mode_choices() -> list[questionary.Choice]:
    return [questionary.Choice(title, value=mode.value) for mode, title in MODE_TITLES.items()]


def _tolerance_choices() -> list[questionary.Choice]:
    return [
        questionary.Choice(profile.label, value=name) for name, profile in BUILTIN_PROFILES.items()
    ]


def _banner() -> None:
    from qrverify import __version__

    console.print(f"\n[bold reverse green] QR Code Verifier [/] [dim]v{__version__}[/dim]\n")


def run_interactive() -> None:
    """Ask for directory, mode and tolerance, confirm, then run."""
    _banner()

    # 1. Directory
    directory = questionary.path("Where are your QR code images?", default=".").ask()
    if directory is None:
        return  # user cancelled

    dir_path = Path(directory).expanduser().resolve()
    if not dir_path.is_dir():
        console.print(f"[red]Error: {directory} is not a valid directory[/red]")
        return

    config = VerifyConfig(source_dir=str(dir_path))
    images = discover_images(str(dir_path), config.extensions)
    if not images:
        console.print("[yellow]No images found in this directory[/yellow]\n")
        return
    console.print(f"[bold blue]{len(images):,}[/bold blue] images found\n")

    # 2. Mode
    mode = questionary.select(
        "Select the mode of file operation", choices=_mode_choices()
    ).ask()
    if mode is None:
        return

    # 3. Tolerance
    tolerance = questionary.select(
        "Select scanner tolerance (chance to get scanned)", choices=_tolerance_choices()
    ).ask()
    if tolerance is None:
        return

    config.mode = Mode(mode)
    config.tolerance = tolerance
    try:
        config.validate()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return

    # 4. Confirm
    console.print()
    console.print(decision_panel(config))
    console.print()
    confirm = questionary.confirm("Start?", default=True).ask()
    if not confirm:
        return

    from qrverify.pipeline.runner import run_verification

    console.print()
    run_verification(config, paths=images)
