"""qrverify scan command."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from qrverify.cli.panel import decision_panel
from qrverify.errors import ConfigurationError
from qrverify.models.config import Mode, VerifyConfig

console = Console()


def scan(
    directory: str = typer.Argument(..., help="Directory containing QR code images"),
    mode: Mode = typer.Option(Mode.MOVE, "--mode", "-m", help="What to do with verified images"),
    tolerance: str = typer.Option(
        "high", "--tolerance", "-t", help="Tolerance profile (none, medium, high or custom)"
    ),
    resize: int = typer.Option(300, "--resize", help="Width in pixels images are scaled to"),
    workers: int = typer.Option(5, "--workers", "-w", help="Images verified concurrently"),
    valid_dir: Optional[str] = typer.Option(
        None, "--valid-dir", help="Destination for scannable images [default: DIR/scannable]"
    ),
    invalid_dir: Optional[str] = typer.Option(
        None,
        "--invalid-dir",
        help="Destination for non-scannable images [default: DIR/non-scannable]",
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Seed for reproducible attempt order"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include subdirectories"),
    extensions: Optional[str] = typer.Option(
        None, "--extensions", help="Comma-separated extensions"
    ),
    profiles: Optional[str] = typer.Option(
        None, "--profiles", help="YAML file with custom tolerance profiles"
    ),
    report: Optional[str] = typer.Option(None, "--report", help="Write a JSONL results report"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Start without confirmation"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every attempt."),
) -> None:
    """Verify QR code images in a directory and sort them by scannability."""
    from qrverify.cli.app import configure_logging
    from qrverify.pipeline.runner import run_verification

    if verbose:
        configure_logging(True)

    dir_path = Path(directory).expanduser()
    if not dir_path.is_dir():
        typer.echo(f"Error: {directory} is not a valid directory", err=True)
        raise typer.Exit(1)

    config = VerifyConfig(
        source_dir=str(dir_path.resolve()),
        valid_dir=valid_dir,
        invalid_dir=invalid_dir,
        mode=mode,
        tolerance=tolerance,
        resize_target=resize,
        workers=workers,
        recursive=recursive,
        seed=seed,
        profiles_path=profiles,
    )
    if extensions:
        config.extensions = tuple(f".{e.strip().lstrip('.')}" for e in extensions.split(","))

    try:
        config.validate()
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        raise typer.Exit(2)

    if not yes:
        console.print()
        console.print(decision_panel(config))
        console.print()
        if not typer.confirm("Start?", default=True):
            raise typer.Exit(1)

    run = run_verification(config, report_path=report)
    if run.stopped_early:
        raise typer.Exit(130)
