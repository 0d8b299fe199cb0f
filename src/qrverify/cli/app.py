"""Root Typer app with global options."""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.logging import RichHandler

app = typer.Typer(
    name="qrverify",
    help="Verify that QR code images are scannable and sort them accordingly.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def _version_callback(value: bool) -> None:
    if value:
        from qrverify import __version__

        typer.echo(f"qrverify {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Optional[bool] = typer.Option(
        None, "--version", "-V", callback=_version_callback, is_eager=True, help="Show version."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every attempt."),
) -> None:
    """qrverify — QR Code Verifier.

    Run without arguments for interactive mode, or use a subcommand.
    """
    configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        from qrverify.cli.interactive import run_interactive

        run_interactive()


# Import and register commands
from qrverify.cli.scan import scan  # noqa: E402
from qrverify.cli.profiles import profiles  # noqa: E402

app.command()(scan)
app.command()(profiles)
