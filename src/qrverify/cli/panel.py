"""Decision panel shown before a run starts."""

from __future__ import annotations

import os

from rich import box
from rich.panel import Panel

from qrverify.models.config import Mode, VerifyConfig


def _rel(path: str, base: str) -> str:
    rel = os.path.relpath(path, base)
    if rel.startswith(".."):
        return path
    return f"./{rel}"


def describe_plan(config: VerifyConfig) -> list[str]:
    """Human-readable lines describing what happens to each kind of image."""
    valid = f"[blue]{_rel(str(config.valid_dir), config.source_dir)}[/blue]"
    invalid = f"[blue]{_rel(str(config.invalid_dir), config.source_dir)}[/blue]"
    lines = [
        "Verify scannable QR Code in the directory:",
        f"[blue]{config.source_dir}[/blue]",
        "",
    ]
    if config.mode == Mode.NONE:
        lines.append("Prints the scan result only.")
    elif config.mode == Mode.MOVE_INVALID:
        lines += [
            "If it's scannable, print the result only.",
            "If not, [bold yellow]move[/bold yellow] to:",
            invalid,
        ]
    elif config.mode == Mode.MOVE_VALID:
        lines += [
            "If it's scannable, [bold yellow]move[/bold yellow] to:",
            valid,
            "If not, print the result only.",
        ]
    else:
        color = "bold green" if config.mode == Mode.COPY else "bold yellow"
        verb = f"[{color}]{config.mode.value}[/{color}]"
        lines += [
            f"If it's scannable, {verb} to:",
            valid,
            f"If not, {verb} to:",
            invalid,
        ]
    return lines


def decision_panel(config: VerifyConfig) -> Panel:
    return Panel(
        "\n".join(describe_plan(config)),
        padding=1,
        border_style="green",
        box=box.ROUNDED,
        expand=False,
    )
