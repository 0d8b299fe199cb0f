"""Batch verification run with Rich progress and per-file output."""

from __future__ import annotations

import logging
import os
import random
from collections.abc import Sequence
from datetime import datetime, timezone

from rich.console import Console
from rich.markup import escape
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)

from qrverify.core.decoder import decode_qr
from qrverify.core.router import classify
from qrverify.core.sequencer import DecodeFn, TransformFn, verify
from qrverify.core.transform import apply_preprocess
from qrverify.io.image_reader import discover_images, request_factory
from qrverify.io.mover import apply_destination, ensure_dirs
from qrverify.io.report_io import append_results, create_report
from qrverify.models.config import VerifyConfig
from qrverify.models.verification import (
    Destination,
    FileResult,
    FileStatus,
    ReportMeta,
    VerificationOutcome,
    VerificationRequest,
)
from qrverify.pipeline.scheduler import BatchCounters, BatchRun, Verifier, run_batch
from qrverify.pipeline.signals import ShutdownHandler

console = Console()
logger = logging.getLogger(__name__)

# Report lines buffered before each flush
_REPORT_FLUSH_EVERY = 50

NOTE = (
    "Note that non-scannable images do not mean they are impossible to scan,\n"
    "but at least it indicates they may be hard to scan."
)


def make_verifier(
    seed: int | None = None,
    transform: TransformFn = apply_preprocess,
    decode: DecodeFn = decode_qr,
) -> Verifier:
    """Bind the primitives and a per-file random source to the sequencer.

    With a seed, each file gets its own generator derived from the seed and
    its path, so attempt order is reproducible whatever the scheduling.
    """

    def run(request: VerificationRequest) -> VerificationOutcome:
        rng = random.Random(f"{seed}:{request.path}") if seed is not None else random.Random()
        return verify(request, transform=transform, decode=decode, rng=rng)

    return run


def relative_path(path: str, base: str) -> str:
    rel = os.path.relpath(path, base)
    if rel.startswith(".."):
        return path
    return rel


def format_result_line(result: FileResult, base: str) -> str:
    path = escape(relative_path(result.path, base))
    if result.status == FileStatus.SCANNABLE:
        text = escape(result.decoded_text or "")
        line = f"[bold reverse green] SCAN [/] [dim]{path} - [/][bold green]{text}[/]"
    elif result.status == FileStatus.NOT_SCANNABLE:
        line = f"[bold reverse red] FAIL [/] [dim]{path}[/]"
    else:
        reason = escape(result.error or "")
        line = f"[bold reverse yellow] ERROR [/] [dim]{path}[/] [yellow]{reason}[/]"
    if result.error and result.status != FileStatus.READ_ERROR:
        line += f" [red]({escape(result.error)})[/]"
    return line


def print_summary(counters: BatchCounters, stopped_early: bool = False) -> None:
    console.print()
    if stopped_early:
        console.print("[bold yellow]Task interrupted.[/bold yellow]")
    else:
        console.print("[bold green]Task finished.[/bold green]")
    console.print(
        f"[bold green]{counters.valid:,}[/bold green] scannable images, "
        f"[bold yellow]{counters.invalid:,}[/bold yellow] non-scannable images."
    )
    if counters.read_errors:
        console.print(f"[bold red]{counters.read_errors:,}[/bold red] images could not be read.")
    console.print(f"\n[dim]{NOTE}[/dim]\n")


def run_verification(
    config: VerifyConfig,
    paths: Sequence[str] | None = None,
    report_path: str | None = None,
    *,
    transform: TransformFn = apply_preprocess,
    decode: DecodeFn = decode_qr,
) -> BatchRun:
    """Verify, classify and sort every image of ``config.source_dir``.

    Raises ConfigurationError before touching any file when the configuration
    is invalid.
    """
    profile = config.validate()

    if paths is None:
        paths = discover_images(
            config.source_dir,
            config.extensions,
            config.recursive,
            exclude=[str(config.valid_dir), str(config.invalid_dir)],
        )
    paths = list(paths)
    if not paths:
        console.print("[yellow]No images found in this directory[/yellow]")
        return BatchRun(results=[], counters=BatchCounters(), submitted=0)

    ensure_dirs(config)

    candidates = profile.candidates()
    logger.debug("profile %s: %d candidate(s) per image", profile.name, len(candidates))
    factory = request_factory(config.resize_target, candidates)
    verifier = make_verifier(config.seed, transform, decode)

    report_buffer: list[FileResult] = []
    if report_path:
        create_report(
            report_path,
            ReportMeta(
                source_dir=os.path.abspath(config.source_dir),
                total_files=len(paths),
                created_at=datetime.now(timezone.utc).isoformat(),
                settings={
                    "mode": config.mode.value,
                    "tolerance": profile.name,
                    "attempts": len(candidates),
                    "resize_target": config.resize_target,
                    "workers": config.workers,
                    "seed": config.seed,
                },
            ),
        )

    def classify_and_sort(result: FileResult) -> None:
        classify(result, config.mode)
        if result.destination in (None, Destination.KEEP):
            return
        try:
            apply_destination(result.path, result.destination, config)
        except OSError as e:
            logger.error("could not %s %s: %s", config.mode.value, result.path, e)
            result.error = f"{config.mode.value} failed: {e}"

    progress = Progress(
        SpinnerColumn(),
        TextColumn("[bold blue]Verifying"),
        BarColumn(bar_width=40),
        MofNCompleteColumn(),
        TextColumn("•"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    )

    def stopping() -> None:
        progress.console.print("[yellow]Stopping after in-flight images finish...[/yellow]")

    with ShutdownHandler(on_first_signal=stopping) as shutdown, progress:
        task = progress.add_task("Verifying", total=len(paths))

        def on_result(result: FileResult) -> None:
            progress.console.print(format_result_line(result, config.source_dir))
            progress.advance(task)
            if report_path:
                report_buffer.append(result)
                if len(report_buffer) >= _REPORT_FLUSH_EVERY:
                    append_results(report_path, report_buffer)
                    report_buffer.clear()

        run = run_batch(
            paths,
            factory,
            workers=config.workers,
            verifier=verifier,
            classify=classify_and_sort,
            on_result=on_result,
            should_stop=shutdown.should_stop,
        )

    if report_path and report_buffer:
        append_results(report_path, report_buffer)
        report_buffer.clear()

    print_summary(run.counters, run.stopped_early)
    if report_path:
        console.print(f"  Report: {report_path}")
    return run
