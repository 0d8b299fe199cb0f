"""Bounded worker pool that runs the attempt sequencer across many files."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from qrverify.core.sequencer import verify
from qrverify.errors import SourceReadError
from qrverify.models.verification import (
    FileResult,
    FileStatus,
    VerificationOutcome,
    VerificationRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = 5

RequestFactory = Callable[[str], VerificationRequest]
Verifier = Callable[[VerificationRequest], VerificationOutcome]


@dataclass(slots=True)
class BatchCounters:
    """Aggregate totals shared between workers. Each file is recorded exactly once."""

    valid: int = 0
    invalid: int = 0
    read_errors: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record(self, result: FileResult) -> None:
        with self._lock:
            if result.status == FileStatus.SCANNABLE:
                self.valid += 1
            elif result.status == FileStatus.NOT_SCANNABLE:
                self.invalid += 1
            else:
                self.read_errors += 1

    @property
    def total(self) -> int:
        return self.valid + self.invalid + self.read_errors


@dataclass(slots=True)
class BatchRun:
    results: list[FileResult]
    counters: BatchCounters
    submitted: int = 0

    @property
    def stopped_early(self) -> bool:
        return len(self.results) < self.submitted


def process_file(path: str, factory: RequestFactory, verifier: Verifier = verify) -> FileResult:
    """Build the request and run the sequencer for one file. Never raises."""
    start = time.perf_counter()
    try:
        request = factory(path)
    except SourceReadError as e:
        logger.debug("read error: %s", e)
        result = FileResult.read_error(path, e.reason)
    except Exception as e:
        logger.warning("unexpected failure preparing %s: %r", path, e)
        result = FileResult.read_error(path, repr(e))
    else:
        result = FileResult.from_outcome(path, verifier(request))
    result.elapsed_ms = round((time.perf_counter() - start) * 1000, 2)
    return result


def run_batch(
    paths: Sequence[str],
    factory: RequestFactory,
    *,
    workers: int = DEFAULT_WORKERS,
    verifier: Verifier = verify,
    classify: Callable[[FileResult], None] | None = None,
    on_result: Callable[[FileResult], None] | None = None,
    should_stop: Callable[[], bool] | None = None,
    counters: BatchCounters | None = None,
) -> BatchRun:
    """Verify every path with at most ``workers`` files in flight.

    Workers pull paths from a FIFO queue in submission order and run each file
    to completion before taking the next. ``classify`` runs after verification
    and before the file is counted; ``on_result`` is called once per file, in
    completion order, serialized across workers. Results are returned in
    submission order. When ``should_stop`` turns true, workers stop pulling new
    paths; files already started still finish.
    """
    if workers < 1:
        raise ValueError(f"workers must be at least 1, got {workers}")

    counters = counters if counters is not None else BatchCounters()
    pending: queue.Queue[tuple[int, str]] = queue.Queue()
    for index, path in enumerate(paths):
        pending.put((index, path))

    slots: list[FileResult | None] = [None] * len(paths)
    publish_lock = threading.Lock()
    failures: list[BaseException] = []
    abort = threading.Event()

    def worker() -> None:
        try:
            while not abort.is_set():
                if should_stop is not None and should_stop():
                    return
                try:
                    index, path = pending.get_nowait()
                except queue.Empty:
                    return

                result = process_file(path, factory, verifier)
                if classify is not None:
                    classify(result)
                counters.record(result)
                slots[index] = result
                if on_result is not None:
                    with publish_lock:
                        on_result(result)
        except BaseException as e:
            failures.append(e)
            abort.set()

    threads = [
        threading.Thread(target=worker, name=f"qrverify-worker-{n}", daemon=True)
        for n in range(min(workers, len(paths)))
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    if failures:
        raise failures[0]

    return BatchRun(
        results=[r for r in slots if r is not None],
        counters=counters,
        submitted=len(paths),
    )
