"""JSONL results report read/write with crash-tolerant parsing."""

from __future__ import annotations

import os
from pathlib import Path

import orjson

from qrverify.models.verification import REPORT_META_KEY, FileResult, ReportMeta


def create_report(path: str | Path, meta: ReportMeta) -> None:
    """Create a fresh report file with only the metadata header (truncates existing)."""
    path = Path(path)
    path.write_bytes(orjson.dumps(meta.to_dict(), option=orjson.OPT_APPEND_NEWLINE))


def append_results(path: str | Path, results: list[FileResult]) -> None:
    """Append results to the JSONL report."""
    path = Path(path)
    with open(path, "ab") as f:
        for res in results:
            f.write(orjson.dumps(res.to_dict(), option=orjson.OPT_APPEND_NEWLINE))
        f.flush()
        os.fsync(f.fileno())


def read_report(path: str | Path) -> tuple[ReportMeta | None, list[FileResult]]:
    """Read a JSONL report, skipping corrupt lines."""
    path = Path(path)
    if not path.exists():
        return None, []

    meta: ReportMeta | None = None
    results: list[FileResult] = []

    with open(path, "rb") as f:
        for line in f:
            line = line.strip()
            if not line:
                continue
            try:
                data = orjson.loads(line)
            except orjson.JSONDecodeError:
                continue

            if not isinstance(data, dict):
                continue
            if data.get(REPORT_META_KEY):
                if meta is None:
                    meta = ReportMeta.from_dict(data)
            else:
                results.append(FileResult.from_dict(data))

    return meta, results
