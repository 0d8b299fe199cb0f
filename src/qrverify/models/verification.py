"""Data models for verification requests, attempts and per-file results."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Union

from qrverify.errors import CandidateAttemptError


def _fmt_num(value: float) -> str:
    return f"{value:g}"


@dataclass(frozen=True, slots=True)
class PreprocessSpec:
    """One preprocessing variant. ``None`` leaves that axis untouched."""

    contrast: float | None = None
    brightness: float | None = None
    blur: float | None = None

    @property
    def is_empty(self) -> bool:
        return self.contrast is None and self.brightness is None and self.blur is None

    def to_dict(self) -> dict[str, float]:
        return {k: v for k, v in asdict(self).items() if v is not None}

    def describe(self) -> str:
        if self.is_empty:
            return "original"
        return " ".join(f"{k}={_fmt_num(v)}" for k, v in self.to_dict().items())

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> PreprocessSpec:
        if not data:
            return cls()
        return cls(**{k: float(v) for k, v in data.items() if k in cls.__dataclass_fields__})


EMPTY_SPEC = PreprocessSpec()


@dataclass(frozen=True, slots=True)
class VerificationRequest:
    path: str
    source: bytes
    resize_target: int
    candidates: tuple[PreprocessSpec, ...]


@dataclass(frozen=True, slots=True)
class VerificationOutcome:
    """Terminal verdict for one request. ``decoded_text`` is None when nothing decoded."""

    decoded_text: str | None = None
    attempts: int = 0
    matched: PreprocessSpec | None = None

    @property
    def scannable(self) -> bool:
        return self.decoded_text is not None


# Per-attempt results


@dataclass(frozen=True, slots=True)
class Success:
    text: str


@dataclass(frozen=True, slots=True)
class NoMatch:
    pass


@dataclass(frozen=True, slots=True)
class AttemptError:
    cause: CandidateAttemptError


AttemptResult = Union[Success, NoMatch, AttemptError]


class FileStatus(str, Enum):
    SCANNABLE = "scannable"
    NOT_SCANNABLE = "not_scannable"
    READ_ERROR = "read_error"


class Destination(str, Enum):
    KEEP = "keep"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(slots=True)
class FileResult:
    path: str = ""
    status: FileStatus = FileStatus.NOT_SCANNABLE
    decoded_text: str | None = None
    attempts: int = 0
    matched: PreprocessSpec | None = None
    error: str | None = None
    # Set once the file is classified
    destination: Destination | None = None
    elapsed_ms: float = 0.0

    @property
    def classified(self) -> bool:
        return self.destination is not None

    @classmethod
    def from_outcome(cls, path: str, outcome: VerificationOutcome) -> FileResult:
        return cls(
            path=path,
            status=FileStatus.SCANNABLE if outcome.scannable else FileStatus.NOT_SCANNABLE,
            decoded_text=outcome.decoded_text,
            attempts=outcome.attempts,
            matched=outcome.matched,
        )

    @classmethod
    def read_error(cls, path: str, error: str) -> FileResult:
        return cls(path=path, status=FileStatus.READ_ERROR, error=error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "status": self.status.value,
            "decoded_text": self.decoded_text,
            "attempts": self.attempts,
            "matched": self.matched.to_dict() if self.matched is not None else None,
            "error": self.error,
            "destination": self.destination.value if self.destination is not None else None,
            "elapsed_ms": self.elapsed_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileResult:
        matched = data.get("matched")
        destination = data.get("destination")
        return cls(
            path=data.get("path", ""),
            status=FileStatus(data.get("status", FileStatus.NOT_SCANNABLE.value)),
            decoded_text=data.get("decoded_text"),
            attempts=int(data.get("attempts", 0)),
            matched=PreprocessSpec.from_dict(matched) if isinstance(matched, dict) else None,
            error=data.get("error"),
            destination=Destination(destination) if destination else None,
            elapsed_ms=float(data.get("elapsed_ms", 0.0)),
        )


REPORT_META_KEY = "__report_meta__"


@dataclass(slots=True)
class ReportMeta:
    source_dir: str = ""
    total_files: int = 0
    created_at: str = ""
    settings: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d[REPORT_META_KEY] = True
        return d

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReportMeta:
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
