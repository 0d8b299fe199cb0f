"""Error taxonomy for verification runs."""

from __future__ import annotations


class QrVerifyError(Exception):
    """Base class for qrverify errors."""


class ConfigurationError(QrVerifyError, ValueError):
    """Invalid run configuration. Raised before any file is processed."""


class SourceReadError(QrVerifyError):
    """The source image cannot be read or parsed. Fatal for that file only."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class CandidateAttemptError(QrVerifyError):
    """A transform or decode failure on a single preprocessing variant."""

    def __init__(self, stage: str, cause: BaseException) -> None:
        super().__init__(f"{stage} failed: {cause!r}")
        self.stage = stage
        self.cause = cause
