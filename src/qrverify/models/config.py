"""Configuration models with sensible defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum

from qrverify.core.variants import build_candidates
from qrverify.errors import ConfigurationError
from qrverify.models.verification import PreprocessSpec


class Mode(str, Enum):
    NONE = "none"
    MOVE = "move"
    COPY = "copy"
    MOVE_VALID = "move-valid"
    MOVE_INVALID = "move-invalid"


MODE_TITLES: dict[Mode, str] = {
    Mode.MOVE: "Move images",
    Mode.COPY: "Copy images",
    Mode.NONE: "Scan only",
    Mode.MOVE_VALID: "Move scannable images only",
    Mode.MOVE_INVALID: "Move non-scannable images only",
}


@dataclass(frozen=True, slots=True)
class ToleranceProfile:
    name: str
    contrast: tuple[float, ...] = ()
    brightness: tuple[float, ...] = ()
    blur: tuple[float, ...] = ()
    title: str = ""

    def candidates(self) -> tuple[PreprocessSpec, ...]:
        return build_candidates(self.contrast, self.brightness, self.blur)

    @property
    def attempts(self) -> int:
        return len(self.candidates())

    @property
    def label(self) -> str:
        title = self.title or self.name.capitalize()
        if self.attempts == 1:
            return title
        return f"{title} (try {self.attempts} times)"


@dataclass(slots=True)
class VerifyConfig:
    source_dir: str = field(default_factory=os.getcwd)
    valid_dir: str | None = None
    invalid_dir: str | None = None
    mode: Mode = Mode.MOVE
    tolerance: str = "high"
    resize_target: int = 300
    workers: int = 5
    extensions: tuple[str, ...] = (".png", ".jpg", ".jpeg", ".webp")
    recursive: bool = False
    seed: int | None = None
    profiles_path: str | None = None

    def __post_init__(self) -> None:
        if self.valid_dir is None:
            self.valid_dir = os.path.join(self.source_dir, "scannable")
        if self.invalid_dir is None:
            self.invalid_dir = os.path.join(self.source_dir, "non-scannable")

    def validate(self) -> ToleranceProfile:
        """Reject settings that would make the batch meaningless.

        Returns the resolved tolerance profile. Never touches image files.
        """
        if isinstance(self.resize_target, bool) or not isinstance(self.resize_target, int):
            raise ConfigurationError(
                f"resize target must be an integer, got {self.resize_target!r}"
            )
        if self.resize_target <= 0:
            raise ConfigurationError(f"resize target must be positive, got {self.resize_target}")
        if isinstance(self.workers, bool) or not isinstance(self.workers, int):
            raise ConfigurationError(f"workers must be an integer, got {self.workers!r}")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be at least 1, got {self.workers}")
        try:
            self.mode = Mode(self.mode)
        except ValueError:
            choices = ", ".join(m.value for m in Mode)
            raise ConfigurationError(
                f"unknown mode {self.mode!r} (choose from {choices})"
            ) from None
        if not self.extensions:
            raise ConfigurationError("at least one image extension is required")

        from qrverify.core.profiles import resolve_profile

        return resolve_profile(self.tolerance, self.profiles_path)
