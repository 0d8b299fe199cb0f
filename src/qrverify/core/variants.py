"""Preprocess variant generation over contrast, brightness and blur axes."""

from __future__ import annotations

import math
from collections.abc import Sequence
from itertools import product

from qrverify.errors import ConfigurationError
from qrverify.models.verification import EMPTY_SPEC, PreprocessSpec


def _check_axis(name: str, values: Sequence[float]) -> tuple[float, ...]:
    checked: list[float] = []
    for v in values:
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ConfigurationError(f"{name} value {v!r} is not a number")
        if not math.isfinite(v) or v < 0:
            raise ConfigurationError(f"{name} value {v!r} must be finite and non-negative")
        checked.append(float(v))
    return tuple(checked)


def generate_variants(
    contrast: Sequence[float] = (),
    brightness: Sequence[float] = (),
    blur: Sequence[float] = (),
) -> tuple[PreprocessSpec, ...]:
    """Expand per-axis value lists into every combination.

    Contrast is the outer axis, then blur, with brightness varying fastest.
    An empty list leaves that axis out of every spec; if all lists are empty
    nothing is generated.
    """
    axes = {
        "contrast": _check_axis("contrast", contrast),
        "blur": _check_axis("blur", blur),
        "brightness": _check_axis("brightness", brightness),
    }
    swept = {name: values for name, values in axes.items() if values}
    if not swept:
        return ()

    names = list(swept)
    return tuple(
        PreprocessSpec(**dict(zip(names, combo))) for combo in product(*swept.values())
    )


def build_candidates(
    contrast: Sequence[float] = (),
    brightness: Sequence[float] = (),
    blur: Sequence[float] = (),
) -> tuple[PreprocessSpec, ...]:
    """Generated variants with the unmodified image prepended."""
    return (EMPTY_SPEC, *generate_variants(contrast, brightness, blur))
