"""Verification attempt sequencer — shuffled sweep with early exit."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from typing import Any, Optional

from qrverify.core.decoder import decode_qr
from qrverify.core.transform import apply_preprocess
from qrverify.errors import CandidateAttemptError
from qrverify.models.verification import (
    AttemptError,
    AttemptResult,
    NoMatch,
    PreprocessSpec,
    Success,
    VerificationOutcome,
    VerificationRequest,
)

logger = logging.getLogger(__name__)

TransformFn = Callable[[bytes, int, PreprocessSpec], Any]
DecodeFn = Callable[[Any], Optional[str]]


def attempt(
    source: bytes,
    resize_target: int,
    spec: PreprocessSpec,
    transform: TransformFn = apply_preprocess,
    decode: DecodeFn = decode_qr,
) -> AttemptResult:
    """Run one transform + decode. Never raises."""
    try:
        image = transform(source, resize_target, spec)
    except Exception as e:
        return AttemptError(CandidateAttemptError("transform", e))
    try:
        text = decode(image)
    except Exception as e:
        return AttemptError(CandidateAttemptError("decode", e))
    if text:
        return Success(text)
    return NoMatch()


def shuffled(
    candidates: tuple[PreprocessSpec, ...], rng: random.Random | None = None
) -> list[PreprocessSpec]:
    """Uniform random permutation of the candidates (Fisher-Yates via Random.shuffle)."""
    order = list(candidates)
    (rng or random.Random()).shuffle(order)
    return order


def verify(
    request: VerificationRequest,
    *,
    transform: TransformFn = apply_preprocess,
    decode: DecodeFn = decode_qr,
    rng: random.Random | None = None,
) -> VerificationOutcome:
    """Try each candidate in random order and stop at the first decode.

    Failed and erroring candidates are skipped. Returns an outcome with
    ``decoded_text=None`` only after every candidate was attempted once.
    """
    attempts = 0
    for spec in shuffled(request.candidates, rng):
        attempts += 1
        result = attempt(request.source, request.resize_target, spec, transform, decode)
        if isinstance(result, Success):
            logger.debug(
                "%s: decoded with %s after %d attempt(s)", request.path, spec.describe(), attempts
            )
            return VerificationOutcome(decoded_text=result.text, attempts=attempts, matched=spec)
        if isinstance(result, AttemptError):
            logger.debug("%s: %s skipped, %s", request.path, spec.describe(), result.cause)

    logger.debug("%s: no decode after %d attempt(s)", request.path, attempts)
    return VerificationOutcome(decoded_text=None, attempts=attempts)
