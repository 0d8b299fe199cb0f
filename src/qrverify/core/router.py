"""Classification routing. Pure decision logic, no file operations."""

from __future__ import annotations

from enum import Enum

from qrverify.models.config import Mode
from qrverify.models.verification import Destination, FileResult, FileStatus, VerificationOutcome


class Action(str, Enum):
    NONE = "none"
    MOVE = "move"
    COPY = "copy"


def action_for(mode: Mode) -> Action:
    if mode == Mode.NONE:
        return Action.NONE
    if mode == Mode.COPY:
        return Action.COPY
    return Action.MOVE


def route(outcome: VerificationOutcome | FileResult, mode: Mode) -> Destination:
    """Pick a bucket for a verified file. Read errors always stay in place."""
    if isinstance(outcome, FileResult):
        if outcome.status == FileStatus.READ_ERROR:
            return Destination.KEEP
        scannable = outcome.status == FileStatus.SCANNABLE
    else:
        scannable = outcome.scannable

    if mode == Mode.NONE:
        return Destination.KEEP
    if mode == Mode.MOVE_VALID and not scannable:
        return Destination.KEEP
    if mode == Mode.MOVE_INVALID and scannable:
        return Destination.KEEP
    return Destination.VALID if scannable else Destination.INVALID


def classify(result: FileResult, mode: Mode) -> FileResult:
    """Pending -> Classified. Sets the destination once; classified results are final."""
    if result.destination is None:
        result.destination = route(result, mode)
    return result
