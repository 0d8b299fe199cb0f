"""Filesystem side of classification: move or copy into bucket directories."""

from __future__ import annotations

import errno
import os
import shutil

from qrverify.core.router import Action, action_for
from qrverify.models.config import Mode, VerifyConfig
from qrverify.models.verification import Destination


def ensure_dirs(config: VerifyConfig) -> list[str]:
    """Create the bucket directories the mode can write to. Returns those created or kept."""
    dirs: list[str] = []
    if config.mode in (Mode.MOVE, Mode.COPY, Mode.MOVE_VALID):
        dirs.append(str(config.valid_dir))
    if config.mode in (Mode.MOVE, Mode.COPY, Mode.MOVE_INVALID):
        dirs.append(str(config.invalid_dir))
    for d in dirs:
        os.makedirs(d, exist_ok=True)
    return dirs


def destination_dir(config: VerifyConfig, destination: Destination) -> str | None:
    if destination == Destination.VALID:
        return config.valid_dir
    if destination == Destination.INVALID:
        return config.invalid_dir
    return None


def move_or_copy(path: str, target_dir: str, action: Action) -> str:
    """Move or copy ``path`` into ``target_dir`` keeping its basename. Returns the new path."""
    target = os.path.join(target_dir, os.path.basename(path))
    if action == Action.COPY:
        shutil.copy2(path, target)
    elif action == Action.MOVE:
        if os.path.lexists(target):
            raise FileExistsError(errno.EEXIST, "destination already exists", target)
        shutil.move(path, target)
    else:
        return path
    return target


def apply_destination(path: str, destination: Destination, config: VerifyConfig) -> str:
    target_dir = destination_dir(config, destination)
    if target_dir is None:
        return path
    return move_or_copy(path, target_dir, action_for(config.mode))
