"""Image discovery and verification request construction."""

from __future__ import annotations

import io
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from qrverify.core.transform import open_image
from qrverify.errors import SourceReadError
from qrverify.models.verification import PreprocessSpec, VerificationRequest


def discover_images(
    root: str | Path,
    extensions: tuple[str, ...],
    recursive: bool = False,
    exclude: Iterable[str | Path] = (),
) -> list[str]:
    """Discover image files under root (top level only unless recursive), sorted by path.

    Directories listed in ``exclude`` are never walked into.
    """
    root = Path(root)
    skip = {os.path.realpath(d) for d in exclude}
    found: list[str] = []
    ext_set = {e.lower() for e in extensions}
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [
            d
            for d in dirnames
            if not d.startswith(".") and os.path.realpath(os.path.join(dirpath, d)) not in skip
        ]
        for fn in filenames:
            if fn.startswith("."):
                continue
            if any(fn.lower().endswith(ext) for ext in ext_set):
                found.append(os.path.abspath(os.path.join(dirpath, fn)))
        if not recursive:
            break
    found.sort()
    return found


def read_source(path: str) -> bytes:
    """Read and sanity-check an image file. Raises SourceReadError."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        raise SourceReadError(path, e.strerror or str(e)) from e

    if not data:
        raise SourceReadError(path, "file is empty")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.verify()
        # verify() only checks headers; decode fully so truncated data fails here
        open_image(data)
    except (
        UnidentifiedImageError,
        Image.DecompressionBombError,
        OSError,
        SyntaxError,
        ValueError,
    ) as e:
        raise SourceReadError(path, f"not a readable image ({e})") from e
    return data


def request_factory(
    resize_target: int,
    candidates: tuple[PreprocessSpec, ...],
) -> Callable[[str], VerificationRequest]:
    """Build a per-file request factory bound to a run's resize target and candidates."""

    def make_request(path: str) -> VerificationRequest:
        return VerificationRequest(
            path=path,
            source=read_source(path),
            resize_target=resize_target,
            candidates=candidates,
        )

    return make_request
