"""Programmatic QR image fixtures and fake primitives."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path

import numpy as np
import pytest
import qrcode
from PIL import Image

from qrverify.models.verification import PreprocessSpec


def make_qr(path: Path, text: str) -> Path:
    qrcode.make(text).save(str(path))
    return path


@pytest.fixture
def qr_image_dir(tmp_path: Path) -> Path:
    """A directory with readable QR codes, blank images and one corrupt file.

    Layout:
        3 QR PNGs       (qr_0.png .. qr_2.png, payload "payload-<i>")
        1 QR JPEG       (qr_jpeg.jpg, payload "jpeg-payload")
        2 blank images  (blank_white.png, noise.jpg)
        1 corrupt PNG   (corrupt.png, garbage bytes)
        1 ignored file  (notes.txt)
    """
    img_dir = tmp_path / "images"
    img_dir.mkdir()

    for i in range(3):
        make_qr(img_dir / f"qr_{i}.png", f"payload-{i}")
    qrcode.make("jpeg-payload").convert("RGB").save(img_dir / "qr_jpeg.jpg", quality=95)

    Image.new("RGB", (320, 320), "white").save(img_dir / "blank_white.png")
    rng = np.random.RandomState(7)
    arr = rng.randint(0, 255, (240, 240, 3), dtype=np.uint8)
    Image.fromarray(arr).save(img_dir / "noise.jpg")

    (img_dir / "corrupt.png").write_bytes(b"\x89PNG\r\n\x1a\n not really a png")
    (img_dir / "notes.txt").write_text("not an image")
    return img_dir


@pytest.fixture
def qr_file(tmp_path: Path) -> str:
    return str(make_qr(tmp_path / "single.png", "https://example.com/ticket/42"))


@pytest.fixture
def blank_file(tmp_path: Path) -> str:
    path = tmp_path / "blank.png"
    Image.new("RGB", (300, 300), "white").save(path)
    return str(path)


class FakePrimitives:
    """Transform/decode stand-ins that decode only for chosen variants.

    ``transform`` returns the spec itself, so ``decode`` can decide per variant.
    Every attempt is recorded in ``attempted``.
    """

    def __init__(
        self,
        decodes: Iterable[PreprocessSpec] = (),
        text: str = "decoded",
        transform_errors: Iterable[PreprocessSpec] = (),
        decode_errors: Iterable[PreprocessSpec] = (),
    ) -> None:
        self.decodes = set(decodes)
        self.text = text
        self.transform_errors = set(transform_errors)
        self.decode_errors = set(decode_errors)
        self.attempted: list[PreprocessSpec] = []

    def transform(self, source: bytes, resize_target: int, spec: PreprocessSpec) -> PreprocessSpec:
        self.attempted.append(spec)
        if spec in self.transform_errors:
            raise OSError("image file is truncated")
        return spec

    def decode(self, image: PreprocessSpec) -> str | None:
        if image in self.decode_errors:
            raise RuntimeError("decoder crashed")
        if image in self.decodes:
            return f"{self.text}:{image.describe()}"
        return None


@pytest.fixture
def fake_primitives() -> Callable[..., FakePrimitives]:
    return FakePrimitives
