"""Integration fixtures: a realistic folder of generated QR codes."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
import qrcode
from PIL import Image


@pytest.fixture
def audit_dir(tmp_path: Path) -> Path:
    """A folder as it might look before distribution.

    Layout:
        6 QR PNGs     (ticket_000..005.png, one URL each)
        1 large QR    (poster.jpg, 1200px wide, RGB JPEG)
        1 blank PNG   (placeholder.png)
        1 noise PNG   (smudge.png)
        1 corrupt PNG (broken.png, truncated header)
    """
    img_dir = tmp_path / "batch"
    img_dir.mkdir()

    for i in range(6):
        qrcode.make(f"https://example.com/t/{i:03d}").save(str(img_dir / f"ticket_{i:03d}.png"))

    poster = qrcode.QRCode(box_size=40, border=4)
    poster.add_data("POSTER-2026")
    poster.make(fit=True)
    poster.make_image().convert("RGB").save(img_dir / "poster.jpg", quality=92)

    Image.new("RGB", (400, 400), (250, 250, 250)).save(img_dir / "placeholder.png")
    rng = np.random.RandomState(3)
    Image.fromarray(rng.randint(0, 255, (300, 300), dtype=np.uint8)).save(img_dir / "smudge.png")

    (img_dir / "broken.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")
    return img_dir
