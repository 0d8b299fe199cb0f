"""QR decode primitive (zxing-cpp)."""

from __future__ import annotations

import numpy as np
import zxingcpp
from PIL import Image


def decode_qr(img: Image.Image) -> str | None:
    """Locate and decode one QR code. Returns None when nothing decodes."""
    gray = np.asarray(img.convert("L"), dtype=np.uint8)
    results = zxingcpp.read_barcodes(gray, formats=zxingcpp.BarcodeFormat.QRCode)
    for r in results:
        if r.text:
            return r.text
    return None
