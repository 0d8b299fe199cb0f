"""Image preprocessing primitive (Pillow)."""

from __future__ import annotations

import io

from PIL import Image, ImageEnhance, ImageFilter

from qrverify.models.verification import PreprocessSpec


def open_image(source: bytes) -> Image.Image:
    """Decode source bytes into a fully loaded RGB image."""
    img = Image.open(io.BytesIO(source))
    img.load()
    return img.convert("RGB")


def resize_to_width(img: Image.Image, width: int) -> Image.Image:
    """Scale to ``width`` pixels wide, keeping the aspect ratio."""
    if img.width == width:
        return img.copy()
    height = max(1, round(img.height * width / img.width))
    return img.resize((width, height), Image.Resampling.LANCZOS)


def apply_preprocess(source: bytes, resize_target: int, spec: PreprocessSpec) -> Image.Image:
    """Derive a fresh image from the source bytes for one variant.

    Resize always applies; contrast, brightness and blur only when set.
    """
    img = resize_to_width(open_image(source), resize_target)
    if spec.contrast is not None:
        img = ImageEnhance.Contrast(img).enhance(spec.contrast)
    if spec.brightness is not None:
        img = ImageEnhance.Brightness(img).enhance(spec.brightness)
    if spec.blur:
        img = img.filter(ImageFilter.GaussianBlur(radius=spec.blur))
    return img
