# src/utils/image_utils.py
from __future__ import annotations

import io

from PIL import Image, ImageOps, UnidentifiedImageError

from utils.errors import ImageProcessingError

# ---------------- Tunables ----------------
MAX_SIDE = 600          # longer edge after resize
JPEG_QUALITY = 80
# -----------------------------------------


def open_image(data: bytes) -> Image.Image:
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
        # phone photos carry their rotation in EXIF
        return ImageOps.exif_transpose(img)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageProcessingError(f"Could not read image: {e}") from e


def encode_jpeg(img: Image.Image, quality: int = JPEG_QUALITY) -> bytes:
    bio = io.BytesIO()
    try:
        if img.mode != "RGB":
            img = img.convert("RGB")
        img.save(bio, format="JPEG", quality=quality, optimize=True)
    except (OSError, ValueError) as e:
        raise ImageProcessingError(f"Failed to resize image: {e}") from e
    return bio.getvalue()


def fit_within(size: tuple[int, int], max_side: int = MAX_SIDE) -> tuple[int, int]:
    """Scale (w, h) so the longer side is at most max_side. Never upscales."""
    w, h = size
    scale = max(w, h) / float(max_side)
    if scale <= 1.0:
        return w, h
    return max(1, round(w / scale)), max(1, round(h / scale))


def resize_image(data: bytes, max_side: int = MAX_SIDE, quality: int = JPEG_QUALITY) -> bytes:
    """Any picture in, JPEG out with the longer side <= max_side."""
    img = open_image(data)
    target = fit_within(img.size, max_side)
    if target != img.size:
        img = img.resize(target, Image.LANCZOS)
    return encode_jpeg(img, quality=quality)
