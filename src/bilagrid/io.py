"""
Image file I/O through Pillow.

Thin glue between files on disk and the in-memory pixel containers.
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PIL import Image

from bilagrid.constants import MAX_VALUE_16
from bilagrid.image import ArrayImage, RGBAImage

logger = logging.getLogger(__name__)


def load_image(path: str | Path) -> ArrayImage:
    """
    Load an image file as a pixel source.

    16-bit grayscale files keep their precision (integer modes are clipped
    to 16 bits); every other mode is converted to 8-bit RGBA.

    Args:
        path: Image file path

    Returns:
        ArrayImage with the file contents
    """
    path = Path(path)
    with Image.open(path) as img:
        if img.mode in ("I;16", "I;16B", "I;16L", "I"):
            data = np.clip(np.asarray(img), 0, MAX_VALUE_16).astype(np.uint16)
        else:
            data = np.asarray(img.convert("RGBA"))

    image = ArrayImage(data)
    logger.info("[load_image] Loaded %s (%dx%d)", path, image.bounds().width, image.bounds().height)
    return image


def save_image(image: RGBAImage, path: str | Path, **kwargs) -> Path:
    """
    Save an 8-bit RGBA image.

    Formats without alpha (e.g. JPEG) receive the RGB channels only.

    Args:
        image: Image to save
        path: Output path; the format follows the suffix
        **kwargs: Passed to PIL.Image.save (e.g. quality=100)

    Returns:
        The output path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    pil = Image.fromarray(np.ascontiguousarray(image.data))
    if path.suffix.lower() in (".jpg", ".jpeg"):
        pil = pil.convert("RGB")
    pil.save(path, **kwargs)

    logger.info("[save_image] Saved %s", path)
    return path
