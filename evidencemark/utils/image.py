"""Image I/O helpers and display-size handling."""

from __future__ import annotations

import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

_EXIF_ORIENTATION = 0x0112


def load_image(path: Path) -> np.ndarray:
    """Load an image from disk as a BGR array."""
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None:
        raise FileNotFoundError(f"Cannot load image: {path}")
    return img


def read_image_size(path: Path) -> tuple[int, int]:
    """(width, height) of an image read from its header, without decoding pixels.

    EXIF rotations are applied, matching what load_image returns.
    """
    try:
        with Image.open(path) as img:
            width, height = img.size
            if img.getexif().get(_EXIF_ORIENTATION) in (5, 6, 7, 8):
                width, height = height, width
            return width, height
    except UnidentifiedImageError as e:
        raise FileNotFoundError(f"Cannot load image: {path}") from e


def fit_display_size(
    image_width: int,
    image_height: int,
    display_width: int | None = None,
    display_height: int | None = None,
) -> tuple[int, int]:
    """Resolve the displayed (width, height) of an image.

    Mirrors a responsive ``width: 100%; height: auto`` image: when only one
    side is given the other follows the image's aspect ratio. With neither
    side given the natural size is used.

    Raises:
        ValueError: a requested side is zero or negative.
    """
    for name, value in (("width", display_width), ("height", display_height)):
        if value is not None and value <= 0:
            raise ValueError(f"Display {name} must be positive, got {value}")

    if display_width and display_height:
        return int(display_width), int(display_height)
    if display_width:
        return int(display_width), max(1, round(image_height * display_width / image_width))
    if display_height:
        return max(1, round(image_width * display_height / image_height)), int(display_height)
    return image_width, image_height


def resize_to_display(image: np.ndarray, width: int, height: int) -> np.ndarray:
    """Resize *image* to the displayed size. Returns the input when already that size."""
    h, w = image.shape[:2]
    if (w, h) == (width, height):
        return image
    interpolation = cv2.INTER_AREA if width * height < w * h else cv2.INTER_LINEAR
    return cv2.resize(image, (width, height), interpolation=interpolation)


def save_image(image: np.ndarray, path: Path, quality: int = 95) -> Path:
    """Write a BGR image, creating parent directories. JPEG output uses *quality*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    params: list[int] = []
    if path.suffix.lower() in (".jpg", ".jpeg"):
        params = [cv2.IMWRITE_JPEG_QUALITY, quality]
    if not cv2.imwrite(str(path), image, params):
        raise OSError(f"Cannot write image: {path}")
    logger.info("Wrote annotated image to %s", path)
    return path


def hex_to_bgr(color: str) -> tuple[int, int, int]:
    """Convert ``#rrggbb`` to an OpenCV BGR tuple."""
    value = color.lstrip("#")
    if len(value) != 6:
        raise ValueError(f"Expected #rrggbb color, got {color!r}")
    r, g, b = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    return (b, g, r)
