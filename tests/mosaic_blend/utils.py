import io
import logging
from typing import Sequence

import numpy as np
from PIL import Image

logging.basicConfig(level=logging.DEBUG)


def solid(color: Sequence[float], size: int) -> np.ndarray:
    """Normalized bitmap of one RGBA color given in [0, 1]."""
    if len(color) == 3:
        color = tuple(color) + (1.0,)
    return np.full((size, size, 4), color, dtype=np.float32)


def ramp(size: int, seed: int = 0) -> np.ndarray:
    """Normalized opaque bitmap with distinct pixel values."""
    rng = np.random.default_rng(seed)
    color = rng.random((size, size, 3), dtype=np.float32)
    alpha = np.ones((size, size, 1), dtype=np.float32)
    return np.concatenate((color, alpha), axis=2)


def banded(size: tuple[int, int], colors: Sequence[tuple[int, int, int]]) -> Image.Image:
    """Image split into equal bands, vertical when wide, horizontal when tall."""
    width, height = size
    image = Image.new("RGB", size)
    count = len(colors)
    for index, color in enumerate(colors):
        if width >= height:
            box = (index * width // count, 0, (index + 1) * width // count, height)
        else:
            box = (0, index * height // count, width, (index + 1) * height // count)
        image.paste(color, box)
    return image


def gradient(size: tuple[int, int]) -> Image.Image:
    width, height = size
    x = np.linspace(0, 255, width, dtype=np.float32)[None, :].repeat(height, 0)
    y = np.linspace(0, 255, height, dtype=np.float32)[:, None].repeat(width, 1)
    pixels = np.stack((x, y, 255 - x), axis=2).astype(np.uint8)
    return Image.fromarray(pixels)


def png_bytes(image: Image.Image) -> bytes:
    with io.BytesIO() as f:
        image.save(f, format="PNG")
        return f.getvalue()


def coverage(boxes, size: int) -> np.ndarray:
    """How many boxes cover each pixel of a size x size canvas."""
    counts = np.zeros((size, size), dtype=np.int32)
    for left, top, right, bottom in boxes:
        counts[top:bottom, left:right] += 1
    return counts
