"""
Source loading and cover-fit normalization.

Every source is resolved to a decoded image and resampled to a
``size x size`` RGBA float array. Remote sources are fetched with
:py:mod:`httpx`; file reads and decoding run in worker threads so all
sources load concurrently. The first failure cancels the remaining loads.
"""
import asyncio
import base64
import io
import logging
import os
import urllib.parse
from typing import Optional, Sequence, Union

import httpx
import numpy as np
from attrs import define
from PIL import Image, ImageOps

from mosaic_blend.exceptions import LoadError, describe_source

logger = logging.getLogger(__name__)

ImageSource = Union[str, "os.PathLike[str]", bytes, bytearray, Image.Image]

REMOTE_SCHEMES = ("http://", "https://")


@define(frozen=True)
class CoverFit(object):
    """
    Geometry of a cover-fit transform onto a square canvas.

    The scaled image covers the canvas and is centered, so one of ``dx``,
    ``dy`` is zero and the other is zero or negative.
    """

    source_width: int
    source_height: int
    size: int
    scale: float
    scaled_width: float
    scaled_height: float
    dx: float
    dy: float

    @property
    def box(self) -> tuple[float, float, float, float]:
        """Region of the source image that lands on the canvas."""
        left = max(0.0, -self.dx / self.scale)
        top = max(0.0, -self.dy / self.scale)
        right = min(float(self.source_width), left + self.size / self.scale)
        bottom = min(float(self.source_height), top + self.size / self.scale)
        return (left, top, right, bottom)


def cover_fit(width: int, height: int, size: int) -> CoverFit:
    """Compute the cover-fit of a ``width x height`` image into ``size``."""
    if width <= 0 or height <= 0:
        raise ValueError("Image has no pixels: %dx%d" % (width, height))
    scale = max(size / width, size / height)
    w = width * scale
    h = height * scale
    return CoverFit(
        source_width=width,
        source_height=height,
        size=size,
        scale=scale,
        scaled_width=w,
        scaled_height=h,
        dx=(size - w) / 2,
        dy=(size - h) / 2,
    )


def normalize(image: Image.Image, size: int) -> np.ndarray:
    """
    Cover-fit ``image`` onto a ``size x size`` canvas.

    Returns float32 RGBA of shape ``(size, size, 4)`` in ``[0, 1]``.
    """
    fit = cover_fit(image.width, image.height, size)
    logger.debug(
        "Cover-fit %dx%d: scale=%g dx=%g dy=%g"
        % (fit.source_width, fit.source_height, fit.scale, fit.dx, fit.dy)
    )
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    resized = image.resize((size, size), Image.Resampling.LANCZOS, box=fit.box)
    return np.asarray(resized, dtype=np.float32) / np.float32(255.0)


def decode(data: bytes) -> Image.Image:
    """Decode encoded image bytes, honouring EXIF orientation."""
    image = Image.open(io.BytesIO(data))
    image.load()
    return ImageOps.exif_transpose(image)


def parse_data_url(url: str) -> bytes:
    """Payload of a ``data:`` URL."""
    header, sep, payload = url.partition(",")
    if not sep:
        raise ValueError("Malformed data URL")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=True)
    return urllib.parse.unquote_to_bytes(payload)


def is_remote(source: ImageSource) -> bool:
    return isinstance(source, str) and source.lower().startswith(REMOTE_SCHEMES)


def _decode_and_normalize(data: bytes, size: int) -> np.ndarray:
    return normalize(decode(data), size)


def _read_file(path: Union[str, "os.PathLike[str]"]) -> bytes:
    with open(path, "rb") as f:
        return f.read()


async def _fetch(url: str, client: httpx.AsyncClient) -> bytes:
    response = await client.get(url)
    response.raise_for_status()
    return response.content


async def load_source(
    source: ImageSource, size: int, client: Optional[httpx.AsyncClient] = None
) -> np.ndarray:
    """
    Resolve one source into a normalized bitmap.

    Args:
        source: URL, ``data:`` URL, file path, encoded bytes or PIL image
        size: Side length of the normalized bitmap
        client: HTTP client, required for ``http(s)://`` sources

    Raises:
        LoadError: If the source cannot be fetched, read or decoded
    """
    logger.debug("Loading %s" % describe_source(source))
    try:
        if isinstance(source, Image.Image):
            # Already decoded, nothing to wait for.
            return normalize(source, size)
        if isinstance(source, (bytes, bytearray)):
            data = bytes(source)
        elif is_remote(source):
            if client is None:
                raise LoadError(source, "no HTTP client for remote source")
            data = await _fetch(source, client)  # type: ignore[arg-type]
        elif isinstance(source, str) and source.startswith("data:"):
            data = parse_data_url(source)
        elif isinstance(source, (str, os.PathLike)):
            data = await asyncio.to_thread(_read_file, source)
        else:
            raise LoadError(source, "unsupported source type %s" % type(source).__name__)
        return await asyncio.to_thread(_decode_and_normalize, data, size)
    except LoadError:
        raise
    except httpx.HTTPError as e:
        raise LoadError(source, "fetch failed: %s" % e) from e
    except Image.DecompressionBombError as e:
        raise LoadError(source, str(e)) from e
    except (OSError, ValueError) as e:
        raise LoadError(source, str(e) or e.__class__.__name__) from e


async def _gather(
    sources: Sequence[ImageSource], size: int, client: Optional[httpx.AsyncClient]
) -> list[np.ndarray]:
    tasks = [asyncio.ensure_future(load_source(s, size, client)) for s in sources]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def load_sources(
    sources: Sequence[ImageSource],
    size: int,
    client: Optional[httpx.AsyncClient] = None,
    timeout: float = 10.0,
) -> list[np.ndarray]:
    """
    Load all sources concurrently, in input order.

    An HTTP client is created for remote sources when none is given, and
    closed afterwards. A given client is left open.

    Raises:
        LoadError: For the first source that fails. No partial result.
    """
    if client is None and any(is_remote(s) for s in sources):
        async with httpx.AsyncClient(follow_redirects=True, timeout=timeout) as client:
            return await _gather(sources, size, client)
    return await _gather(sources, size, client)
