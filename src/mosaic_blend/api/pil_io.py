"""
PIL IO module.

Serializes a finished surface into the requested return type.
"""
import base64
import io
import logging
from typing import Union

from PIL import Image

from mosaic_blend.composite.surface import Surface
from mosaic_blend.constants import IMAGE_FORMATS, OPAQUE_FORMATS, ReturnType
from mosaic_blend.exceptions import EncodingError

logger = logging.getLogger(__name__)


def get_mime_type(image_format: str) -> str:
    """MIME type of an encoder format."""
    try:
        return IMAGE_FORMATS[image_format]
    except KeyError:
        raise EncodingError("Unsupported image format: %r" % image_format)


def flatten(image: Image.Image) -> Image.Image:
    """Composite an RGBA image onto opaque black."""
    backdrop = Image.new("RGBA", image.size, (0, 0, 0, 255))
    return Image.alpha_composite(backdrop, image).convert("RGB")


def tobytes(surface: Surface, image_format: str = "png") -> bytes:
    """Encode the surface as image file bytes."""
    get_mime_type(image_format)
    image = surface.topil()
    if image_format in OPAQUE_FORMATS:
        image = flatten(image)
    with io.BytesIO() as f:
        try:
            image.save(f, format=image_format.upper())
        except (OSError, ValueError, KeyError) as e:
            raise EncodingError("Failed to encode %s: %s" % (image_format, e)) from e
        return f.getvalue()


def todataurl(surface: Surface, image_format: str = "png") -> str:
    """Encode the surface as a self-contained ``data:`` URL."""
    payload = base64.b64encode(tobytes(surface, image_format)).decode("ascii")
    return "data:%s;base64,%s" % (get_mime_type(image_format), payload)


def encode(
    surface: Surface,
    return_type: ReturnType = ReturnType.SURFACE,
    image_format: str = "png",
) -> Union[Surface, str, bytes]:
    """
    Serialize the surface per ``return_type``.

    ``surface`` returns the surface itself, ``blob`` the encoded bytes and
    ``data_url`` a base64 ``data:`` URL. Pixels are never modified.

    Raises:
        EncodingError: If the encoder fails
    """
    logger.debug("Encoding as %s (%s)" % (return_type.value, image_format))
    if return_type == ReturnType.SURFACE:
        return surface
    if return_type == ReturnType.BLOB:
        return tobytes(surface, image_format)
    if return_type == ReturnType.DATA_URL:
        return todataurl(surface, image_format)
    raise EncodingError("Unknown return type: %r" % (return_type,))
