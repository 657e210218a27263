"""
Various constants for mosaic_blend
"""
from enum import Enum


class BlendMode(str, Enum):
    """
    Blend modes for overlay patches.

    Values follow the W3C compositing names, so ``BlendMode("hard-light")``
    and ``BlendMode.HARD_LIGHT`` are the same mode. ``"source-over"`` is
    accepted as an alias of ``normal``.
    """
    NORMAL = "normal"
    MULTIPLY = "multiply"
    SCREEN = "screen"
    OVERLAY = "overlay"
    DARKEN = "darken"
    LIGHTEN = "lighten"
    COLOR_DODGE = "color-dodge"
    COLOR_BURN = "color-burn"
    HARD_LIGHT = "hard-light"
    SOFT_LIGHT = "soft-light"
    DIFFERENCE = "difference"
    EXCLUSION = "exclusion"
    HUE = "hue"
    SATURATION = "saturation"
    COLOR = "color"
    LUMINOSITY = "luminosity"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            name = value.strip().lower().replace("_", "-")
            if name == "source-over":
                return cls.NORMAL
            for member in cls:
                if member.value == name:
                    return member
        return None


class ReturnType(str, Enum):
    """
    Output encodings of the mosaic.
    """
    SURFACE = "surface"
    DATA_URL = "data_url"
    BLOB = "blob"

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            name = {"canvas": "surface", "dataurl": "data_url"}.get(
                value.lower(), value.lower()
            )
            for member in cls:
                if member.value == name:
                    return member
        return None


class PipelineStage(Enum):
    """
    Stages of one mosaic invocation.
    """
    VALIDATING = "validating"
    LOADING = "loading"
    COMPOSITING_TILE = "compositing(tile)"
    COMPOSITING_OVERLAY = "compositing(overlay)"
    ENCODING = "encoding"
    DONE = "done"
    FAILED = "failed"


#: Image formats the encoder writes, with their MIME types.
IMAGE_FORMATS = {
    "png": "image/png",
    "jpeg": "image/jpeg",
    "webp": "image/webp",
}

#: Formats that cannot carry an alpha channel.
OPAQUE_FORMATS = {"jpeg"}
