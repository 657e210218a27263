"""
Drawing surface for the mosaic.
"""
import contextlib
import logging
from typing import Iterator, Optional

import numpy as np
from PIL import Image

from mosaic_blend.composite.blend import BLEND_FUNC
from mosaic_blend.constants import BlendMode

logger = logging.getLogger(__name__)

Box = tuple[int, int, int, int]


def intersect(a: Box, b: Box) -> Box:
    """Calculate intersection of two (left, top, right, bottom) boxes."""
    inter = (max(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), min(a[3], b[3]))
    if inter[0] >= inter[2] or inter[1] >= inter[3]:
        return (0, 0, 0, 0)
    return inter


def _divide(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Division where empty alpha leaves the color at 1."""
    with np.errstate(divide="ignore", invalid="ignore"):
        c = np.true_divide(a, b)
        c[~np.isfinite(c)] = 1.0
    return c


class Surface(object):
    """
    Square RGBA drawing target.

    Pixels are float32 in ``[0, 1]``, color and alpha kept apart as in the
    compositing formulas. A surface starts fully transparent with the
    ``normal`` blend mode at full opacity. The blend mode and opacity only
    change inside :py:meth:`drawing_state`::

        surface = Surface(512)
        surface.paste(bitmap, (0, 0, 64, 64))
        with surface.drawing_state(BlendMode.OVERLAY, 0.6):
            surface.draw(bitmap, (10, 20, 110, 140))
        image = surface.topil()
    """

    def __init__(self, size: int):
        self._size = size
        self._color = np.ones((size, size, 3), dtype=np.float32)
        self._alpha = np.zeros((size, size, 1), dtype=np.float32)
        self._blend_mode = BlendMode.NORMAL
        self._opacity = 1.0

    @property
    def size(self) -> int:
        return self._size

    @property
    def width(self) -> int:
        return self._size

    @property
    def height(self) -> int:
        return self._size

    @property
    def bbox(self) -> Box:
        return (0, 0, self._size, self._size)

    @property
    def blend_mode(self) -> BlendMode:
        """Blend mode applied by :py:meth:`draw`."""
        return self._blend_mode

    @property
    def opacity(self) -> float:
        """Opacity applied by :py:meth:`draw`."""
        return self._opacity

    @contextlib.contextmanager
    def drawing_state(
        self, blend_mode: Optional[BlendMode] = None, opacity: Optional[float] = None
    ) -> Iterator["Surface"]:
        """
        Scoped change of blend mode and opacity.

        The previous state is restored when the block exits, whether it
        finishes or raises.
        """
        previous = (self._blend_mode, self._opacity)
        if blend_mode is not None:
            self._blend_mode = BlendMode(blend_mode)
        if opacity is not None:
            self._opacity = float(opacity)
        logger.debug(
            "Drawing state %s @ %g" % (self._blend_mode.value, self._opacity)
        )
        try:
            yield self
        finally:
            self._blend_mode, self._opacity = previous

    def paste(self, bitmap: np.ndarray, box: Box) -> None:
        """Copy the region ``box`` of ``bitmap`` to the same place, unblended."""
        left, top, right, bottom = self._clip(bitmap, box)
        if left == right:
            return
        region = bitmap[top:bottom, left:right]
        self._color[top:bottom, left:right] = region[:, :, :3]
        self._alpha[top:bottom, left:right] = region[:, :, 3:4]

    def draw(self, bitmap: np.ndarray, box: Box) -> None:
        """
        Composite the region ``box`` of ``bitmap`` onto the same place.

        Uses source-over with the current blend mode, the source alpha
        scaled by the current opacity. The box is clipped to both the
        bitmap and the surface.
        """
        left, top, right, bottom = self._clip(bitmap, box)
        if left == right:
            return
        region = bitmap[top:bottom, left:right]
        color_s = region[:, :, :3]
        alpha_s = region[:, :, 3:4] * np.float32(self._opacity)
        color_b = self._color[top:bottom, left:right]
        alpha_b = self._alpha[top:bottom, left:right]

        blend_fn = BLEND_FUNC[self._blend_mode]
        mixed = (1.0 - alpha_b) * color_s + alpha_b * blend_fn(color_b, color_s)
        alpha = alpha_s + alpha_b - alpha_s * alpha_b
        color = _divide(alpha_s * mixed + (1.0 - alpha_s) * alpha_b * color_b, alpha)

        self._color[top:bottom, left:right] = np.clip(color, 0.0, 1.0)
        self._alpha[top:bottom, left:right] = np.clip(alpha, 0.0, 1.0)

    def numpy(self) -> np.ndarray:
        """RGBA pixels as float32 of shape ``(size, size, 4)``."""
        return np.concatenate((self._color, self._alpha), axis=2)

    def topil(self) -> Image.Image:
        """RGBA pixels as a PIL image, 8 bits per channel."""
        pixels = np.round(255 * self.numpy()).astype(np.uint8)
        return Image.fromarray(pixels)

    def _clip(self, bitmap: np.ndarray, box: Box) -> Box:
        bounds = (0, 0, min(self._size, bitmap.shape[1]), min(self._size, bitmap.shape[0]))
        return intersect(bounds, box)

    def __repr__(self) -> str:
        return "%s(size=%d, blend_mode=%s, opacity=%g)" % (
            self.__class__.__name__,
            self._size,
            self._blend_mode.value,
            self._opacity,
        )
