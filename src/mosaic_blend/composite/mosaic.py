"""Mosaic compositing: tile grid followed by soft overlay patches."""

import logging
import math
from typing import Optional, Sequence

import numpy as np

from mosaic_blend.composite.surface import Surface
from mosaic_blend.config import MosaicConfig
from mosaic_blend.constants import BlendMode, PipelineStage
from mosaic_blend.sampler import Sampler

logger = logging.getLogger(__name__)


def composite(
    bitmaps: Sequence[np.ndarray],
    config: MosaicConfig,
    sampler: Optional[Sampler] = None,
) -> Surface:
    """
    Composite normalized bitmaps into a new surface.

    Args:
        bitmaps: Non-empty sequence of ``(size, size, 4)`` float arrays, in
            source order
        config: Mosaic options; ``size`` must match the bitmaps
        sampler: Random stream to consume. Defaults to one seeded from
            ``config.seed``

    Returns:
        The finished :py:class:`~mosaic_blend.composite.surface.Surface`

    Example::

        surface = composite(bitmaps, MosaicConfig(size=512, block=64, seed=7))
        surface.topil().save("mosaic.png")
    """
    assert len(bitmaps) > 0, "At least one bitmap is required"
    if sampler is None:
        sampler = Sampler(config.seed)
    surface = Surface(config.size)

    tiles = composite_tiles(surface, bitmaps, config.block, sampler)
    logger.debug("Drew %d tiles (%d draws)" % (tiles, sampler.draws))
    logger.debug("Mosaic stage: %s" % PipelineStage.COMPOSITING_OVERLAY.value)
    patches = composite_overlays(
        surface,
        bitmaps,
        sampler,
        patches_per_image=config.overlay_patches_per_image,
        size_range=config.overlay_size_range,
        blend_mode=config.overlay_blend_mode,
        opacity=config.overlay_alpha,
    )
    logger.debug("Drew %d overlay patches (%d draws)" % (patches, sampler.draws))
    return surface


def composite_tiles(
    surface: Surface,
    bitmaps: Sequence[np.ndarray],
    block: int,
    sampler: Sampler,
) -> int:
    """
    Fill the surface with a grid of ``block x block`` tiles.

    Cells are visited row by row from the top-left. Each cell consumes one
    draw to pick its source and shows that source's pixels at the very
    same position. Returns the number of tiles drawn.
    """
    count = len(bitmaps)
    tiles = surface.size // block
    for ty in range(tiles):
        for tx in range(tiles):
            index = sampler.randint(0, count - 1)
            x, y = tx * block, ty * block
            surface.paste(bitmaps[index], (x, y, x + block, y + block))
    return tiles * tiles


def composite_overlays(
    surface: Surface,
    bitmaps: Sequence[np.ndarray],
    sampler: Sampler,
    patches_per_image: int = 5,
    size_range: tuple[int, int] = (96, 320),
    blend_mode: BlendMode = BlendMode.OVERLAY,
    opacity: float = 0.6,
) -> int:
    """
    Soften tile seams with random patches drawn back at their own place.

    For each bitmap in order, each patch draws width, height, x and y, in
    that order. Heights may reach ``floor(max_side * 1.25)``. Returns the
    number of patches drawn.
    """
    min_side, max_side = size_range
    max_height = int(math.floor(max_side * 1.25))
    size = surface.size
    drawn = 0
    with surface.drawing_state(blend_mode, opacity):
        for bitmap in bitmaps:
            for _ in range(patches_per_image):
                w = sampler.randint(min_side, max_side)
                h = sampler.randint(min_side, max_height)
                x = sampler.randint(0, max(0, size - w))
                y = sampler.randint(0, max(0, size - h))
                surface.draw(bitmap, (x, y, x + w, y + h))
                drawn += 1
    return drawn
