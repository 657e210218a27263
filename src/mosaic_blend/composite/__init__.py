"""
Composite module for mosaic rendering and blending.

Key modules:

- :py:mod:`mosaic_blend.composite.mosaic`: Tile and overlay compositors
- :py:mod:`mosaic_blend.composite.blend`: Blend mode implementations
- :py:mod:`mosaic_blend.composite.surface`: The RGBA drawing surface

The compositing engine uses NumPy arrays in ``[0, 1]`` and quantizes to
8 bits only when the surface is converted to an image.
"""

from mosaic_blend.composite.mosaic import (
    composite,
    composite_overlays,
    composite_tiles,
)
from mosaic_blend.composite.surface import Surface

__all__ = [
    "Surface",
    "composite",
    "composite_overlays",
    "composite_tiles",
]
