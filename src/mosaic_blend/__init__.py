"""
mosaic-blend: deterministic mosaic compositing of image collections.

Blends any number of source images into one square image: a grid of tiles,
each copied from a randomly chosen source at the same position, softened by
randomly placed overlay patches drawn with a blend mode and opacity. With a
seed, the output is byte-identical across runs.

Basic usage::

    import asyncio
    from mosaic_blend import mosaic_blend

    surface = asyncio.run(
        mosaic_blend(["one.png", "https://example.com/two.jpg"], seed=42)
    )
    surface.topil().save("mosaic.png")

Architecture:

- :py:mod:`mosaic_blend.api`: Pipeline entry points, loading and encoding
- :py:mod:`mosaic_blend.composite`: Tile and overlay compositing engine
- :py:mod:`mosaic_blend.sampler`: Seeded Mulberry32 sampler
- :py:mod:`mosaic_blend.config`: Immutable mosaic options
"""

from mosaic_blend.api.mosaic import mosaic_blend, mosaic_blend_sync
from mosaic_blend.composite.surface import Surface
from mosaic_blend.config import MosaicConfig
from mosaic_blend.constants import BlendMode, ReturnType
from mosaic_blend.exceptions import ConfigError, EncodingError, LoadError, MosaicError
from mosaic_blend.sampler import Sampler
from mosaic_blend.version import __version__

__all__ = [
    "BlendMode",
    "ConfigError",
    "EncodingError",
    "LoadError",
    "MosaicConfig",
    "MosaicError",
    "ReturnType",
    "Sampler",
    "Surface",
    "__version__",
    "mosaic_blend",
    "mosaic_blend_sync",
]
