"""
Mosaic pipeline: validate, load, composite, encode.
"""
import asyncio
import logging
import os
from typing import Any, Iterable, Optional, Union

import attrs
import httpx
from PIL import Image

from mosaic_blend.api.loader import ImageSource, load_sources
from mosaic_blend.api.pil_io import encode
from mosaic_blend.composite.mosaic import composite
from mosaic_blend.composite.surface import Surface
from mosaic_blend.config import MosaicConfig
from mosaic_blend.constants import PipelineStage
from mosaic_blend.exceptions import ConfigError, MosaicError

logger = logging.getLogger(__name__)


def make_config(config: Optional[MosaicConfig] = None, **options: Any) -> MosaicConfig:
    """Build a config from keyword options, or override fields of ``config``."""
    try:
        if config is None:
            return MosaicConfig(**options)
        return attrs.evolve(config, **options) if options else config
    except TypeError as e:
        raise ConfigError(str(e)) from e


async def mosaic_blend(
    sources: Union[ImageSource, Iterable[ImageSource]],
    config: Optional[MosaicConfig] = None,
    client: Optional[httpx.AsyncClient] = None,
    **options: Any,
) -> Union[Surface, str, bytes]:
    """
    Blend source images into one square mosaic.

    The output is a grid of tiles, each showing the same region of a
    randomly chosen source, softened by random overlay patches drawn with
    the configured blend mode and opacity. With a seed the result is
    byte-identical across calls.

    Args:
        sources: Images to blend; URLs, ``data:`` URLs, paths, bytes or PIL
            images. A single source is accepted as is
        config: Mosaic options. When omitted, built from ``options``
        client: HTTP client for remote sources. Left open when given
        options: :py:class:`~mosaic_blend.config.MosaicConfig` fields

    Returns:
        :py:class:`~mosaic_blend.composite.surface.Surface`, ``data:`` URL
        string or encoded bytes, per ``config.return_type``

    Raises:
        ConfigError: Invalid options or no sources, before any I/O
        LoadError: A source failed to load; no partial mosaic is produced
        EncodingError: The result could not be serialized

    Examples:
        >>> import asyncio
        >>> from mosaic_blend import mosaic_blend
        >>> data_url = asyncio.run(
        ...     mosaic_blend(["a.png", "b.jpg"], seed=42, return_type="data_url")
        ... )
    """
    stage = PipelineStage.VALIDATING
    try:
        config = make_config(config, **options)
        if isinstance(sources, (str, bytes, bytearray, os.PathLike, Image.Image)):
            sources = [sources]
        try:
            sources = list(sources)
        except TypeError as e:
            raise ConfigError(
                "Sources must be an image source or an iterable of them, got %r"
                % (sources,)
            ) from e
        if not sources:
            raise ConfigError("No images provided")

        stage = _enter(PipelineStage.LOADING)
        bitmaps = await load_sources(
            sources, config.size, client=client, timeout=config.fetch_timeout
        )

        stage = _enter(PipelineStage.COMPOSITING_TILE)
        surface = composite(bitmaps, config)

        stage = _enter(PipelineStage.ENCODING)
        result = encode(surface, config.return_type, config.image_format)
    except MosaicError as e:
        logger.debug("Mosaic failed while %s: %s" % (stage.value, e))
        raise

    _enter(PipelineStage.DONE)
    return result


def mosaic_blend_sync(
    sources: Union[ImageSource, Iterable[ImageSource]],
    config: Optional[MosaicConfig] = None,
    **options: Any,
) -> Union[Surface, str, bytes]:
    """Blocking form of :py:func:`mosaic_blend`."""
    return asyncio.run(mosaic_blend(sources, config, **options))


def _enter(stage: PipelineStage) -> PipelineStage:
    logger.debug("Mosaic stage: %s" % stage.value)
    return stage
