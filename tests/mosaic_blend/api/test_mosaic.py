import asyncio
import base64
import hashlib
import logging

import attrs
import httpx
import numpy as np
import pytest
from PIL import Image

from mosaic_blend import (
    ConfigError,
    LoadError,
    MosaicConfig,
    Surface,
    mosaic_blend,
    mosaic_blend_sync,
)
from mosaic_blend.api.loader import load_sources
from mosaic_blend.composite import mosaic as mosaic_module
from mosaic_blend.constants import PipelineStage

from ..utils import png_bytes

logger = logging.getLogger(__name__)


def _digest(data):
    return hashlib.sha256(data).hexdigest()


def _run(*args, **kwargs):
    return asyncio.run(mosaic_blend(*args, **kwargs))


def test_scenario_hash(images):
    config = MosaicConfig(
        size=512, block=64, seed=42, overlay_patches_per_image=2, return_type="blob"
    )
    first = _digest(_run(images, config))
    second = _digest(_run(images, config))
    other = _digest(_run(images, attrs.evolve(config, seed=43)))
    assert first == second
    assert first != other


def test_deterministic_from_files(image_files):
    options = dict(size=128, block=32, seed=7, return_type="blob")
    assert _run(image_files, **options) == _run(image_files, **options)


def test_files_and_images_agree(images, image_files):
    options = dict(size=128, block=32, seed=11, return_type="blob")
    assert _run(images, **options) == _run(image_files, **options)


def test_concurrent_invocations(images):
    async def run():
        return await asyncio.gather(
            mosaic_blend(images, size=128, block=32, seed=5, return_type="blob"),
            mosaic_blend(images, size=128, block=32, seed=5, return_type="blob"),
        )

    a, b = asyncio.run(run())
    assert a == b


def test_return_types(images):
    surface = _run(images, size=64, block=16, seed=1)
    assert isinstance(surface, Surface)
    assert surface.size == 64

    url = _run(images, size=64, block=16, seed=1, return_type="data_url")
    assert url.startswith("data:image/png;base64,")

    blob = _run(images, size=64, block=16, seed=1, return_type="blob")
    assert base64.b64decode(url.split(",", 1)[1]) == blob
    assert png_bytes(surface.topil()) == blob


def test_config_and_overrides(images):
    config = MosaicConfig(size=64, block=16, return_type="blob")
    assert _run(images, config, seed=5) == _run(images, attrs.evolve(config, seed=5))


def test_single_source(images):
    result = _run(images[0], size=32, block=8, seed=1)
    assert isinstance(result, Surface)


def test_divisibility_before_loading():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, content=png_bytes(Image.new("RGB", (4, 4))))

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await mosaic_blend(
                ["https://example.com/a.png"], client=client, size=100, block=33
            )

    with pytest.raises(ConfigError) as excinfo:
        asyncio.run(run())
    assert excinfo.value.stage == PipelineStage.VALIDATING
    assert requests == []


def test_empty_sources():
    with pytest.raises(ConfigError):
        _run([])
    with pytest.raises(ConfigError):
        mosaic_blend_sync([], MosaicConfig())


@pytest.mark.parametrize("sources", [None, 42, 1.5])
def test_sources_not_iterable(sources):
    with pytest.raises(ConfigError) as excinfo:
        _run(sources, size=32, block=8)
    assert excinfo.value.stage == PipelineStage.VALIDATING
    assert isinstance(excinfo.value.__cause__, TypeError)


def test_unknown_option(images):
    with pytest.raises(ConfigError):
        _run(images, blocks=16)


def test_load_error_aborts(images, tmp_path):
    sources = list(images) + [str(tmp_path / "missing.png")]
    with pytest.raises(LoadError) as excinfo:
        _run(sources, size=64, block=16)
    assert excinfo.value.stage == PipelineStage.LOADING


@pytest.mark.parametrize("seed", [None, 1, 42, 99])
def test_overlay_patch_total(images, seed, monkeypatch):
    calls = []
    draw = Surface.draw

    def counting_draw(self, bitmap, box):
        calls.append(box)
        return draw(self, bitmap, box)

    monkeypatch.setattr(Surface, "draw", counting_draw)
    _run(images, size=64, block=16, seed=seed, overlay_patches_per_image=3)
    assert len(calls) == 3 * len(images)


def test_remote_sources():
    colors = {"/a.png": (255, 0, 0), "/b.png": (0, 0, 255)}

    def handler(request):
        image = Image.new("RGB", (32, 16), colors[request.url.path])
        return httpx.Response(200, content=png_bytes(image))

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await mosaic_blend(
                ["https://example.com/a.png", "https://example.com/b.png"],
                client=client,
                size=32,
                block=8,
                seed=3,
            )

    surface = asyncio.run(run())
    pixels = surface.numpy()
    assert pixels.shape == (32, 32, 4)
    # Red and blue sources only, blended with each other.
    assert pixels[:, :, 1].max() < 1e-6


def test_sync_wrapper(images):
    config = MosaicConfig(size=64, block=16, seed=8, return_type="blob")
    assert mosaic_blend_sync(images, config) == _run(images, config)


def test_pipeline_uses_composite(images, monkeypatch):
    seen = []
    original = mosaic_module.composite_tiles

    def spy(surface, bitmaps, block, sampler):
        seen.append((len(bitmaps), block, sampler.draws))
        return original(surface, bitmaps, block, sampler)

    monkeypatch.setattr(mosaic_module, "composite_tiles", spy)
    result = _run(images, size=64, block=16, seed=2)
    assert seen == [(3, 16, 0)]

    bitmaps = asyncio.run(load_sources(images, 64))
    config = MosaicConfig(size=64, block=16, seed=2)
    expected = mosaic_module.composite(bitmaps, config)
    np.testing.assert_array_equal(result.numpy(), expected.numpy())
