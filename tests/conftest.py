"""Pytest configuration for mosaic-blend tests."""

import pytest
from PIL import Image

from .mosaic_blend.utils import banded, gradient


@pytest.fixture
def images():
    """Three distinct sources: wide, tall and square."""
    return [
        banded((96, 48), [(255, 0, 0), (0, 255, 0), (0, 0, 255)]),
        gradient((40, 80)),
        Image.new("RGB", (64, 64), (250, 200, 20)),
    ]


@pytest.fixture
def image_files(tmp_path, images):
    """The same three sources written to disk."""
    paths = []
    for index, image in enumerate(images):
        path = tmp_path / ("source-%d.png" % index)
        image.save(str(path))
        paths.append(str(path))
    return paths
