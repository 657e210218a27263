import logging
import sys

import pytest
from PIL import Image

from mosaic_blend.__main__ import guess_format, main

logger = logging.getLogger(__name__)


@pytest.mark.parametrize(
    "argv",
    [
        ["-h"],
        ["--version"],
        ["compose", "-h"],
    ],
)
def test_main_exits(argv):
    with pytest.raises(SystemExit):
        main(argv)
        sys.exit()


def test_compose(image_files, tmpdir):
    outputs = []
    for name in ("a.png", "b.png"):
        output = tmpdir.join(name).strpath
        argv = ["--verbose", "compose", output] + image_files
        argv += ["--size", "64", "--block", "16", "--seed", "42", "--patches", "2"]
        argv += ["--patch-size", "8", "24", "--blend-mode", "multiply"]
        assert main(argv) is None
        outputs.append(output)

    with open(outputs[0], "rb") as a, open(outputs[1], "rb") as b:
        assert a.read() == b.read()
    image = Image.open(outputs[0])
    assert image.size == (64, 64)
    assert image.format == "PNG"


def test_compose_jpeg(image_files, tmpdir):
    output = tmpdir.join("mosaic.jpg").strpath
    assert main(["compose", output] + image_files + ["--size", "32", "--block", "8"]) is None
    assert Image.open(output).format == "JPEG"


def test_compose_bad_config(image_files, tmpdir):
    output = tmpdir.join("mosaic.png").strpath
    argv = ["compose", output] + image_files + ["--size", "100", "--block", "33"]
    assert main(argv) == 1
    assert not tmpdir.join("mosaic.png").exists()


def test_compose_missing_source(tmpdir):
    output = tmpdir.join("mosaic.png").strpath
    argv = ["compose", output, tmpdir.join("missing.png").strpath, "--size", "32", "--block", "8"]
    assert main(argv) == 1


def test_show(image_files, capsys):
    assert main(["show", "--size", "96"] + image_files) is None
    out = capsys.readouterr().out
    # The first source is 96x48, so it is scaled by 2 and shifted left.
    assert "96x48 scale=2 dx=-48 dy=0" in out
    assert len(out.strip().splitlines()) == len(image_files)


@pytest.mark.parametrize(
    "filename, expected",
    [
        ("out.png", "png"),
        ("out.JPG", "jpeg"),
        ("out.webp", "webp"),
        ("out", "png"),
        ("out.tiff", "png"),
    ],
)
def test_guess_format(filename, expected):
    assert guess_format(filename) == expected
