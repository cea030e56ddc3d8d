"""End-to-end conversions through the CLI for every supported format pair."""

import itertools

import pytest
from PIL import Image
from typer.testing import CliRunner

from imgconvert.cli.main import app
from imgconvert.core.conversion.manager import ConversionManager

FORMATS = ["jpeg", "png", "gif", "bmp", "tiff"]
PIL_NAMES = {"jpeg": "JPEG", "png": "PNG", "gif": "GIF", "bmp": "BMP", "tiff": "TIFF"}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.parametrize(
    "source_format, target_format", list(itertools.product(FORMATS, FORMATS))
)
def test_every_pair_produces_readable_output(
    runner, image_file, tmp_path, source_format, target_format
):
    # Arrange
    source = image_file(source_format, size=(100, 50), color="orange")
    target = tmp_path / f"converted.{target_format}"

    # Act
    result = runner.invoke(app, [str(source), str(target), target_format])

    # Assert
    assert result.exit_code == 0, result.stdout
    assert f"Input image format: {source_format}" in result.stdout
    with Image.open(target) as img:
        assert img.format == PIL_NAMES[target_format]
        assert img.size == (100, 50)


def test_jpg_token_writes_jpeg(runner, image_file, tmp_path):
    source = image_file("png")
    target = tmp_path / "out.jpg"

    result = runner.invoke(app, [str(source), str(target), "JPG"])

    assert result.exit_code == 0
    with Image.open(target) as img:
        assert img.format == "JPEG"


@pytest.mark.parametrize("mode", ["RGBA", "RGB", "L", "LA", "P"])
def test_png_to_png_preserves_pixels(tmp_path, gradient_image, mode):
    # Arrange
    source = tmp_path / "in.png"
    target = tmp_path / "out.png"
    original = gradient_image.convert(mode)
    original.save(source, format="PNG")

    # Act
    result = ConversionManager().convert_file(source, target, "png")

    # Assert
    assert result.succeeded
    with Image.open(source) as before, Image.open(target) as after:
        assert after.mode == before.mode
        assert list(after.getdata()) == list(before.getdata())
        if mode == "P":
            assert after.getpalette() == before.getpalette()


@pytest.mark.parametrize("source_format", ["png", "gif", "tiff"])
def test_transparent_source_to_every_target(tmp_path, source_format):
    """Inputs with an alpha channel or transparent palette still convert."""
    source = tmp_path / f"alpha.{source_format}"
    img = Image.new("RGBA", (40, 30), (0, 128, 255, 255))
    img.paste((0, 0, 0, 0), (0, 0, 20, 30))
    if source_format == "gif":
        img.convert("P").save(source, format="GIF", transparency=0)
    else:
        img.save(source, format=PIL_NAMES[source_format])

    manager = ConversionManager()
    for target_format in FORMATS:
        target = tmp_path / f"out.{target_format}"

        result = manager.convert_file(source, target, target_format)

        assert result.succeeded, result.error_message
        with Image.open(target) as converted:
            assert converted.size == (40, 30)


SIXTEEN_BIT_LEVELS = [0, 16384, 32768, 65535]
EIGHT_BIT_LEVELS = [0, 64, 128, 255]


def _write_gray16(path, source_format):
    """Write four 8x8 gray blocks, one per 16-bit level."""
    img = Image.new("I", (32, 8))
    for i, level in enumerate(SIXTEEN_BIT_LEVELS):
        img.paste(level, (i * 8, 0, i * 8 + 8, 8))
    img.convert("I;16").save(path, format=PIL_NAMES[source_format])


@pytest.mark.parametrize(
    "source_format, target_format",
    list(itertools.product(["png", "tiff"], FORMATS)),
)
def test_sixteen_bit_grayscale_to_every_target(tmp_path, source_format, target_format):
    # Arrange
    source = tmp_path / f"gray16.{source_format}"
    target = tmp_path / f"out.{target_format}"
    _write_gray16(source, source_format)

    # Act
    result = ConversionManager().convert_file(source, target, target_format)

    # Assert
    assert result.succeeded, result.error_message
    with Image.open(target) as converted:
        assert converted.size == (32, 8)
        if source_format == "png" and target_format == "png":
            expected = SIXTEEN_BIT_LEVELS
        else:
            converted = converted.convert("L")
            expected = EIGHT_BIT_LEVELS
        samples = [converted.getpixel((i * 8 + 4, 4)) for i in range(4)]

    tolerance = 3 if target_format == "jpeg" else 0
    for actual, level in zip(samples, expected):
        assert abs(actual - level) <= tolerance
