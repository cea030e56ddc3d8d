"""
Unit tests for the command-line driver
"""

import os
from unittest.mock import patch

import pytest
from PIL import Image
from typer.testing import CliRunner

from imgconvert import __version__
from imgconvert.cli.main import app
from imgconvert.core.exceptions import ConversionFailedError


@pytest.fixture
def runner():
    """Create a CLI test runner"""
    return CliRunner()


class TestArguments:
    """Argument count handling"""

    @pytest.mark.parametrize(
        "args",
        [[], ["a.png"], ["a.png", "b.png"], ["a.png", "b.png", "png", "extra"]],
    )
    def test_wrong_argument_count_prints_usage(self, runner, args):
        with patch("imgconvert.cli.main.ConversionManager") as mock_manager:
            result = runner.invoke(app, args)

        assert result.exit_code == 2
        assert "Usage: imgconvert <input file> <output file> <format>" in result.stdout
        mock_manager.assert_not_called()

    def test_wrong_argument_count_touches_no_files(self, runner, tmp_path):
        target = tmp_path / "b.png"

        result = runner.invoke(app, [str(tmp_path / "a.png"), str(target)])

        assert result.exit_code == 2
        assert not target.exists()

    def test_unknown_dash_argument_prints_usage(self, runner):
        result = runner.invoke(app, ["-x"])

        assert result.exit_code == 2
        assert "Usage: imgconvert <input file> <output file> <format>" in result.stdout

    def test_input_path_starting_with_dash(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Image.new("RGB", (6, 4), "red").save(tmp_path / "-in.png")

        result = runner.invoke(app, ["-in.png", "out.bmp", "bmp"])

        assert result.exit_code == 0
        assert (tmp_path / "out.bmp").exists()

    def test_double_dash_ends_options(self, runner, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        Image.new("RGB", (6, 4), "blue").save(tmp_path / "-v.png")

        result = runner.invoke(app, ["--", "-v.png", "out.gif", "gif"])

        assert result.exit_code == 0
        assert "Image conversion successful!" in result.stdout
        assert (tmp_path / "out.gif").exists()

    def test_version(self, runner):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help(self, runner):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "Convert an image file to another format" in result.stdout


class TestConversion:
    """Status lines and exit codes"""

    def test_jpeg_to_png(self, runner, image_file, tmp_path):
        # Arrange
        source = image_file("jpeg", name="photo.jpg", size=(100, 50))
        target = tmp_path / "photo.png"

        # Act
        result = runner.invoke(app, [str(source), str(target), "png"])

        # Assert
        assert result.exit_code == 0
        assert "Input image format: jpeg" in result.stdout
        assert "Image conversion successful!" in result.stdout
        with Image.open(target) as img:
            assert img.format == "PNG"
            assert img.size == (100, 50)

    @pytest.mark.parametrize("token", ["PNG", "png", "Png"])
    def test_format_token_is_case_insensitive(self, runner, image_file, tmp_path, token):
        source = image_file("gif")
        target = tmp_path / "out.img"

        result = runner.invoke(app, [str(source), str(target), token])

        assert result.exit_code == 0
        with Image.open(target) as img:
            assert img.format == "PNG"

    def test_missing_input(self, runner, tmp_path):
        target = tmp_path / "out.png"

        result = runner.invoke(app, [str(tmp_path / "nope.jpg"), str(target), "png"])

        assert result.exit_code == 3
        assert "Error opening input file" in result.stdout
        assert "Input image format" not in result.stdout
        assert not target.exists()

    def test_undecodable_input(self, runner, tmp_path):
        source = tmp_path / "fake.jpg"
        source.write_bytes(b"definitely not an image")

        result = runner.invoke(app, [str(source), str(tmp_path / "o.png"), "png"])

        assert result.exit_code == 4
        assert "Error decoding image" in result.stdout

    def test_unsupported_format(self, runner, image_file, tmp_path):
        source = image_file("png")
        target = tmp_path / "out.webp"

        result = runner.invoke(app, [str(source), str(target), "webp"])

        assert result.exit_code == 6
        assert "Input image format: png" in result.stdout
        assert "Unsupported output format: webp" in result.stdout
        assert not target.exists()

    def test_unsupported_format_suggests_close_match(self, runner, image_file, tmp_path):
        source = image_file("png")

        result = runner.invoke(app, [str(source), str(tmp_path / "o"), "pnng"])

        assert result.exit_code == 6
        assert "Did you mean: png?" in result.stdout

    def test_output_create_failure(self, runner, image_file, tmp_path):
        source = image_file("bmp")
        target = tmp_path / "missing-dir" / "out.png"

        result = runner.invoke(app, [str(source), str(target), "png"])

        assert result.exit_code == 5
        assert "Input image format: bmp" in result.stdout
        assert "Error creating output file" in result.stdout

    def test_encode_failure(self, runner, image_file, tmp_path):
        source = image_file("tiff")
        target = tmp_path / "out.gif"

        with patch(
            "imgconvert.core.conversion.formats.gif_handler.GifHandler.save_image",
            side_effect=ConversionFailedError("Failed to save image as GIF: boom"),
        ):
            result = runner.invoke(app, [str(source), str(target), "gif"])

        assert result.exit_code == 7
        assert "Input image format: tiff" in result.stdout
        assert "Error encoding image: Failed to save image as GIF: boom" in result.stdout
        assert not target.exists()

    def test_verbose_flag(self, runner, image_file, tmp_path):
        source = image_file("png")

        result = runner.invoke(
            app, ["--verbose", str(source), str(tmp_path / "o.bmp"), "bmp"]
        )

        assert result.exit_code == 0
        assert "Image conversion successful!" in result.stdout

    @pytest.mark.skipif(not os.path.exists("/dev/full"), reason="needs /dev/full")
    def test_write_error_exits_with_encode_code(self, runner, image_file):
        source = image_file("png")

        result = runner.invoke(app, [str(source), "/dev/full", "png"])

        assert result.exit_code == 7
        assert "Input image format: png" in result.stdout
        assert "Error encoding image" in result.stdout
        assert os.path.exists("/dev/full")
