"""
End-to-end tests for the isometric cutter and command line entry points
"""

import logging

import numpy as np
import pytest
from PIL import Image

from isotiles.cli import crop_main, cut_main, parse_color, rotate_main
from isotiles.common.config import Settings
from isotiles.common.errors import ConfigurationError, SourceReadError
from isotiles.common.files import load_image
from isotiles.cutter import IsometricCutter, cut_isometric_tile
from isotiles.pod1_geometry import TileGridConfig


@pytest.fixture
def source_path(tmp_path):
    """Write a 300x150 isometric source"""
    ys, xs = np.indices((150, 300))
    pixels = np.zeros((150, 300, 4), dtype=np.uint8)
    pixels[..., 0] = xs % 256
    pixels[..., 1] = ys
    pixels[..., 3] = 255
    path = tmp_path / "tile.png"
    Image.fromarray(pixels).save(path)
    return path


class TestIsometricCutter:
    """Test the full cut pipeline"""

    def test_cut_to_png(self, source_path, tmp_path):
        """Test the default grid is written as one image"""
        output = tmp_path / "out" / "grid.png"
        result = cut_isometric_tile(source_path, output)

        assert output.exists()
        assert result.total_tiles == 9
        assert result.placeholder_count == 0
        assert result.base_tile_size == (100, 50)
        assert result.output_size == (300, 150)
        assert result.output_path == str(output)

        with Image.open(output) as grid:
            assert grid.size == (300, 150)
            assert grid.mode == "RGBA"
            # corner of the first cell is outside its diamond
            assert grid.getpixel((0, 0))[3] == 0
            assert grid.getpixel((50, 25))[3] == 255

    def test_cut_with_scale_padding_and_jpeg(self, source_path, tmp_path):
        """Test scaling, padding and lossy output"""
        output = tmp_path / "grid.jpg"
        result = cut_isometric_tile(
            source_path, output, scale=0.5, padding=3, output_format="jpg", quality=70
        )

        assert result.output_size == (50 * 3 + 6, 25 * 3 + 6)
        with Image.open(output) as grid:
            assert grid.format == "JPEG"
            assert grid.size == result.output_size

    def test_out_of_bounds_tiles_become_placeholders(self, source_path, tmp_path):
        """Test a grid shape that pushes rectangles off the source"""
        result = cut_isometric_tile(source_path, tmp_path / "grid.png", columns=2, rows=2)

        assert result.total_tiles == 9
        assert result.placeholder_count == 5
        assert [tile.index for tile in result.tiles if tile.is_placeholder] == [2, 5, 6, 7, 8]
        assert result.get_tile(2).is_placeholder
        assert result.get_tile(4).status == "completed"
        assert result.get_tile(9) is None
        assert result.output_size == (300, 150)

    def test_non_isometric_source_warns(self, tmp_path, caplog):
        """Test a source without 2:1 ratio is processed with a warning"""
        path = tmp_path / "square.png"
        Image.new("RGBA", (90, 90), (255, 255, 255, 255)).save(path)

        with caplog.at_level(logging.WARNING):
            result = cut_isometric_tile(path, tmp_path / "grid.png")

        assert "2:1 aspect ratio" in caplog.text
        assert result.output_size == (90, 90)

    def test_odd_base_size_rounds_half_up(self):
        """Test half pixel tile sizes round up on the canvas"""
        cutter = IsometricCutter(TileGridConfig(scale=0.5))
        try:
            canvas, result = cutter.cut(Image.new("RGBA", (510, 255), (0, 0, 255, 255)))
        finally:
            cutter.cleanup()

        assert result.base_tile_size == (170, 85)
        assert all(tile.size == (85, 43) for tile in result.tiles)
        assert canvas.size == (255, 129)

    def test_decompression_bomb_is_a_read_error(self, source_path, tmp_path, monkeypatch):
        """Test decoder limits surface as SourceReadError"""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        with pytest.raises(SourceReadError):
            load_image(source_path)
        with pytest.raises(SourceReadError):
            cut_isometric_tile(source_path, tmp_path / "grid.png")

    def test_missing_source(self, tmp_path):
        """Test unreadable sources are fatal"""
        with pytest.raises(SourceReadError):
            cut_isometric_tile(tmp_path / "missing.png", tmp_path / "grid.png")

    def test_invalid_config_before_io(self, tmp_path):
        """Test configuration errors are raised before reading the source"""
        with pytest.raises(ConfigurationError):
            cut_isometric_tile(tmp_path / "missing.png", tmp_path / "grid.png", columns=0)

    def test_cut_in_memory(self):
        """Test cutting a decoded image without touching the filesystem"""
        cutter = IsometricCutter(TileGridConfig(padding=2, background=(0, 0, 0, 255)))
        try:
            canvas, result = cutter.cut(Image.new("RGBA", (60, 30), (255, 0, 0, 255)))
        finally:
            cutter.cleanup()

        assert canvas.size == (20 * 3 + 4, 10 * 3 + 4)
        assert result.output_path is None
        assert canvas.getpixel((20, 0)) == (0, 0, 0, 255)


class TestCommandLine:
    """Test command line entry points"""

    @pytest.fixture(autouse=True)
    def restore_logging(self):
        """Entry points reconfigure the root logger"""
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_cut_main(self, source_path, tmp_path):
        """Test the cut command writes the grid"""
        output = tmp_path / "grid.webp"
        code = cut_main([
            str(source_path), str(output),
            "--format", "webp", "--quality", "80", "--padding", "2", "--no-progress"
        ])

        assert code == 0
        with Image.open(output) as grid:
            assert grid.format == "WEBP"
            assert grid.size == (304, 154)

    def test_cut_main_invalid_scale(self, source_path, tmp_path):
        """Test configuration errors exit with status 1"""
        code = cut_main([str(source_path), str(tmp_path / "grid.png"), "--scale", "0", "--no-progress"])
        assert code == 1

    def test_cut_main_oversized_source(self, source_path, tmp_path, monkeypatch):
        """Test decoder errors exit with status 1"""
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
        code = cut_main([str(source_path), str(tmp_path / "grid.png"), "--no-progress"])
        assert code == 1

    def test_crop_main_empty_directory(self, tmp_path):
        """Test a crop run without images exits with status 1"""
        (tmp_path / "in").mkdir()
        code = crop_main(["--input-dir", str(tmp_path / "in"), "--output-dir", str(tmp_path / "out"), "--no-progress"])
        assert code == 1

    def test_rotate_main_continues_past_failures(self, tmp_path):
        """Test per-file failures do not fail the rotate run"""
        input_dir = tmp_path / "in"
        input_dir.mkdir()
        (input_dir / "broken.png").write_bytes(b"nope")
        code = rotate_main(["--input-dir", str(input_dir), "--output-dir", str(tmp_path / "out"), "--no-progress"])
        assert code == 0

    def test_parse_color(self):
        """Test color parsing"""
        assert parse_color("1,2,3") == (1, 2, 3, 255)
        assert parse_color("1,2,3,0") == (1, 2, 3, 0)
        with pytest.raises(Exception):
            parse_color("red")


class TestSettings:
    """Test environment driven settings"""

    def test_defaults(self):
        """Test default settings"""
        config = Settings()
        assert config.grid_columns == 3
        assert config.mask_aspect_tolerance == 0.01
        assert ".png" in config.image_extensions

    def test_environment_override(self, monkeypatch):
        """Test environment variables override defaults"""
        monkeypatch.setenv("ISOTILES_MAX_WORKERS", "8")
        monkeypatch.setenv("ISOTILES_OUTPUT_FORMAT", "webp")
        config = Settings()
        assert config.max_workers == 8
        assert config.output_format == "webp"
