"""
Unit tests for transforms and batch runners (POD5)
"""

from pathlib import Path

import pytest
from PIL import Image

from isotiles.common.errors import ConfigurationError, DimensionMismatchError, SourceReadError
from isotiles.pod5_transforms import (
    apply_masks,
    create_path_tiles,
    crop_center,
    crop_directory,
    rotate_and_squish,
    rotate_directory
)


class TestCropCenter:
    """Test center cropping"""

    @pytest.fixture
    def image(self):
        """Create 200x100 image with a marked center"""
        image = Image.new("RGB", (200, 100), (0, 0, 0))
        image.paste((255, 0, 0), (75, 25, 125, 75))
        return image

    def test_half_crop(self, image):
        """Test a 50% crop keeps the centered square"""
        cropped = crop_center(image, 50)
        assert cropped.size == (50, 50)
        assert cropped.getpixel((0, 0)) == (255, 0, 0)
        assert cropped.getpixel((49, 49)) == (255, 0, 0)

    def test_full_crop(self, image):
        """Test 100% keeps the shorter side"""
        cropped = crop_center(image, 100)
        assert cropped.size == (100, 100)

    def test_size_is_floored(self):
        """Test odd sizes are floored"""
        cropped = crop_center(Image.new("RGB", (101, 101)), 33)
        assert cropped.size == (33, 33)

    @pytest.mark.parametrize("percentage", [0, -5, 100.5, 150])
    def test_invalid_percentage(self, image, percentage):
        """Test percentages outside (0, 100] are rejected"""
        with pytest.raises(ConfigurationError):
            crop_center(image, percentage)


class TestRotateAndSquish:
    """Test isometric projection"""

    def test_output_keeps_input_width(self):
        """Test the rotated image is squished to the input width and half of it"""
        result = rotate_and_squish(Image.new("RGB", (100, 100), (0, 200, 0)))

        assert result.mode == "RGBA"
        assert result.size == (100, 50)

    @pytest.mark.parametrize("size,expected", [((64, 64), (64, 32)), ((81, 40), (81, 40)), ((1, 1), (1, 1))])
    def test_output_size(self, size, expected):
        """Test output size is (w, floor(w / 2)), at least one pixel high"""
        assert rotate_and_squish(Image.new("RGBA", size, (5, 5, 5, 255))).size == expected

    def test_corners_are_transparent(self):
        """Test the expanded area is filled with transparency"""
        result = rotate_and_squish(Image.new("RGBA", (64, 64), (200, 0, 0, 255)))

        assert result.getpixel((0, 0))[3] == 0
        assert result.getpixel((result.width - 1, result.height - 1))[3] == 0
        assert result.getpixel((result.width // 2, result.height // 2))[3] == 255


class TestMaskBatches:
    """Test apply_masks and create_path_tiles"""

    @pytest.fixture
    def workspace(self, tmp_path):
        """Create an image and a masks directory"""
        image_path = tmp_path / "image-to-mask.png"
        Image.new("RGB", (100, 50), (10, 20, 30)).save(image_path)

        masks_dir = tmp_path / "masks"
        masks_dir.mkdir()
        Image.new("L", (50, 25), 255).save(masks_dir / "b_full.png")
        left = Image.new("L", (100, 50), 0)
        left.paste(255, (0, 0, 50, 50))
        left.save(masks_dir / "a_left.png")
        (masks_dir / "notes.txt").write_text("not a mask")

        return tmp_path, image_path, masks_dir

    def test_apply_masks(self, workspace):
        """Test one output per mask, named after image and mask"""
        tmp_path, image_path, masks_dir = workspace
        output_dir = tmp_path / "output"

        report = apply_masks(image_path, masks_dir, output_dir)

        assert [Path(p).name for p in report.processed] == [
            "image-to-mask_a_left.png",
            "image-to-mask_b_full.png"
        ]
        with Image.open(output_dir / "image-to-mask_a_left.png") as result:
            assert result.mode == "RGBA"
            assert result.getpixel((10, 25))[3] == 255
            assert result.getpixel((90, 25))[3] == 0

    def test_mismatched_mask_aborts(self, workspace):
        """Test an aspect mismatch stops the batch"""
        tmp_path, image_path, masks_dir = workspace
        Image.new("L", (50, 50), 255).save(masks_dir / "c_square.png")

        with pytest.raises(DimensionMismatchError):
            apply_masks(image_path, masks_dir, tmp_path / "output")

    def test_create_path_tiles(self, workspace):
        """Test masked results are rotated and squished"""
        tmp_path, image_path, masks_dir = workspace
        output_dir = tmp_path / "path-tiles-output"

        report = create_path_tiles(image_path, masks_dir, output_dir)

        assert len(report.processed) == 2
        with Image.open(output_dir / "image-to-mask_b_full.png") as result:
            assert result.height == result.width // 2

    def test_missing_image(self, workspace):
        """Test a missing source is reported"""
        tmp_path, _, masks_dir = workspace
        with pytest.raises(SourceReadError):
            apply_masks(tmp_path / "missing.png", masks_dir, tmp_path / "output")


class TestCropDirectory:
    """Test the center crop batch"""

    def test_crops_every_image(self, tmp_path):
        """Test images are cropped and keep their names"""
        input_dir = tmp_path / "images-to-crop"
        input_dir.mkdir()
        Image.new("RGB", (200, 100), (1, 2, 3)).save(input_dir / "wide.PNG")
        Image.new("RGB", (80, 120), (4, 5, 6)).save(input_dir / "tall.jpg")
        (input_dir / "readme.md").write_text("skip me")

        output_dir = tmp_path / "crop-result"
        report = crop_directory(input_dir, output_dir, 50)

        assert len(report.processed) == 2
        with Image.open(output_dir / "wide.PNG") as wide:
            assert wide.size == (50, 50)
        with Image.open(output_dir / "tall.jpg") as tall:
            assert tall.size == (40, 40)
            assert tall.format == "JPEG"

    def test_empty_directory(self, tmp_path):
        """Test a directory without images is an error"""
        (tmp_path / "empty").mkdir()
        with pytest.raises(ConfigurationError):
            crop_directory(tmp_path / "empty", tmp_path / "out", 50)

    def test_invalid_percentage_before_io(self, tmp_path):
        """Test the percentage is validated before touching the filesystem"""
        with pytest.raises(ConfigurationError):
            crop_directory(tmp_path / "missing", tmp_path / "out", 0)
        assert not (tmp_path / "out").exists()


class TestRotateDirectory:
    """Test the rotate and squish batch"""

    def test_failures_do_not_stop_the_batch(self, tmp_path):
        """Test a broken file is recorded and the next one processed"""
        input_dir = tmp_path / "preprocessed"
        input_dir.mkdir()
        (input_dir / "a_broken.png").write_bytes(b"not a png")
        Image.new("RGBA", (40, 40), (0, 0, 255, 255)).save(input_dir / "b_ok.png")

        output_dir = tmp_path / "processed"
        report = rotate_directory(input_dir, output_dir)

        assert report.failed[0][0] == "a_broken.png"
        assert len(report.processed) == 1
        assert not report.succeeded
        assert report.total == 2
        assert (output_dir / "b_ok.png").exists()

    def test_missing_directory(self, tmp_path):
        """Test a missing input directory is reported"""
        with pytest.raises(SourceReadError):
            rotate_directory(tmp_path / "missing", tmp_path / "processed")
