"""
Batch runners looping the transforms over directories of images
"""

import logging
import time
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from PIL import Image
from tqdm import tqdm

from .schemas import BatchReport
from .transforms import crop_center, rotate_and_squish
from ..common.config import settings
from ..common.errors import ConfigurationError
from ..common.files import format_for_path, list_images, load_image, save_image
from ..pod2_masking.mask import apply_mask

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
MASK_EXTENSIONS = [".png"]


def _mask_batch(
    task: str,
    image_path: PathLike,
    masks_dir: PathLike,
    output_dir: PathLike,
    post_process: Optional[Callable[[Image.Image], Image.Image]] = None,
    tolerance: Optional[float] = None
) -> BatchReport:
    """Apply every mask in a directory to one image; any failure aborts the batch"""
    start_time = time.time()
    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    image_path = Path(image_path)
    image = load_image(image_path)
    mask_files = list_images(masks_dir, MASK_EXTENSIONS)
    logger.info(f"Found {len(mask_files)} masks to apply")

    report = BatchReport(task=task)
    for mask_file in tqdm(mask_files, desc=task, disable=not settings.show_progress):
        logger.info(f"Processing with mask: {mask_file.name}...")

        mask = load_image(mask_file, mode="L")
        result = apply_mask(image, mask, tolerance)
        if post_process is not None:
            result = post_process(result)

        output_path = out_dir / f"{image_path.stem}_{mask_file.name}"
        save_image(result, output_path, format="PNG")
        report.processed.append(str(output_path))
        logger.info(f"Saved {output_path.name}")

    report.processing_time = time.time() - start_time
    logger.info(f"All {len(report.processed)} masks processed in {report.processing_time:.2f}s")
    return report


def apply_masks(
    image_path: PathLike,
    masks_dir: Optional[PathLike] = None,
    output_dir: Optional[PathLike] = None,
    tolerance: Optional[float] = None
) -> BatchReport:
    """
    Apply each PNG mask in ``masks_dir`` to one image

    Outputs are named ``<image stem>_<mask file name>``.

    Args:
        image_path: Image to mask
        masks_dir: Directory of masks (default from settings)
        output_dir: Output directory (default from settings)
        tolerance: Allowed aspect ratio difference

    Returns:
        BatchReport listing written files
    """
    return _mask_batch(
        "apply_masks",
        image_path,
        masks_dir or settings.masks_dir,
        output_dir or settings.mask_output_dir,
        tolerance=tolerance
    )


def create_path_tiles(
    image_path: PathLike,
    masks_dir: Optional[PathLike] = None,
    output_dir: Optional[PathLike] = None,
    tolerance: Optional[float] = None
) -> BatchReport:
    """Mask an image with every mask, then rotate and squish each result"""
    return _mask_batch(
        "create_path_tiles",
        image_path,
        masks_dir or settings.masks_dir,
        output_dir or settings.path_tiles_output_dir,
        post_process=rotate_and_squish,
        tolerance=tolerance
    )


def crop_directory(
    input_dir: Optional[PathLike] = None,
    output_dir: Optional[PathLike] = None,
    percentage: Optional[float] = None,
    extensions: Optional[Iterable[str]] = None
) -> BatchReport:
    """
    Center-crop every image in a directory

    Args:
        input_dir: Directory of images (default from settings)
        output_dir: Output directory, files keep their names
        percentage: Share of the shorter side to keep
        extensions: Accepted extensions (default from settings)

    Returns:
        BatchReport listing written files
    """
    start_time = time.time()
    percentage = settings.crop_percentage if percentage is None else percentage
    if percentage <= 0 or percentage > 100:
        raise ConfigurationError(f"Percentage must be between 0 and 100: {percentage}")

    in_dir = Path(input_dir or settings.crop_input_dir)
    out_dir = Path(output_dir or settings.crop_output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    image_files = list_images(in_dir, extensions or settings.image_extensions)
    if not image_files:
        raise ConfigurationError(f"No image files found in {in_dir}")

    logger.info(f"Found {len(image_files)} images to process")

    report = BatchReport(task="crop_center")
    for image_file in tqdm(image_files, desc="Cropping", disable=not settings.show_progress):
        logger.info(f"Processing: {image_file.name}")
        image = load_image(image_file)
        cropped = crop_center(image, percentage)

        output_path = out_dir / image_file.name
        save_image(cropped, output_path, format=format_for_path(output_path))
        report.processed.append(str(output_path))
        logger.info(f"Saved: {image_file.name}")

    report.processing_time = time.time() - start_time
    logger.info(f"All images processed successfully, results saved to {out_dir.resolve()}")
    return report


def rotate_directory(
    input_dir: Optional[PathLike] = None,
    output_dir: Optional[PathLike] = None
) -> BatchReport:
    """
    Rotate and squish every PNG in a directory

    A file that fails is logged and recorded; the loop moves on to the next one.

    Args:
        input_dir: Directory of PNGs (default from settings)
        output_dir: Output directory, files keep their names

    Returns:
        BatchReport with processed and failed files
    """
    start_time = time.time()
    in_dir = Path(input_dir or settings.rotate_input_dir)
    out_dir = Path(output_dir or settings.rotate_output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    png_files = list_images(in_dir, [".png"])
    logger.info(f"Found {len(png_files)} files to process")

    report = BatchReport(task="rotate_and_squish")
    for png_file in tqdm(png_files, desc="Rotating", disable=not settings.show_progress):
        logger.info(f"Processing {png_file.name}...")
        try:
            image = load_image(png_file)
            processed = rotate_and_squish(image)
            output_path = save_image(processed, out_dir / png_file.name, format="PNG")
        except Exception as e:
            logger.error(f"Error processing {png_file.name}: {e}")
            report.failed.append((png_file.name, str(e)))
            continue

        report.processed.append(str(output_path))
        logger.info(f"Completed processing {png_file.name}")

    report.processing_time = time.time() - start_time
    logger.info(
        f"Processed {len(report.processed)} files, {len(report.failed)} failed "
        f"in {report.processing_time:.2f}s"
    )
    return report
