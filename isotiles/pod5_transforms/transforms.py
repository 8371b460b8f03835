"""
Single image transforms: center cropping and isometric projection
"""

import logging
import math

from PIL import Image

from ..common.errors import ConfigurationError

logger = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


def crop_center(image: Image.Image, percentage: float) -> Image.Image:
    """
    Crop a square from the center of the image

    Args:
        image: Input image
        percentage: Share of the shorter side to keep (0-100]

    Returns:
        Square crop
    """
    if percentage <= 0 or percentage > 100:
        raise ConfigurationError(f"Percentage must be between 0 and 100: {percentage}")

    width, height = image.size
    new_size = math.floor(min(width, height) * (percentage / 100))
    if new_size <= 0:
        raise ConfigurationError(
            f"Crop of {percentage}% leaves nothing of a {width}x{height} image"
        )

    left = (width - new_size) // 2
    top = (height - new_size) // 2
    return image.crop((left, top, left + new_size, top + new_size))


def rotate_and_squish(image: Image.Image) -> Image.Image:
    """
    Project a top-down image into isometric space

    Rotates 45 degrees clockwise on a transparent, expanded canvas and then
    squishes the result back to the input width at half that height.

    Args:
        image: Input image

    Returns:
        RGBA image of size (w, floor(w / 2)) where w is the input width
    """
    with_alpha = image.convert("RGBA") if image.mode != "RGBA" else image

    # PIL rotates counter-clockwise for positive angles
    rotated = with_alpha.rotate(
        -45,
        resample=Image.Resampling.BICUBIC,
        expand=True,
        fillcolor=TRANSPARENT
    )

    width = image.width
    height = max(1, width // 2)
    logger.debug(f"Rotated {image.width}x{image.height} to {rotated.width}x{rotated.height}, squishing to {width}x{height}")
    return rotated.resize((width, height), Image.Resampling.LANCZOS)
