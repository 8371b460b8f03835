"""
Mask generation and application
"""

import logging
from typing import Optional

import numpy as np
from PIL import Image, ImageChops

from ..common.config import settings
from ..common.errors import ConfigurationError, DimensionMismatchError

logger = logging.getLogger(__name__)


def make_diamond_mask(width: int, height: int) -> Image.Image:
    """
    Create a diamond stencil for isometric tiles

    A pixel is 255 when its center lies strictly inside the diamond
    (w/2, 0), (w, h/2), (w/2, h), (0, h/2) and 0 otherwise. Corner pixels are
    transparent and the center pixel is opaque for any size of at least 3x3.

    Args:
        width: Mask width in pixels
        height: Mask height in pixels

    Returns:
        Single channel ("L") mask image
    """
    if width <= 0 or height <= 0:
        raise ConfigurationError(f"Mask dimensions must be positive: {width}x{height}")

    # |x + 0.5 - w/2| / (w/2) + |y + 0.5 - h/2| / (h/2) < 1, scaled to integers
    ys, xs = np.ogrid[:height, :width]
    inside = (
        np.abs(2 * xs + 1 - width) * height
        + np.abs(2 * ys + 1 - height) * width
    ) < width * height

    return Image.fromarray(np.where(inside, 255, 0).astype(np.uint8))


def clip_to_mask(image: Image.Image, mask: Image.Image) -> Image.Image:
    """
    Keep the image only where the mask is opaque

    Result alpha is the product of the image alpha and the mask, so pixels
    that were already transparent stay transparent.

    Args:
        image: Image to clip
        mask: Single channel mask of the same size

    Returns:
        RGBA image
    """
    if image.size != mask.size:
        raise ValueError(f"Mask size {mask.size} does not match image size {image.size}")

    clipped = image.convert("RGBA")
    alpha = ImageChops.multiply(clipped.getchannel("A"), mask.convert("L"))
    clipped.putalpha(alpha)
    return clipped


def check_aspect_ratio(
    image: Image.Image,
    mask: Image.Image,
    tolerance: Optional[float] = None
):
    """
    Raise DimensionMismatchError when image and mask ratios differ beyond tolerance

    Args:
        image: Image to be masked
        mask: Mask image
        tolerance: Allowed absolute difference of width/height ratios
    """
    tolerance = settings.mask_aspect_tolerance if tolerance is None else tolerance

    if not image.width or not image.height or not mask.width or not mask.height:
        raise ConfigurationError("Could not determine dimensions")

    image_ratio = image.width / image.height
    mask_ratio = mask.width / mask.height
    if abs(image_ratio - mask_ratio) > tolerance:
        raise DimensionMismatchError(image.size, mask.size, tolerance)


def apply_mask(
    image: Image.Image,
    mask: Image.Image,
    tolerance: Optional[float] = None
) -> Image.Image:
    """
    Apply a mask to an image: white areas show the image, black areas become transparent

    Args:
        image: Input image
        mask: Mask image, any size with the same aspect ratio
        tolerance: Allowed aspect ratio difference (default from settings)

    Returns:
        RGBA image whose alpha channel is the grayscale mask
    """
    check_aspect_ratio(image, mask, tolerance)

    processed_mask = mask.convert("L")
    if processed_mask.size != image.size:
        processed_mask = processed_mask.resize(image.size, Image.Resampling.LANCZOS)

    # The mask replaces any alpha the image had
    result = image.convert("RGB").convert("RGBA")
    result.putalpha(processed_mask)

    logger.debug(f"Applied {mask.width}x{mask.height} mask to {image.width}x{image.height} image")
    return result
