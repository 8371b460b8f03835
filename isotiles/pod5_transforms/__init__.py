"""
POD 5: Transforms Module
Center cropping, isometric projection and the batch runners around them
"""

from .batch import apply_masks, create_path_tiles, crop_directory, rotate_directory
from .schemas import BatchReport
from .transforms import crop_center, rotate_and_squish

__all__ = [
    "apply_masks",
    "create_path_tiles",
    "crop_directory",
    "rotate_directory",
    "BatchReport",
    "crop_center",
    "rotate_and_squish"
]
