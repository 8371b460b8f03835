"""
POD 2: Masking Module
Diamond stencils and alpha mask application
"""

from .mask import apply_mask, check_aspect_ratio, clip_to_mask, make_diamond_mask

__all__ = [
    "apply_mask",
    "check_aspect_ratio",
    "clip_to_mask",
    "make_diamond_mask"
]
