"""
POD 3: Tiling Module
Cuts diamond tiles out of an isometric source
"""

from .pipeline import TilePipeline
from .schemas import TileResult, TilingResult

__all__ = [
    "TilePipeline",
    "TileResult",
    "TilingResult"
]
