"""
POD 1: Geometry Module
Computes the staggered diamond layout and output canvas placement
"""

from .engine import GeometryEngine, compute_extraction_rects
from .schemas import (
    ExtractionRect,
    OutputFormat,
    PlacementCoordinate,
    SourceCanvas,
    TileGridConfig,
    TileSlot
)

__all__ = [
    "GeometryEngine",
    "compute_extraction_rects",
    "ExtractionRect",
    "OutputFormat",
    "PlacementCoordinate",
    "SourceCanvas",
    "TileGridConfig",
    "TileSlot"
]
