"""
Geometry Engine - Staggered isometric layout and canvas placement
"""

import logging
import math
from typing import List, Optional, Tuple

from .schemas import ExtractionRect, PlacementCoordinate, TileGridConfig, TileSlot

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up"""
    return math.floor(value + 0.5)


# Offsets of each slot in units of the base tile size, following the 5-row pattern:
#      1
#     1 1
#    1 1 1
#     1 1
#      1
STAGGERED_LAYOUT: List[Tuple[TileSlot, float, float]] = [
    (TileSlot.TOP, 1.0, 0.0),
    (TileSlot.TOP_LEFT, 0.5, 0.5),
    (TileSlot.TOP_RIGHT, 1.5, 0.5),
    (TileSlot.LEFT, 0.0, 1.0),
    (TileSlot.CENTER, 1.0, 1.0),
    (TileSlot.RIGHT, 2.0, 1.0),
    (TileSlot.BOTTOM_LEFT, 0.5, 1.5),
    (TileSlot.BOTTOM_RIGHT, 1.5, 1.5),
    (TileSlot.BOTTOM, 1.0, 2.0),
]


def compute_extraction_rects(
    canvas_width: int,
    canvas_height: int,
    columns: int = 3,
    rows: int = 3
) -> List[ExtractionRect]:
    """
    Compute the nine extraction rectangles of the staggered diamond layout

    Args:
        canvas_width: Source width in pixels
        canvas_height: Source height in pixels
        columns: Number of columns the source is divided into
        rows: Number of rows the source is divided into

    Returns:
        Rectangles in layout order (top, top-left, ..., bottom)
    """
    base_width = canvas_width // columns
    base_height = canvas_height // rows

    # Each coordinate is floored on its own
    return [
        ExtractionRect(
            left=math.floor(base_width * col_offset),
            top=math.floor(base_height * row_offset),
            width=base_width,
            height=base_height,
            slot=slot
        )
        for slot, col_offset, row_offset in STAGGERED_LAYOUT
    ]


class GeometryEngine:
    """
    Computes extraction rectangles, tile sizes and placements for a tile grid
    """

    def __init__(self, config: Optional[TileGridConfig] = None):
        """
        Initialize geometry engine

        Args:
            config: Tile grid configuration
        """
        self.config = config or TileGridConfig()

    def calculate_base_tile_size(
        self,
        canvas_width: int,
        canvas_height: int
    ) -> Tuple[int, int]:
        """
        Calculate base tile dimensions from the source size

        Returns:
            Tuple of (base_width, base_height)
        """
        return canvas_width // self.config.columns, canvas_height // self.config.rows

    def compute_extraction_rects(
        self,
        canvas_width: int,
        canvas_height: int
    ) -> List[ExtractionRect]:
        """Compute extraction rectangles for this engine's grid shape"""
        rects = compute_extraction_rects(
            canvas_width, canvas_height, self.config.columns, self.config.rows
        )
        base_width, base_height = rects[0].width, rects[0].height
        logger.debug(f"Base tile dimensions: {base_width}x{base_height}")

        if base_width <= 0 or base_height <= 0:
            logger.warning(
                f"Source {canvas_width}x{canvas_height} is too small for a "
                f"{self.config.columns}x{self.config.rows} grid"
            )
        return rects

    def scaled_tile_size(self, base_width: int, base_height: int) -> Tuple[int, int]:
        """Tile size on the output canvas after scaling"""
        return (
            round_half_up(base_width * self.config.scale),
            round_half_up(base_height * self.config.scale)
        )

    def target_tile_size(self, rect: ExtractionRect) -> Tuple[int, int]:
        """
        Size a tile is resized to: scaled width, proportional height

        Args:
            rect: Extraction rectangle of the tile

        Returns:
            Tuple of (width, height)
        """
        width = round_half_up(rect.width * self.config.scale)
        if rect.width <= 0:
            return width, round_half_up(rect.height * self.config.scale)
        height = max(1, round_half_up(rect.height * width / rect.width))
        return width, height

    def calculate_output_size(
        self,
        scaled_tile_width: int,
        scaled_tile_height: int
    ) -> Tuple[int, int]:
        """
        Calculate output canvas dimensions with padding

        Returns:
            Tuple of (width, height)
        """
        columns, rows, padding = self.config.columns, self.config.rows, self.config.padding
        width = scaled_tile_width * columns + padding * (columns - 1)
        height = scaled_tile_height * rows + padding * (rows - 1)
        return width, height

    def placement_for(
        self,
        index: int,
        scaled_tile_width: int,
        scaled_tile_height: int
    ) -> PlacementCoordinate:
        """Row-major placement of the tile at the given index"""
        col = index % self.config.columns
        row = index // self.config.columns
        return PlacementCoordinate(
            index=index,
            row=row,
            col=col,
            x=col * (scaled_tile_width + self.config.padding),
            y=row * (scaled_tile_height + self.config.padding)
        )

    def compute_placements(
        self,
        count: int,
        scaled_tile_width: int,
        scaled_tile_height: int
    ) -> List[PlacementCoordinate]:
        """Placements for the first ``count`` tiles"""
        return [
            self.placement_for(i, scaled_tile_width, scaled_tile_height)
            for i in range(count)
        ]

    @property
    def capacity(self) -> int:
        """Number of grid cells on the output canvas"""
        return self.config.columns * self.config.rows
