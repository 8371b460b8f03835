"""
Schemas for tiling module
"""

from datetime import datetime
from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, Field, validator

from ..common.errors import TileErrorKind
from ..pod1_geometry.schemas import ExtractionRect, SourceCanvas, TileGridConfig


class TileResult(BaseModel):
    """A processed diamond tile"""
    index: int
    rect: ExtractionRect
    image: Any = Field(description="RGBA PIL image of the tile")
    status: str = "completed"
    error_kind: Optional[TileErrorKind] = None
    error_message: Optional[str] = None
    opaque_ratio: float = 0.0

    class Config:
        arbitrary_types_allowed = True

    @validator('status')
    def validate_status(cls, v):
        """Validate processing status"""
        valid_statuses = ['completed', 'placeholder']
        if v not in valid_statuses:
            raise ValueError(f"Invalid status: {v}")
        return v

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size

    @property
    def is_placeholder(self) -> bool:
        return self.status == "placeholder"


class TilingResult(BaseModel):
    """Result of cutting one source into diamond tiles"""
    source: SourceCanvas
    config: TileGridConfig
    tiles: List[TileResult]
    base_tile_size: Tuple[int, int]  # width, height
    output_size: Tuple[int, int] = (0, 0)  # width, height
    output_path: Optional[str] = None
    processing_time: float = 0.0  # seconds
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def total_tiles(self) -> int:
        return len(self.tiles)

    @property
    def placeholder_count(self) -> int:
        return sum(1 for tile in self.tiles if tile.is_placeholder)

    @property
    def grid_size(self) -> Tuple[int, int]:
        """Grid shape as (rows, cols)"""
        return self.config.rows, self.config.columns

    def get_tile(self, index: int) -> Optional[TileResult]:
        """Get tile by layout index"""
        for tile in self.tiles:
            if tile.index == index:
                return tile
        return None
