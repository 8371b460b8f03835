"""
Schemas for geometry module
"""

from enum import Enum
from typing import Tuple
from pydantic import BaseModel, Field, ValidationError, validator

from ..common.errors import ConfigurationError


class OutputFormat(str, Enum):
    """Encodings supported for the composited canvas"""
    PNG = "png"
    JPG = "jpg"
    WEBP = "webp"

    @property
    def pillow_format(self) -> str:
        """Format name understood by Pillow"""
        return {"png": "PNG", "jpg": "JPEG", "webp": "WEBP"}[self.value]


class TileSlot(str, Enum):
    """Named positions of the staggered 1-2-3-2-1 diamond layout"""
    TOP = "top"
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM = "bottom"


class TileGridConfig(BaseModel):
    """Configuration for cutting an isometric tile into a diamond grid"""
    columns: int = Field(default=3, description="Number of columns the source is divided into")
    rows: int = Field(default=3, description="Number of rows the source is divided into")
    scale: float = Field(default=1.0, description="Scale factor for the output resolution")
    padding: int = Field(default=0, description="Padding between tiles in pixels")
    output_format: OutputFormat = Field(default=OutputFormat.PNG, description="Output format")
    quality: int = Field(default=90, description="Quality for jpg/webp output")
    background: Tuple[int, int, int, int] = Field(
        default=(0, 0, 0, 0),
        description="RGBA background of the output canvas"
    )

    class Config:
        frozen = True

    @validator('columns', 'rows')
    def validate_grid_dimension(cls, v):
        """Validate grid dimensions"""
        if v <= 0:
            raise ValueError(f"Grid dimensions must be positive: {v}")
        return v

    @validator('scale')
    def validate_scale(cls, v):
        """Validate scale factor"""
        if v <= 0:
            raise ValueError(f"Scale must be positive: {v}")
        return v

    @validator('padding')
    def validate_padding(cls, v):
        """Validate padding"""
        if v < 0:
            raise ValueError(f"Padding must not be negative: {v}")
        return v

    @validator('quality')
    def validate_quality(cls, v):
        """Validate encoder quality"""
        if not 0 <= v <= 100:
            raise ValueError(f"Quality must be between 0 and 100: {v}")
        return v

    @validator('background')
    def validate_background(cls, v):
        """Validate background color channels"""
        if any(not 0 <= channel <= 255 for channel in v):
            raise ValueError(f"Background channels must be between 0 and 255: {v}")
        return v

    @classmethod
    def build(cls, **values) -> "TileGridConfig":
        """
        Build a config, reporting invalid values as ConfigurationError

        Args:
            **values: Field overrides; None values fall back to defaults

        Returns:
            Validated TileGridConfig
        """
        values = {key: value for key, value in values.items() if value is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid tile grid configuration: {e}") from e


class SourceCanvas(BaseModel):
    """Dimensions of the decoded source image"""
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        """Width divided by height"""
        return self.width / self.height if self.height else 0.0

    @property
    def is_isometric(self) -> bool:
        """True isometric sources are exactly twice as wide as they are tall"""
        return self.width == self.height * 2


class ExtractionRect(BaseModel):
    """Integer rectangle cut out of the source canvas"""
    left: int
    top: int
    width: int
    height: int
    slot: TileSlot = TileSlot.CENTER

    class Config:
        frozen = True

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def box(self) -> Tuple[int, int, int, int]:
        """Pillow crop box (left, upper, right, lower)"""
        return (self.left, self.top, self.right, self.bottom)

    def fits_within(self, width: int, height: int) -> bool:
        """Check the rectangle is non-empty and inside a width x height canvas"""
        return (
            self.width > 0 and self.height > 0
            and self.left >= 0 and self.top >= 0
            and self.right <= width and self.bottom <= height
        )


class PlacementCoordinate(BaseModel):
    """Position of an output tile on the final canvas"""
    index: int
    row: int
    col: int
    x: int
    y: int

    @property
    def dest(self) -> Tuple[int, int]:
        return (self.x, self.y)
