"""
Error hierarchy shared by all isotiles modules
"""

from enum import Enum
from typing import Optional, Tuple


class IsoTilesError(Exception):
    """Base class for all isotiles errors"""


class ConfigurationError(IsoTilesError, ValueError):
    """Invalid percentage, dimensions, columns, rows or other settings"""


class DimensionMismatchError(IsoTilesError, ValueError):
    """Aspect ratio of an image and its mask differ beyond tolerance"""

    def __init__(
        self,
        image_size: Tuple[int, int],
        mask_size: Tuple[int, int],
        tolerance: float
    ):
        self.image_size = image_size
        self.mask_size = mask_size
        self.image_ratio = image_size[0] / image_size[1]
        self.mask_ratio = mask_size[0] / mask_size[1]
        self.tolerance = tolerance
        super().__init__(
            f"Aspect ratio mismatch: Image ({image_size[0]}x{image_size[1]}, "
            f"ratio: {self.image_ratio:.3f}) vs Mask ({mask_size[0]}x{mask_size[1]}, "
            f"ratio: {self.mask_ratio:.3f})"
        )


class TileErrorKind(str, Enum):
    """Origin of a per-tile failure"""
    GEOMETRY = "geometry"
    IO = "io"
    CODEC = "codec"


class TileExtractionError(IsoTilesError):
    """Failure extracting, masking or resizing a single grid cell"""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        kind: TileErrorKind = TileErrorKind.CODEC
    ):
        self.index = index
        self.kind = kind
        super().__init__(message)


class SourceReadError(IsoTilesError, OSError):
    """Source file could not be read or decoded"""


class EncodingError(IsoTilesError):
    """Final canvas could not be encoded or written"""


class CompositingError(IsoTilesError):
    """Tiles handed to the compositor violate the uniform size invariant"""


def classify_tile_error(error: BaseException) -> TileErrorKind:
    """
    Map an exception raised while processing a tile to its error kind

    Args:
        error: Exception raised by the tile pipeline

    Returns:
        TileErrorKind tag used for logging and tile results
    """
    if isinstance(error, TileExtractionError):
        return error.kind
    if isinstance(error, (ConfigurationError, ValueError)):
        return TileErrorKind.GEOMETRY
    if isinstance(error, OSError):
        return TileErrorKind.IO
    return TileErrorKind.CODEC
