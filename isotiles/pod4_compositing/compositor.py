"""
Canvas Compositor - Assemble diamond tiles into one output image
"""

import io
import logging
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

from PIL import Image

from ..common.errors import CompositingError, EncodingError
from ..pod1_geometry.engine import GeometryEngine
from ..pod1_geometry.schemas import OutputFormat, TileGridConfig
from ..pod3_tiling.schemas import TileResult

logger = logging.getLogger(__name__)


class CanvasCompositor:
    """
    Places tiles row-major on a padded canvas and encodes the result
    """

    def __init__(self, config: Optional[TileGridConfig] = None):
        """
        Initialize compositor

        Args:
            config: Tile grid configuration (grid shape, padding, background, format)
        """
        self.config = config or TileGridConfig()
        self.geometry = GeometryEngine(self.config)

    def _check_uniform(self, tiles: Sequence[Image.Image]):
        """All tiles must share one size, placements are derived from it"""
        sizes = {tile.size for tile in tiles}
        if len(sizes) > 1:
            raise CompositingError(f"Tiles must have a uniform size, got {sorted(sizes)}")

    def composite(
        self,
        tiles: Sequence[Image.Image],
        base_tile_size: Tuple[int, int]
    ) -> Image.Image:
        """
        Composite tiles onto a blank canvas

        Args:
            tiles: RGBA tile images in layout order
            base_tile_size: Unscaled (width, height) of the extraction rectangles

        Returns:
            RGBA canvas
        """
        self._check_uniform(tiles)

        scaled_width, scaled_height = self.geometry.scaled_tile_size(*base_tile_size)
        output_width, output_height = self.geometry.calculate_output_size(scaled_width, scaled_height)
        if output_width <= 0 or output_height <= 0:
            raise EncodingError(f"Output canvas is empty: {output_width}x{output_height}")

        logger.info(f"Compositing {len(tiles)} tiles onto {output_width}x{output_height} canvas")
        canvas = Image.new("RGBA", (output_width, output_height), tuple(self.config.background))

        capacity = self.geometry.capacity
        for index, tile in enumerate(tiles):
            if index >= capacity:
                logger.warning(
                    f"Tile {index} has no cell in the {self.config.columns}x{self.config.rows} grid, skipping"
                )
                continue
            placement = self.geometry.placement_for(index, scaled_width, scaled_height)
            canvas.alpha_composite(tile.convert("RGBA"), dest=placement.dest)

        return canvas

    def composite_results(
        self,
        results: Sequence[TileResult],
        base_tile_size: Tuple[int, int]
    ) -> Image.Image:
        """Composite pipeline results, ordered by tile index"""
        ordered = sorted(results, key=lambda result: result.index)
        return self.composite([result.image for result in ordered], base_tile_size)

    def encode(self, canvas: Image.Image) -> bytes:
        """
        Encode the canvas in the configured output format

        Raises:
            EncodingError: If the encoder fails
        """
        output_format = self.config.output_format
        options = {}
        image = canvas

        if output_format == OutputFormat.JPG:
            image = canvas.convert("RGB")
            options["quality"] = self.config.quality
        elif output_format == OutputFormat.WEBP:
            options["quality"] = self.config.quality

        buffer = io.BytesIO()
        try:
            image.save(buffer, format=output_format.pillow_format, **options)
        except (OSError, ValueError, KeyError) as e:
            raise EncodingError(f"Failed to encode canvas as {output_format.value}: {e}") from e

        return buffer.getvalue()

    def save(self, canvas: Image.Image, output_path: Union[str, Path]) -> Path:
        """
        Encode the canvas and write it to disk

        Args:
            canvas: Composited canvas
            output_path: Destination file

        Returns:
            Path written
        """
        data = self.encode(canvas)
        path = Path(output_path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise EncodingError(f"Failed to write {path}: {e}") from e

        logger.info(f"Saved {len(data)} bytes to {path}")
        return path
