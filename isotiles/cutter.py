"""
Isometric Cutter - Cut an isometric tile into a diamond grid and save it as one image
"""

import logging
import time
from pathlib import Path
from typing import Optional, Tuple, Union

from PIL import Image

from .common.files import load_image
from .pod1_geometry.engine import GeometryEngine
from .pod1_geometry.schemas import SourceCanvas, TileGridConfig
from .pod3_tiling.pipeline import TilePipeline
from .pod3_tiling.schemas import TilingResult
from .pod4_compositing.compositor import CanvasCompositor

logger = logging.getLogger(__name__)


class IsometricCutter:
    """
    Runs geometry, tile pipeline and compositor for one source image
    """

    def __init__(
        self,
        config: Optional[TileGridConfig] = None,
        max_workers: Optional[int] = None
    ):
        """
        Initialize cutter

        Args:
            config: Tile grid configuration
            max_workers: Worker threads for the tile pipeline
        """
        self.config = config or TileGridConfig()
        self.geometry = GeometryEngine(self.config)
        self.pipeline = TilePipeline(self.config, max_workers=max_workers)
        self.compositor = CanvasCompositor(self.config)

    def cut(self, source: Image.Image) -> Tuple[Image.Image, TilingResult]:
        """
        Cut a decoded source into a composited diamond grid

        Args:
            source: Source image (RGBA)

        Returns:
            Tuple of (canvas, TilingResult)
        """
        start_time = time.time()
        canvas_info = SourceCanvas(width=source.width, height=source.height)

        if not canvas_info.is_isometric:
            logger.warning(
                f"Source doesn't have 2:1 aspect ratio ({source.width}x{source.height})"
            )
        logger.info(f"Original dimensions: {source.width}x{source.height}")

        rects = self.geometry.compute_extraction_rects(source.width, source.height)
        base_tile_size = self.geometry.calculate_base_tile_size(source.width, source.height)
        logger.info(f"Base tile dimensions: {base_tile_size[0]}x{base_tile_size[1]}")

        tiles = self.pipeline.process(source, rects)
        canvas = self.compositor.composite_results(tiles, base_tile_size)

        result = TilingResult(
            source=canvas_info,
            config=self.config,
            tiles=tiles,
            base_tile_size=base_tile_size,
            output_size=canvas.size,
            processing_time=time.time() - start_time
        )
        return canvas, result

    def cut_file(
        self,
        input_path: Union[str, Path],
        output_path: Union[str, Path]
    ) -> TilingResult:
        """
        Read a source file, cut it and write the encoded canvas

        Args:
            input_path: Source image
            output_path: Destination of the composited image

        Returns:
            TilingResult describing every tile
        """
        source = load_image(input_path)
        canvas, result = self.cut(source)
        written = self.compositor.save(canvas, output_path)
        result.output_path = str(written)

        logger.info(
            f"Successfully processed {input_path} and saved to {written} "
            f"({result.placeholder_count} placeholder tiles)"
        )
        return result

    def cleanup(self):
        """Cleanup resources"""
        self.pipeline.cleanup()


def cut_isometric_tile(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    config: Optional[TileGridConfig] = None,
    **options
) -> TilingResult:
    """
    Cut an isometric tile into a grid of diamond tiles and output a single image

    Args:
        input_path: Source image
        output_path: Output image
        config: Tile grid configuration; ``options`` build one when omitted
        **options: TileGridConfig fields (columns, rows, scale, ...)

    Returns:
        TilingResult
    """
    if config is None:
        config = TileGridConfig.build(**options)

    cutter = IsometricCutter(config)
    try:
        return cutter.cut_file(input_path, output_path)
    finally:
        cutter.cleanup()
