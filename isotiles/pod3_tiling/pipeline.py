"""
Tile Pipeline - Extract, mask and resize each diamond tile
"""

import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence

import numpy as np
from PIL import Image
from tqdm import tqdm

from .schemas import TileResult
from ..common.config import settings
from ..common.errors import TileErrorKind, TileExtractionError, classify_tile_error
from ..pod1_geometry.engine import GeometryEngine
from ..pod1_geometry.schemas import ExtractionRect, TileGridConfig
from ..pod2_masking.mask import clip_to_mask, make_diamond_mask

logger = logging.getLogger(__name__)


def opaque_ratio(image: Image.Image) -> float:
    """Share of pixels with non-zero alpha"""
    if image.width == 0 or image.height == 0:
        return 0.0
    alpha = np.asarray(image.getchannel("A"))
    return float(np.count_nonzero(alpha)) / alpha.size


class TilePipeline:
    """
    Turns extraction rectangles into diamond tiles
    Runs one task per rectangle and keeps results in index order
    """

    def __init__(
        self,
        config: Optional[TileGridConfig] = None,
        max_workers: Optional[int] = None
    ):
        """
        Initialize tile pipeline

        Args:
            config: Tile grid configuration
            max_workers: Worker threads (default from settings)
        """
        self.config = config or TileGridConfig()
        self.geometry = GeometryEngine(self.config)
        self._executor = ThreadPoolExecutor(max_workers=max_workers or settings.max_workers)

    def _extract(
        self,
        source: Image.Image,
        rect: ExtractionRect,
        index: int
    ) -> Image.Image:
        """
        Cut the rectangle out of the source

        Raises:
            TileExtractionError: If the rectangle is empty or leaves the source bounds
        """
        if not rect.fits_within(source.width, source.height):
            raise TileExtractionError(
                f"Rectangle {rect.box} lies outside source bounds {source.size}",
                index=index,
                kind=TileErrorKind.GEOMETRY
            )
        return source.crop(rect.box)

    def _resize(self, tile: Image.Image, rect: ExtractionRect) -> Image.Image:
        """Resize to the scaled width with proportional height, keeping alpha"""
        target = self.geometry.target_tile_size(rect)
        if tile.size != target:
            tile = tile.resize(target, Image.Resampling.LANCZOS)
        if tile.mode != "RGBA":
            tile = tile.convert("RGBA")
        return tile

    def create_placeholder(self, rect: ExtractionRect) -> Image.Image:
        """Fully transparent tile at the scaled target size of the rectangle"""
        return Image.new("RGBA", self.geometry.target_tile_size(rect), (0, 0, 0, 0))

    def process_tile(
        self,
        source: Image.Image,
        rect: ExtractionRect,
        index: int
    ) -> TileResult:
        """
        Extract, mask and resize a single tile

        Any failure is logged with its error kind and replaced by a
        transparent placeholder so the grid layout is preserved.

        Args:
            source: Loaded source image
            rect: Extraction rectangle
            index: Position of the rectangle in the layout

        Returns:
            TileResult for this index
        """
        logger.debug(f"Extracting tile {index} ({rect.slot.value}) using rectangle {rect.box}")

        try:
            mask = make_diamond_mask(rect.width, rect.height)
            extracted = self._extract(source, rect, index)
            masked = clip_to_mask(extracted, mask)
            tile = self._resize(masked, rect)
        except Exception as e:
            kind = classify_tile_error(e)
            logger.error(f"Error processing tile {index} [{kind.value}]: {e}")
            placeholder = self.create_placeholder(rect)
            return TileResult(
                index=index,
                rect=rect,
                image=placeholder,
                status="placeholder",
                error_kind=kind,
                error_message=str(e)
            )

        return TileResult(
            index=index,
            rect=rect,
            image=tile,
            opaque_ratio=opaque_ratio(tile)
        )

    async def process_async(
        self,
        source: Image.Image,
        rects: Sequence[ExtractionRect]
    ) -> List[TileResult]:
        """
        Process all rectangles concurrently

        Args:
            source: Source image, read only for every task
            rects: Extraction rectangles in layout order

        Returns:
            Tile results in the same order as ``rects``
        """
        # Tasks share the source, so decode it once up front
        source.load()
        loop = asyncio.get_running_loop()

        with tqdm(total=len(rects), desc="Tiling", disable=not settings.show_progress) as pbar:
            async def run(index: int, rect: ExtractionRect) -> TileResult:
                result = await loop.run_in_executor(
                    self._executor,
                    self.process_tile,
                    source,
                    rect,
                    index
                )
                pbar.update(1)
                return result

            results = await asyncio.gather(
                *(run(index, rect) for index, rect in enumerate(rects))
            )

        placeholders = sum(1 for result in results if result.is_placeholder)
        logger.info(f"Created {len(results)} diamond tiles ({placeholders} placeholders)")
        return list(results)

    def process(
        self,
        source: Image.Image,
        rects: Sequence[ExtractionRect]
    ) -> List[TileResult]:
        """Synchronous wrapper around process_async"""
        return asyncio.run(self.process_async(source, rects))

    def cleanup(self):
        """Cleanup resources"""
        self._executor.shutdown(wait=True)
