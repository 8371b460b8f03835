"""
Command line entry points for the isotiles tools
"""

import argparse
import logging
import sys
from typing import List, Optional, Tuple

from .common.config import settings, setup_logging
from .common.errors import IsoTilesError
from .cutter import cut_isometric_tile
from .pod1_geometry.schemas import OutputFormat
from .pod5_transforms.batch import apply_masks, create_path_tiles, crop_directory, rotate_directory

logger = logging.getLogger(__name__)


def parse_color(value: str) -> Tuple[int, int, int, int]:
    """Parse ``r,g,b[,a]`` into an RGBA tuple"""
    try:
        channels = [int(part) for part in value.split(",")]
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid color: {value}")
    if len(channels) == 3:
        channels.append(255)
    if len(channels) != 4:
        raise argparse.ArgumentTypeError(f"Color needs 3 or 4 channels: {value}")
    return tuple(channels)


def _add_common_arguments(parser: argparse.ArgumentParser):
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable debug logging'
    )
    parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bars'
    )


def _run(args: argparse.Namespace, task) -> int:
    """Configure logging, run a task and map fatal errors to exit status 1"""
    setup_logging(verbose=args.verbose)
    if args.no_progress:
        settings.show_progress = False

    try:
        task()
    except (IsoTilesError, OSError) as e:
        logger.error(f"Error processing images: {e}")
        return 1
    return 0


def cut_main(argv: Optional[List[str]] = None) -> int:
    """Cut an isometric tile into a diamond grid"""
    parser = argparse.ArgumentParser(
        description="Cut an isometric tile into a staggered grid of diamond tiles"
    )
    parser.add_argument("input", help="Source image (2:1 isometric tile)")
    parser.add_argument("output", help="Output image path")
    parser.add_argument("--columns", type=int, default=settings.grid_columns, help="Grid columns (default: %(default)s)")
    parser.add_argument("--rows", type=int, default=settings.grid_rows, help="Grid rows (default: %(default)s)")
    parser.add_argument("--scale", type=float, default=settings.grid_scale, help="Tile scale factor (default: %(default)s)")
    parser.add_argument("--padding", type=int, default=settings.grid_padding, help="Padding between tiles in pixels (default: %(default)s)")
    parser.add_argument(
        "--format",
        dest="output_format",
        choices=[fmt.value for fmt in OutputFormat],
        default=settings.output_format,
        help="Output format (default: %(default)s)"
    )
    parser.add_argument("--quality", type=int, default=settings.output_quality, help="jpg/webp quality (default: %(default)s)")
    parser.add_argument(
        "--background",
        type=parse_color,
        default=(0, 0, 0, 0),
        help="Background color as r,g,b[,a] (default: transparent)"
    )
    _add_common_arguments(parser)
    args = parser.parse_args(argv)

    def task():
        result = cut_isometric_tile(
            args.input,
            args.output,
            columns=args.columns,
            rows=args.rows,
            scale=args.scale,
            padding=args.padding,
            output_format=args.output_format,
            quality=args.quality,
            background=args.background
        )
        print(
            f"Wrote {result.output_size[0]}x{result.output_size[1]} grid of "
            f"{result.total_tiles} tiles to {result.output_path}"
        )

    return _run(args, task)


def mask_main(argv: Optional[List[str]] = None) -> int:
    """Apply every mask in a directory to one image"""
    parser = argparse.ArgumentParser(description="Apply alpha masks to an image")
    parser.add_argument("input", help="Image to mask")
    parser.add_argument("--masks-dir", default=settings.masks_dir, help="Directory of PNG masks (default: %(default)s)")
    parser.add_argument("--output-dir", default=settings.mask_output_dir, help="Output directory (default: %(default)s)")
    parser.add_argument("--tolerance", type=float, default=settings.mask_aspect_tolerance, help="Aspect ratio tolerance (default: %(default)s)")
    _add_common_arguments(parser)
    args = parser.parse_args(argv)

    return _run(args, lambda: apply_masks(args.input, args.masks_dir, args.output_dir, args.tolerance))


def path_tiles_main(argv: Optional[List[str]] = None) -> int:
    """Mask an image with every mask and project the results isometrically"""
    parser = argparse.ArgumentParser(description="Create isometric path tiles from masks")
    parser.add_argument("input", help="Image to mask")
    parser.add_argument("--masks-dir", default=settings.masks_dir, help="Directory of PNG masks (default: %(default)s)")
    parser.add_argument("--output-dir", default=settings.path_tiles_output_dir, help="Output directory (default: %(default)s)")
    parser.add_argument("--tolerance", type=float, default=settings.mask_aspect_tolerance, help="Aspect ratio tolerance (default: %(default)s)")
    _add_common_arguments(parser)
    args = parser.parse_args(argv)

    return _run(args, lambda: create_path_tiles(args.input, args.masks_dir, args.output_dir, args.tolerance))


def crop_main(argv: Optional[List[str]] = None) -> int:
    """Center-crop every image in a directory"""
    parser = argparse.ArgumentParser(description="Crop centered squares from a directory of images")
    parser.add_argument("--input-dir", default=settings.crop_input_dir, help="Input directory (default: %(default)s)")
    parser.add_argument("--output-dir", default=settings.crop_output_dir, help="Output directory (default: %(default)s)")
    parser.add_argument("--percentage", type=float, default=settings.crop_percentage, help="Share of the shorter side to keep (default: %(default)s)")
    _add_common_arguments(parser)
    args = parser.parse_args(argv)

    return _run(args, lambda: crop_directory(args.input_dir, args.output_dir, args.percentage))


def rotate_main(argv: Optional[List[str]] = None) -> int:
    """Rotate and squish every PNG in a directory"""
    parser = argparse.ArgumentParser(description="Rotate and squish images into an isometric projection")
    parser.add_argument("--input-dir", default=settings.rotate_input_dir, help="Input directory (default: %(default)s)")
    parser.add_argument("--output-dir", default=settings.rotate_output_dir, help="Output directory (default: %(default)s)")
    _add_common_arguments(parser)
    args = parser.parse_args(argv)

    def task():
        report = rotate_directory(args.input_dir, args.output_dir)
        if not report.succeeded:
            for name, error in report.failed:
                logger.warning(f"Skipped {name}: {error}")

    return _run(args, task)


if __name__ == "__main__":
    sys.exit(cut_main())
