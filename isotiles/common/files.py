"""
Filesystem helpers: directory listings, decoding and writing images
"""

import io
import logging
from pathlib import Path
from typing import Iterable, List, Union

from PIL import Image

from .errors import EncodingError, SourceReadError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def list_images(directory: PathLike, extensions: Iterable[str]) -> List[Path]:
    """
    List files in a directory whose extension matches, sorted by name

    Args:
        directory: Directory to scan
        extensions: Accepted extensions such as ".png" (case-insensitive)

    Returns:
        Sorted list of file paths
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise SourceReadError(f"Input directory not found: {directory}")

    accepted = {ext.lower() if ext.startswith(".") else f".{ext.lower()}" for ext in extensions}
    return sorted(
        path for path in directory.iterdir()
        if path.is_file() and path.suffix.lower() in accepted
    )


def load_image(file_path: PathLike, mode: str = "RGBA") -> Image.Image:
    """
    Read and decode an image file

    Args:
        file_path: Path to image file (PNG, JPG, ...)
        mode: Mode the decoded image is converted to

    Returns:
        Fully loaded PIL image

    Raises:
        SourceReadError: If the file cannot be read or decoded, including
            decompression bomb and other decoder errors
    """
    path = Path(file_path)
    try:
        data = path.read_bytes()
        with Image.open(io.BytesIO(data)) as image:
            image.load()
            return image.convert(mode) if image.mode != mode else image.copy()
    except Exception as e:
        raise SourceReadError(f"Failed to load image {path}: {e}") from e


def save_image(image: Image.Image, output_path: PathLike, format: str = "PNG") -> Path:
    """
    Encode an image and write it, creating parent directories

    Raises:
        EncodingError: If encoding or writing fails
    """
    path = Path(output_path)
    buffer = io.BytesIO()
    # JPEG has no alpha channel
    if format == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")
    try:
        image.save(buffer, format=format)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(buffer.getvalue())
    except (OSError, ValueError, KeyError) as e:
        raise EncodingError(f"Failed to write {path}: {e}") from e
    return path


def format_for_path(path: PathLike) -> str:
    """Pillow format name matching a file extension, PNG when unknown"""
    extension = Path(path).suffix.lower()
    return Image.registered_extensions().get(extension, "PNG")
