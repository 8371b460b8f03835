"""
Configuration management for isotiles
"""

import logging
from pathlib import Path
from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application settings"""

    # Tile grid defaults
    grid_columns: int = Field(
        default=3,
        description="Number of columns the source is divided into"
    )
    grid_rows: int = Field(
        default=3,
        description="Number of rows the source is divided into"
    )
    grid_scale: float = Field(
        default=1.0,
        description="Scale factor applied to every output tile"
    )
    grid_padding: int = Field(
        default=0,
        description="Padding between output tiles in pixels"
    )
    output_format: str = Field(
        default="png",
        description="Output format for composited images (png, jpg, webp)"
    )
    output_quality: int = Field(
        default=90,
        description="Encoder quality for jpg/webp output"
    )

    # Masking
    mask_aspect_tolerance: float = Field(
        default=0.01,
        description="Allowed aspect ratio difference between image and mask"
    )

    # Batch inputs
    image_extensions: List[str] = Field(
        default=[".jpg", ".jpeg", ".png", ".gif", ".webp"],
        description="Extensions picked up by the crop batch"
    )
    masks_dir: str = Field(
        default="masks",
        description="Directory holding mask images"
    )
    mask_output_dir: str = Field(
        default="output",
        description="Output directory for masked images"
    )
    path_tiles_output_dir: str = Field(
        default="path-tiles-output",
        description="Output directory for path tiles"
    )
    crop_input_dir: str = Field(
        default="images-to-crop",
        description="Input directory for center cropping"
    )
    crop_output_dir: str = Field(
        default="crop-result",
        description="Output directory for center cropping"
    )
    crop_percentage: float = Field(
        default=50.0,
        description="Share of the shorter side kept by center cropping"
    )
    rotate_input_dir: str = Field(
        default="preprocessed",
        description="Input directory for rotate and squish"
    )
    rotate_output_dir: str = Field(
        default="processed",
        description="Output directory for rotate and squish"
    )

    # Performance
    max_workers: int = Field(
        default=4,
        description="Maximum number of worker threads"
    )
    show_progress: bool = Field(
        default=True,
        description="Show tqdm progress bars"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Logging format"
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Log file path"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "ISOTILES_"
        case_sensitive = False


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure root logging from settings

    Args:
        verbose: Force DEBUG level

    Returns:
        Package logger
    """
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.INFO)
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if settings.log_file:
        log_path = Path(settings.log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        level=level,
        format=settings.log_format,
        handlers=handlers,
        force=True
    )

    return logging.getLogger("isotiles")


# Create global settings instance
settings = Settings()
