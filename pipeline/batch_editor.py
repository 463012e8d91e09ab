"""
Batch Editor Pipeline
Applies the same sequence of edits to every image of a gallery, in memory.
Saving is left to the caller so that only finished images hit the disk.
"""
from __future__ import annotations

import os
import uuid
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence
from tqdm import tqdm
from dotenv import load_dotenv

from models.raster_image import RasterImage
from services.image_service import ImageService
from services.image_processing_service import ImageProcessingService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Edited images output directory
EDITED_DIR = os.getenv("EDITED_DIR_PATH", "data/edited_gallery")
OUTPUT_EXT = os.getenv("OUTPUT_IMG_EXT", ".png")


@dataclass(frozen=True)
class EditStep:
    """One operation by command name, e.g. EditStep("blur", {"split_percentage": 50})."""
    operation: str
    arguments: Dict[str, Any] = field(default_factory=dict)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def edit_image(image: RasterImage, steps: Sequence[EditStep],
               processing: ImageProcessingService) -> RasterImage:
    """Run `steps` in order, each one feeding the next."""
    processing.image = image
    for step in steps:
        processing.image = processing.run(step.operation, **step.arguments)
    return processing.image


def edit_gallery(
    gallery: Iterable[RasterImage],
    steps: Sequence[EditStep],
    *,
    image_service: ImageService = None,
    edited_dir: str | Path = EDITED_DIR,
    ext: str = OUTPUT_EXT
) -> List[RasterImage]:
    """
    Apply the edit steps to every image of the gallery.

    Args:
        gallery: images to edit (any iterable, e.g. ImageService.stream_gallery)
        steps: operations to apply, in order
        image_service: service for image operations
        edited_dir: directory the edited images will be saved to
        ext: file extension for edited images

    Returns:
        List[RasterImage]: edited images with their output paths set
    """
    edited_dir = Path(edited_dir)
    edited_dir.mkdir(parents=True, exist_ok=True)
    processing = ImageProcessingService(image_service=image_service or ImageService())

    edited = []
    for image in tqdm(gallery, desc="edit", ncols=70):
        source = image.path
        # with no steps edit_image hands back the source image itself
        result = edit_image(image, steps, processing).copy()
        result.path = edited_dir / f"edited_{uuid.uuid1().hex}{ext}"
        logger.debug(f"Edited {source} -> {result.path.name}")
        edited.append(result)

    logger.info(f"Edited {len(edited)} images with {len(steps)} steps")
    return edited


def log_edit_results(edited_gallery: List[RasterImage]) -> None:
    """
    Log the edited image results.
    """
    if not edited_gallery:
        logger.info("No edited images to report.")
        return

    for i, img in enumerate(edited_gallery, 1):
        filename = Path(img.path).name if img.path else "Unknown"
        logger.info(f"{i}. {img.width}x{img.height} | File: {filename}")


def run_batch(
    gallery_dir: str | Path,
    steps: Sequence[EditStep],
    *,
    edited_dir: str | Path = EDITED_DIR,
    ext: str = OUTPUT_EXT
) -> List[Path]:
    """Load a folder, edit every image, save the results and report them."""
    configure_logging()
    image_service = ImageService()

    gallery = image_service.stream_gallery(gallery_dir)
    edited = edit_gallery(gallery, steps, image_service=image_service,
                          edited_dir=edited_dir, ext=ext)
    saved = image_service.save_gallery(edited)
    log_edit_results(edited)
    return saved
