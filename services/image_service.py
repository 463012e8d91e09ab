from pathlib import Path
from typing import Iterable, List, Union, Iterator
import os
import logging
from dotenv import load_dotenv

from models.raster_image import RasterImage
from repositories.image_repository import ImageRepository

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers.  No pixel math here."""
    def __init__(self):
        self.DEFAULT_SAVE_FORMAT = os.getenv("DEFAULT_SAVE_FORMAT", "png").lower()
        self.image_repository = ImageRepository()

    def load(self, path: Union[str, Path]) -> RasterImage:
        """Load a single image from disk into a RasterImage object."""
        image = self.image_repository.load(path)
        logger.info(f"Loaded {image.width}x{image.height} image from {path}")
        return image

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] = None,
    ) -> Iterator[RasterImage]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)

    def save(self, image: RasterImage, path: Union[str, Path] = None, fmt: str = None) -> Path:
        """
        Business-level method to save the image.
        The format falls back to the path suffix, then to DEFAULT_SAVE_FORMAT.
        """
        target = Path(path) if path is not None else image.path
        if fmt is None and target is not None and not target.suffix:
            fmt = self.DEFAULT_SAVE_FORMAT
        saved = self.image_repository.save(image, target, fmt)
        logger.info(f"Saved {image.width}x{image.height} image to {saved}")
        return saved

    # save_gallery can accept *any* iterable
    def save_gallery(self, gallery: Iterable[RasterImage]) -> List[Path]:
        return [self.save(img) for img in gallery]

    def to_grid_text(self, img: RasterImage) -> str:
        return self.image_repository.to_grid_text(img)

    def from_grid_text(self, text: str) -> RasterImage:
        return self.image_repository.from_grid_text(text)
