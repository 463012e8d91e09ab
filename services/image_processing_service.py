from __future__ import annotations
from pathlib import Path
from typing import Optional, Tuple, Union
import logging

from models.errors import InvalidParameterError
from models.filters import Filter
from models.raster_image import RasterImage
from models.split_region import Percentage
from services.compression_service import CompressionService
from services.filter_service import FilterService
from services.histogram_service import HistogramService
from services.image_service import ImageService
from services.tonal_service import TonalService
from services.transform_service import TransformService

logger = logging.getLogger(__name__)


class ImageProcessingService:
    """
    Holds one current image and exposes every engine operation on it.

    Flips, brighten, RGB combine and compression replace the held image;
    everything else returns a new RasterImage and leaves the held one alone.
    """

    def __init__(self,
                 image: RasterImage = None,
                 image_service: ImageService = None):
        self._image = image
        self.image_service = image_service or ImageService()
        self.filter_service = FilterService()
        self.transform_service = TransformService()
        self.histogram_service = HistogramService()
        self.tonal_service = TonalService(self.histogram_service)
        self.compression_service = CompressionService()

        # command name -> bound method, for scripted use
        self._operations = {
            "horizontal-flip": self.flip_horizontal,
            "vertical-flip": self.flip_vertical,
            "brighten": self.brighten,
            "compress": self.compress_by_percentage,
            "color-correct": self.color_correct,
            "levels-adjust": self.levels_adjust,
            "downscale": self.downscale,
            "histogram": self.histogram,
        }

    # ─── Current image ───────────────────────────────────────────────
    @property
    def image(self) -> RasterImage:
        if self._image is None:
            raise InvalidParameterError("No image loaded")
        return self._image

    @image.setter
    def image(self, image: RasterImage) -> None:
        self._image = image

    def load_image(self, path: Union[str, Path]) -> RasterImage:
        self._image = self.image_service.load(path)
        return self._image

    def save_image(self, path: Union[str, Path], fmt: str = None) -> Path:
        return self.image_service.save(self.image, path, fmt)

    def _replace(self, result: RasterImage) -> RasterImage:
        result.path = self.image.path
        self._image = result
        return result

    # ─── In-place operations ─────────────────────────────────────────
    def flip_horizontal(self) -> RasterImage:
        return self._replace(self.transform_service.flip_horizontal(self.image))

    def flip_vertical(self) -> RasterImage:
        return self._replace(self.transform_service.flip_vertical(self.image))

    def brighten(self, factor: int) -> RasterImage:
        return self._replace(self.transform_service.brighten(self.image, factor))

    def rgb_combine(self, red: RasterImage, green: RasterImage, blue: RasterImage) -> RasterImage:
        self._image = self.transform_service.rgb_combine(red, green, blue)
        return self._image

    def compress_image(self, threshold: float) -> RasterImage:
        return self._replace(self.compression_service.compress_image(self.image, threshold))

    def compress_by_percentage(self, percentage: Percentage) -> RasterImage:
        return self._replace(self.compression_service.compress_by_percentage(self.image, percentage))

    # ─── Operations returning new images ─────────────────────────────
    def rgb_split(self) -> Tuple[RasterImage, RasterImage, RasterImage]:
        return self.transform_service.rgb_split(self.image)

    def apply_filter(self, image_filter: Union[Filter, str],
                     split_percentage: Optional[Percentage] = None) -> RasterImage:
        return self.filter_service.apply_filter(self.image, image_filter, split_percentage)

    def apply_partial_filter(self, original: RasterImage, filtered: RasterImage,
                             mask: RasterImage) -> RasterImage:
        return self.filter_service.apply_partial_filter(original, filtered, mask)

    def color_correct(self, split_percentage: Optional[Percentage] = None) -> RasterImage:
        return self.tonal_service.color_correct(self.image, split_percentage)

    def levels_adjust(self, b: int, m: int, w: int,
                      split_percentage: Optional[Percentage] = None) -> RasterImage:
        return self.tonal_service.levels_adjust(self.image, b, m, w, split_percentage)

    def downscale(self, target_width: int, target_height: int) -> RasterImage:
        return self.transform_service.downscale(self.image, target_width, target_height)

    def histogram(self) -> RasterImage:
        return self.histogram_service.render_histogram(self.image)

    # ─── Scripted dispatch ───────────────────────────────────────────
    def run(self, operation: str, **kwargs) -> RasterImage:
        """
        Run an operation by its command name.
        Filter names (blur, sepia, ...) accept `split_percentage`.
        """
        logger.debug(f"Running {operation} with {kwargs}")
        if operation in self._operations:
            return self._operations[operation](**kwargs)
        if operation in self.filter_service.filters:
            return self.apply_filter(operation, **kwargs)
        raise InvalidParameterError(f"Unknown operation {operation!r}")
