from __future__ import annotations
from typing import Dict, Optional, Union
import logging
import numpy as np

from models.errors import InvalidDimensionsError, InvalidParameterError
from models.filters import Filter, ALL_FILTERS
from models.raster_image import RasterImage
from models.split_region import Percentage

logger = logging.getLogger(__name__)


class FilterService:
    """
    Business logic layer for filters.
    Resolves filters by command name and composes filtered output through a mask.
    """

    def __init__(self):
        self.filters: Dict[str, Filter] = {cls.name: cls() for cls in ALL_FILTERS}

    def available_filters(self):
        return sorted(self.filters)

    def get_filter(self, name: str) -> Filter:
        try:
            return self.filters[name]
        except KeyError:
            raise InvalidParameterError(
                f"Unknown filter {name!r}; expected one of {', '.join(self.available_filters())}"
            ) from None

    def apply_filter(
            self,
            image: RasterImage,
            image_filter: Union[Filter, str],
            split_percentage: Optional[Percentage] = None,
    ) -> RasterImage:
        if isinstance(image_filter, str):
            image_filter = self.get_filter(image_filter)
        logger.debug(f"Applying {image_filter!r} split={split_percentage}")
        return image_filter.apply(image, split_percentage)

    @staticmethod
    def apply_partial_filter(original: RasterImage, filtered: RasterImage, mask: RasterImage) -> RasterImage:
        """
        Take `filtered` wherever `mask` is pure white (255, 255, 255) and
        `original` everywhere else. No blending at mask edges.
        """
        if not (original.same_size(filtered) and original.same_size(mask)):
            raise InvalidDimensionsError(
                "All images (original, filter, mask) must have the same dimensions: "
                f"{original.size}, {filtered.size}, {mask.size}")
        white = np.all(mask.pixels == 255, axis=2)
        return RasterImage(np.where(white[..., np.newaxis], filtered.pixels, original.pixels))
