class ImagingError(Exception):
    """Base class for every failure raised by the imaging engine."""


class InvalidDimensionsError(ImagingError, ValueError):
    """Non-positive size, ragged grid, or images that must match but don't."""


class OutOfBoundsError(ImagingError, IndexError):
    """Pixel coordinate outside [0, width) x [0, height)."""


class InvalidParameterError(ImagingError, ValueError):
    """Operation argument outside its accepted range."""


class UnsupportedFormatError(ImagingError, ValueError):
    """No loader/saver is registered for the requested format."""
