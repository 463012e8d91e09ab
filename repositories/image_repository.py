from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, List, Iterator
import logging
import os
import signal
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from models.errors import InvalidParameterError, UnsupportedFormatError
from models.raster_image import RasterImage

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

CODEC_FORMATS = {"png": "PNG", "jpg": "JPEG", "jpeg": "JPEG"}
PPM_FORMAT = "ppm"


class ImageRepository:
    """
    Handles file I/O for RasterImage entities.
    PPM is read/written as plain text here, everything else goes through the
    raster codecs (OpenCV to decode, Pillow to encode).
    """
    def __init__(self):
        # Load as set
        self.VALID_EXTS = {
            ext.strip().lower()
            for ext in os.getenv("VALID_IMAGE_EXTENSIONS", ".ppm,.png,.jpg,.jpeg").split(",")
            if ext.strip()
        }
        self.load_timeout = int(os.getenv("IMAGE_LOAD_TIMEOUT", "5"))

    # ─── Load ────────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> RasterImage:
        path = Path(path)
        if path.suffix.lower() == f".{PPM_FORMAT}":
            if not path.is_file():
                raise FileNotFoundError(f"Image not found or unreadable: {path}")
            try:
                text = path.read_text(encoding="ascii")
            except UnicodeDecodeError as err:
                raise InvalidParameterError(f"Invalid PPM data in {path}: {err}") from err
            image = self.from_ppm_text(text)
            image.path = path
            return image
        return self._load_codec(path, timeout=self.load_timeout)

    @staticmethod
    def _load_codec(path: Path, timeout: int = 5) -> RasterImage:
        # ─── timeout wrapper (5 s default) ────────────────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"cv2.imread timed-out after {timeout}s: {path}")

        previous = signal.signal(signal.SIGALRM, _handler)
        signal.alarm(timeout)
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
        finally:
            signal.alarm(0)  # always disarm
            signal.signal(signal.SIGALRM, previous)
        # ──────────────────────────────────────────────────────────────────

        if arr_bgr is None:
            raise FileNotFoundError(f"Image not found or unreadable: {path}")

        return RasterImage(pixels=arr_bgr[:, :, ::-1], path=path)

    # ─── Save ────────────────────────────────────────────────────────
    def save(self, image: RasterImage, path: Union[str, Path] = None, fmt: str = None) -> Path:
        """
        Write `image` to `path` (defaults to image.path) in `fmt`
        (defaults to the path suffix).
        """
        path = Path(path) if path is not None else image.path
        if path is None:
            raise InvalidParameterError("No destination path given and image has no path")
        fmt = (fmt or path.suffix.lstrip(".")).lower()

        if fmt == PPM_FORMAT:
            path.write_text(self.to_ppm_text(image), encoding="ascii")
        elif fmt in CODEC_FORMATS:
            PILImage.fromarray(image.to_uint8()).save(path, format=CODEC_FORMATS[fmt])
        else:
            raise UnsupportedFormatError(f"Unsupported file format: {fmt!r}")
        logger.debug(f"Saved {image} as {fmt} to {path}")
        return path

    # ─── Plain-text formats ──────────────────────────────────────────
    @staticmethod
    def _body(image: RasterImage) -> List[str]:
        return [" ".join(str(int(v)) for v in row.ravel()) for row in image.pixels]

    @classmethod
    def to_grid_text(cls, image: RasterImage) -> str:
        """`W H` then one line of R G B triples per image row."""
        return "\n".join([f"{image.width} {image.height}", *cls._body(image)]) + "\n"

    @classmethod
    def to_ppm_text(cls, image: RasterImage) -> str:
        return "\n".join(["P3", f"{image.width} {image.height}", "255", *cls._body(image)]) + "\n"

    @staticmethod
    def _tokens(text: str) -> List[str]:
        tokens = []
        for line in text.splitlines():
            tokens.extend(line.split("#", 1)[0].split())
        return tokens

    @staticmethod
    def _parse_body(tokens: List[str], what: str) -> RasterImage:
        try:
            width, height = int(tokens[0]), int(tokens[1])
            values = [int(t) for t in tokens[2:]]
        except (IndexError, ValueError) as err:
            raise InvalidParameterError(f"Malformed {what}: {err}") from err
        if len(values) != width * height * 3:
            raise InvalidParameterError(
                f"Malformed {what}: expected {width * height * 3} channel values, got {len(values)}")
        try:
            return RasterImage.from_triples(width, height, values)
        except OverflowError as err:
            raise InvalidParameterError(f"Malformed {what}: {err}") from err

    @classmethod
    def from_grid_text(cls, text: str) -> RasterImage:
        return cls._parse_body(cls._tokens(text), "raster grid")

    @classmethod
    def from_ppm_text(cls, text: str) -> RasterImage:
        tokens = cls._tokens(text)
        if not tokens or tokens[0] != "P3":
            raise InvalidParameterError("Invalid PPM data: missing P3 header")
        # drop the max value, channels are stored as read
        body = tokens[1:3] + tokens[4:]
        return cls._parse_body(body, "PPM data")

    # ─── Galleries ───────────────────────────────────────────────────
    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[RasterImage]:
        """
        Yield RasterImage objects one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            if not p.is_file():
                logger.debug(f"Skipping because not file: {p}")
                continue
            try:
                image = self.load(p)
            except (OSError, ValueError) as err:
                logger.warning(f"Skipping {p.name}: {err}")
                continue
            logger.debug(f"Loaded: {p}")
            yield image

    def load_dir(
        self, folder: Union[str, Path], *, recursive=False, exts=None
    ) -> List[RasterImage]:
        """
        Helper that still returns a list, but internally streams.
        """
        return list(self.iter_dir(folder, recursive=recursive, exts=exts))
