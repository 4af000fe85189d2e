"""Image decoding, encoding, resizing and image-file discovery."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from typing import Protocol

import numpy as np
from PIL import Image

from tile_mosaic.config import MosaicConfig
from tile_mosaic.errors import DecodeError, StorageError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FORMAT = "PNG"


class ImageIO(Protocol):
    """Image codec used by the catalog and the compositor."""

    def read(self, path: str | Path) -> np.ndarray:
        """Decode *path* into an (H, W, 3) uint8 array."""
        ...

    def write_rgb(self, path: str | Path, array: np.ndarray) -> None:
        """Encode an (H, W, 3) uint8 array, format chosen from the extension."""
        ...


class PillowImageIO:
    """:class:`ImageIO` backed by Pillow."""

    def read(self, path: str | Path) -> np.ndarray:
        try:
            with Image.open(path) as img:
                rgb = img.convert("RGB")
        except (FileNotFoundError, IsADirectoryError, PermissionError) as exc:
            raise StorageError(f"cannot read {path}: {exc}") from exc
        except (OSError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"cannot decode {path}: {exc}") from exc
        logger.debug("Decoded %s (%dx%d)", path, rgb.width, rgb.height)
        return np.array(rgb, dtype=np.uint8)

    def write_rgb(self, path: str | Path, array: np.ndarray) -> None:
        path = Path(path)
        fmt = Image.registered_extensions().get(path.suffix.lower(), DEFAULT_OUTPUT_FORMAT)
        img = Image.fromarray(array.astype(np.uint8))
        try:
            img.save(path, format=fmt)
        except (OSError, KeyError, ValueError) as exc:
            raise StorageError(f"cannot write {path}: {exc}") from exc
        logger.debug("Encoded %s as %s", path, fmt)


def resize_exact(array: np.ndarray, size: int) -> np.ndarray:
    """Resize to exactly *size* x *size* with the bilinear (triangle) filter.

    Returns:
        (size, size, 3) uint8 array.
    """
    img = Image.fromarray(array.astype(np.uint8))
    img = img.resize((size, size), Image.BILINEAR)
    return np.array(img, dtype=np.uint8)


def is_image_path(path: str | Path) -> bool:
    return Path(path).suffix.lower() in MosaicConfig.SUPPORTED_EXTENSIONS


def iter_image_files(root: str | Path) -> Iterator[str]:
    """Yield image files under *root*, recursively.

    Paths are joined onto *root* exactly as given (``./tiles`` stays
    ``./tiles/...``).  Directories and file names are visited in sorted
    order, so the same tree always produces the same sequence.  A *root*
    that is itself an image file yields just that file.
    """
    root = os.fspath(root)
    if os.path.isfile(root):
        if is_image_path(root):
            yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            candidate = os.path.join(dirpath, name)
            if os.path.isfile(candidate) and is_image_path(candidate):
                yield candidate
