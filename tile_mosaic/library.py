"""Turn a tiles source into resized, fingerprinted tiles for compositing."""

from __future__ import annotations

import logging
import time
from pathlib import Path

from tile_mosaic.catalog_store import CatalogStore
from tile_mosaic.color_utils import average_color
from tile_mosaic.image_io import ImageIO, iter_image_files, resize_exact
from tile_mosaic.models import CATALOG, Catalog, TileImage, TilesSource

logger = logging.getLogger(__name__)


def tiles_from_catalog(
    catalog: Catalog,
    image_io: ImageIO,
    tile_size: int,
) -> list[TileImage]:
    """Resize every catalog tile, keeping its stored fingerprint."""
    tiles = []
    for tile in catalog:
        image = image_io.read(tile.path)
        tiles.append(TileImage(tile.avg_color, resize_exact(image, tile_size)))
    return tiles


def tiles_from_directory(
    root: Path,
    image_io: ImageIO,
    tile_size: int,
) -> list[TileImage]:
    """Fingerprint each image at full resolution, then resize it."""
    tiles = []
    for image_path in iter_image_files(root):
        image = image_io.read(image_path)
        tiles.append(TileImage(average_color(image), resize_exact(image, tile_size)))
    return tiles


def build_tile_library(
    source: TilesSource,
    store: CatalogStore,
    image_io: ImageIO,
    tile_size: int,
) -> list[TileImage]:
    """Resolve *source* into a tile library.

    The library may be empty; deciding whether that is acceptable is up
    to the caller.
    """
    t0 = time.perf_counter()
    if source is CATALOG:
        tiles = tiles_from_catalog(store.load(), image_io, tile_size)
        origin = "catalog"
    else:
        tiles = tiles_from_directory(Path(source), image_io, tile_size)
        origin = str(source)

    logger.info(
        "Library ready: %d tile(s) from %s at %dpx  (%.1f s)",
        len(tiles), origin, tile_size, time.perf_counter() - t0,
    )
    return tiles
