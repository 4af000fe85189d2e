"""Catalog maintenance: add, list and remove tiles."""

from __future__ import annotations

import hashlib
import logging
import os
from pathlib import Path

from tile_mosaic.catalog_store import CatalogStore
from tile_mosaic.color_utils import average_color
from tile_mosaic.errors import InvalidInputError, TileNotFoundError
from tile_mosaic.image_io import ImageIO, is_image_path, iter_image_files
from tile_mosaic.models import Catalog, Tile

logger = logging.getLogger(__name__)


def tile_id_for_path(path: str | Path) -> str:
    """Deterministic id derived from the path string alone.

    The string is hashed as given: no resolving, no case folding, so
    ``a.png`` and ``./a.png`` are different tiles.
    """
    return hashlib.blake2b(str(path).encode("utf-8"), digest_size=32).hexdigest()


def collect_image_paths(path: str | Path) -> list[str]:
    """Resolve *path* to the image files it names.

    A file must carry a recognised image extension; a directory is
    searched recursively.  The returned strings keep *path* verbatim as
    their prefix, since tile ids are derived from them.
    """
    path = os.fspath(path)
    if os.path.isfile(path):
        if is_image_path(path):
            return [path]
        raise InvalidInputError("path is not an image file")
    if not os.path.isdir(path):
        raise InvalidInputError("path is not a file or directory")
    return list(iter_image_files(path))


def add_tiles(store: CatalogStore, image_io: ImageIO, path: str | Path) -> list[Tile]:
    """Fingerprint every image under *path* and add the new ones.

    All images are decoded before anything is saved; one failure leaves
    the stored catalog untouched.

    Returns:
        Tiles that were newly inserted.  Paths already present are skipped.
    """
    catalog = store.load()
    image_paths = collect_image_paths(path)
    if not image_paths:
        raise InvalidInputError("no image files found")

    added: list[Tile] = []
    for image_path in image_paths:
        image = image_io.read(image_path)
        tile = Tile(
            id=tile_id_for_path(image_path),
            path=str(image_path),
            avg_color=average_color(image),
        )
        if catalog.add_tile(tile):
            added.append(tile)
        else:
            logger.debug("Skipping duplicate %s", image_path)

    store.save(catalog)
    logger.info(
        "Added %d of %d image(s); catalog now holds %d tile(s)",
        len(added), len(image_paths), len(catalog),
    )
    return added


def list_tiles(store: CatalogStore) -> Catalog:
    return store.load()


def remove_tile(store: CatalogStore, tile_id: str) -> Tile:
    """Remove the tile whose id is exactly *tile_id*."""
    catalog = store.load()
    removed = catalog.remove_by_id(tile_id)
    if removed is None:
        raise TileNotFoundError(tile_id)
    store.save(catalog)
    logger.info("Removed tile %s (%s)", removed.id, removed.path)
    return removed
