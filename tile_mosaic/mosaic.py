"""Grid partitioning, nearest-colour tile selection and canvas assembly."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

import numpy as np

from tile_mosaic.catalog_store import CatalogStore
from tile_mosaic.color_utils import Color, average_color, color_distances
from tile_mosaic.errors import InvalidInputError, StorageError
from tile_mosaic.image_io import ImageIO
from tile_mosaic.library import build_tile_library
from tile_mosaic.models import MosaicResult, MosaicSpec, TileImage

logger = logging.getLogger(__name__)


def grid_size(width: int, height: int, tile_size: int) -> tuple[int, int]:
    """Whole cells that fit in a *width* x *height* image; remainders are dropped."""
    return width // tile_size, height // tile_size


def best_tile_index(colors: np.ndarray, target: Color) -> int:
    """Index of the tile colour closest to *target*.

    Ties go to the lowest index, i.e. the first such tile in library order.
    """
    return int(np.argmin(color_distances(colors, target)))


def blit_tile(canvas: np.ndarray, tile: np.ndarray, x: int, y: int) -> None:
    """Copy *tile* into *canvas* with its top-left corner at pixel (x, y)."""
    h, w = tile.shape[:2]
    canvas[y:y + h, x:x + w] = tile


def compose(
    image: np.ndarray,
    tiles: Sequence[TileImage],
    tile_size: int,
) -> np.ndarray:
    """Replace every grid cell of *image* with its best-matching tile.

    Args:
        image:     (H, W, 3) uint8 source image.
        tiles:     Non-empty tile library, each tile (tile_size, tile_size, 3).
        tile_size: Cell edge in pixels.

    Returns:
        (grid_h * tile_size, grid_w * tile_size, 3) uint8 canvas.
    """
    grid_w, grid_h = grid_size(image.shape[1], image.shape[0], tile_size)
    canvas = np.zeros((grid_h * tile_size, grid_w * tile_size, 3), dtype=np.uint8)
    colors = np.array([t.avg_color for t in tiles], dtype=np.int64).reshape(-1, 3)

    for cy in range(grid_h):
        for cx in range(grid_w):
            x = cx * tile_size
            y = cy * tile_size
            region = image[y:y + tile_size, x:x + tile_size]
            best = tiles[best_tile_index(colors, average_color(region))]
            blit_tile(canvas, best.pixels, x, y)
    return canvas


def generate_mosaic(
    spec: MosaicSpec,
    store: CatalogStore,
    image_io: ImageIO,
) -> MosaicResult:
    """Build the mosaic described by *spec* and write it to disk.

    The output file is written only once the whole canvas is assembled.
    """
    if spec.tile_size <= 0:
        raise InvalidInputError("tile size must be greater than zero")

    image = image_io.read(spec.input_path)
    height, width = image.shape[:2]
    grid_w, grid_h = grid_size(width, height, spec.tile_size)
    if grid_w == 0 or grid_h == 0:
        raise InvalidInputError("input image is smaller than the tile size")

    tiles = build_tile_library(spec.tiles_source, store, image_io, spec.tile_size)
    if not tiles:
        raise InvalidInputError("no tiles available for mosaic generation")

    logger.info(
        "Compositing %dx%d grid (%d cells) from %d tile(s) …",
        grid_w, grid_h, grid_w * grid_h, len(tiles),
    )
    t0 = time.perf_counter()
    canvas = compose(image, tiles, spec.tile_size)
    logger.info("Canvas ready  (%.1f s)", time.perf_counter() - t0)

    try:
        spec.output_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageError(f"cannot create {spec.output_path.parent}: {exc}") from exc
    image_io.write_rgb(spec.output_path, canvas)
    logger.info("Wrote %s", spec.output_path)

    return MosaicResult(
        output_path=spec.output_path,
        tiles_used=len(tiles),
        grid_width=grid_w,
        grid_height=grid_h,
    )
