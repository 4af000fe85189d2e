"""
Tile Mosaic
===========

Rebuild any image out of other images: the source is cut into a grid of
square cells and every cell is replaced by the tile whose average colour
is closest.  Tiles come from either

- a **catalog** of fingerprinted images persisted between runs, or
- an ad hoc **directory** scanned for each run.
"""

__version__ = "1.0.0"

from tile_mosaic.app import MosaicApp
from tile_mosaic.catalog import add_tiles, list_tiles, remove_tile, tile_id_for_path
from tile_mosaic.catalog_store import JsonCatalogStore, MemoryCatalogStore
from tile_mosaic.color_utils import average_color, color_distance
from tile_mosaic.config import MosaicConfig, load_config
from tile_mosaic.errors import (
    CatalogParseError,
    ConfigError,
    DecodeError,
    InvalidInputError,
    MosaicError,
    StorageError,
    TileNotFoundError,
)
from tile_mosaic.image_io import PillowImageIO
from tile_mosaic.library import build_tile_library
from tile_mosaic.models import CATALOG, Catalog, MosaicResult, MosaicSpec, Tile, TileImage
from tile_mosaic.mosaic import generate_mosaic

__all__ = [
    "CATALOG",
    "Catalog",
    "CatalogParseError",
    "ConfigError",
    "DecodeError",
    "InvalidInputError",
    "JsonCatalogStore",
    "MemoryCatalogStore",
    "MosaicApp",
    "MosaicConfig",
    "MosaicError",
    "MosaicResult",
    "MosaicSpec",
    "PillowImageIO",
    "StorageError",
    "Tile",
    "TileImage",
    "TileNotFoundError",
    "add_tiles",
    "average_color",
    "build_tile_library",
    "color_distance",
    "generate_mosaic",
    "list_tiles",
    "load_config",
    "remove_tile",
    "tile_id_for_path",
]
