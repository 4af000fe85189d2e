"""Catalog records and the request/result types of a mosaic run."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Union

import numpy as np

from tile_mosaic.color_utils import Color
from tile_mosaic.errors import CatalogParseError


@dataclass(frozen=True)
class Tile:
    """One catalog entry.

    Attributes:
        id:        Hex digest of the ``path`` string (not of the pixels).
        path:      Path of the source image, exactly as it was added.
        avg_color: Average colour of the full-resolution source image.
    """

    id: str
    path: str
    avg_color: Color

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "path": self.path, "avg_color": list(self.avg_color)}

    @classmethod
    def from_dict(cls, data: Any) -> Tile:
        if not isinstance(data, dict):
            raise CatalogParseError(f"tile record must be an object, got {type(data).__name__}")
        try:
            tile_id = data["id"]
            path = data["path"]
            color = data["avg_color"]
        except KeyError as exc:
            raise CatalogParseError(f"tile record is missing field {exc}") from exc

        if not isinstance(tile_id, str) or not isinstance(path, str):
            raise CatalogParseError("tile id and path must be strings")
        if (
            not isinstance(color, list)
            or len(color) != 3
            or not all(isinstance(c, int) and not isinstance(c, bool) for c in color)
            or not all(0 <= c <= 255 for c in color)
        ):
            raise CatalogParseError(
                f"avg_color of tile {tile_id} must be three integers in 0-255"
            )
        return cls(id=tile_id, path=path, avg_color=(color[0], color[1], color[2]))


@dataclass
class Catalog:
    """Ordered, deduplicated collection of tiles."""

    tiles: list[Tile] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.tiles)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self.tiles)

    def add_tile(self, tile: Tile) -> bool:
        """Append *tile* unless its id or its path is already present."""
        if any(t.id == tile.id or t.path == tile.path for t in self.tiles):
            return False
        self.tiles.append(tile)
        return True

    def remove_by_id(self, tile_id: str) -> Tile | None:
        for index, tile in enumerate(self.tiles):
            if tile.id == tile_id:
                return self.tiles.pop(index)
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"tiles": [t.to_dict() for t in self.tiles]}

    @classmethod
    def from_dict(cls, data: Any) -> Catalog:
        if not isinstance(data, dict):
            raise CatalogParseError("catalog document must be an object")
        if "tiles" not in data:
            raise CatalogParseError("catalog is missing field 'tiles'")
        tiles = data["tiles"]
        if not isinstance(tiles, list):
            raise CatalogParseError("catalog field 'tiles' must be a list")
        return cls(tiles=[Tile.from_dict(t) for t in tiles])


class _CatalogSource:
    """Marker selecting the persisted catalog as the tiles source."""

    _instance: _CatalogSource | None = None

    def __new__(cls) -> _CatalogSource:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CATALOG"


CATALOG: Final = _CatalogSource()

# Either the persisted catalog or an ad hoc directory of images.
TilesSource = Union[_CatalogSource, Path]


@dataclass
class TileImage:
    """A tile ready for compositing.

    ``pixels`` is a (tile_size, tile_size, 3) uint8 array; ``avg_color`` is
    the fingerprint of the original, un-resized image.
    """

    avg_color: Color
    pixels: np.ndarray


@dataclass(frozen=True)
class MosaicSpec:
    input_path: Path
    output_path: Path
    tile_size: int
    tiles_source: TilesSource = CATALOG


@dataclass(frozen=True)
class MosaicResult:
    """Outcome of one generation; grid dimensions are counted in cells."""

    output_path: Path
    tiles_used: int
    grid_width: int
    grid_height: int
