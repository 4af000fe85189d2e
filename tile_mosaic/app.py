"""Front-end façade: one catalog store and one image codec, four operations."""

from __future__ import annotations

from pathlib import Path

from tile_mosaic import catalog
from tile_mosaic.catalog_store import CatalogStore, JsonCatalogStore
from tile_mosaic.image_io import ImageIO, PillowImageIO
from tile_mosaic.models import Catalog, MosaicResult, MosaicSpec, Tile
from tile_mosaic.mosaic import generate_mosaic


class MosaicApp:
    def __init__(self, store: CatalogStore, image_io: ImageIO) -> None:
        self.store = store
        self.image_io = image_io

    @classmethod
    def from_catalog_path(cls, path: Path) -> MosaicApp:
        return cls(JsonCatalogStore(path), PillowImageIO())

    def catalog_add(self, path: str | Path) -> list[Tile]:
        return catalog.add_tiles(self.store, self.image_io, path)

    def catalog_list(self) -> Catalog:
        return catalog.list_tiles(self.store)

    def catalog_remove(self, tile_id: str) -> Tile:
        return catalog.remove_tile(self.store, tile_id)

    def generate(self, spec: MosaicSpec) -> MosaicResult:
        return generate_mosaic(spec, self.store, self.image_io)
