"""Durable storage for the tile catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from tile_mosaic.errors import CatalogParseError, StorageError
from tile_mosaic.models import Catalog

logger = logging.getLogger(__name__)


class CatalogStore(Protocol):
    """Loads and saves a whole :class:`Catalog` at once."""

    def load(self) -> Catalog:
        ...

    def save(self, catalog: Catalog) -> None:
        ...


class JsonCatalogStore:
    """Catalog persisted as a pretty-printed JSON document.

    A missing file is an empty catalog.  Saves write a sibling ``.tmp``
    file first and then replace the target, so the catalog on disk is
    always either the old or the new version.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> Catalog:
        if not self.path.exists():
            logger.debug("No catalog at %s, starting empty", self.path)
            return Catalog()

        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise StorageError(f"cannot read catalog {self.path}: {exc}") from exc

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CatalogParseError(f"catalog parse error in {self.path}: {exc}") from exc

        catalog = Catalog.from_dict(data)
        logger.debug("Loaded %d tile(s) from %s", len(catalog), self.path)
        return catalog

    def save(self, catalog: Catalog) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(
                json.dumps(catalog.to_dict(), indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
            tmp.replace(self.path)
        except OSError as exc:
            raise StorageError(f"cannot write catalog {self.path}: {exc}") from exc
        logger.debug("Saved %d tile(s) to %s", len(catalog), self.path)


class MemoryCatalogStore:
    """In-process store; ``load`` hands out copies so callers never share state."""

    def __init__(self, catalog: Catalog | None = None) -> None:
        self._catalog = Catalog(list(catalog.tiles)) if catalog else Catalog()
        self.saves = 0

    def load(self) -> Catalog:
        return Catalog(list(self._catalog.tiles))

    def save(self, catalog: Catalog) -> None:
        self._catalog = Catalog(list(catalog.tiles))
        self.saves += 1
