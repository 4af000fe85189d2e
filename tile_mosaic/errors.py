"""Error types raised by the mosaic core.

Every failure surfaced by a catalog or generation operation is a
:class:`MosaicError`, so front-ends can catch one type and report the
message verbatim.
"""

from __future__ import annotations


class MosaicError(Exception):
    """Base class for all tile-mosaic failures."""


class StorageError(MosaicError, OSError):
    """Filesystem access failed (missing file, permissions, write error)."""


class DecodeError(MosaicError):
    """An image could not be decoded."""


class CatalogParseError(MosaicError, ValueError):
    """The persisted catalog exists but its contents are malformed."""


class InvalidInputError(MosaicError, ValueError):
    """A request failed validation before or during an operation."""


class TileNotFoundError(MosaicError, LookupError):
    """No catalog tile carries the requested id."""

    def __init__(self, tile_id: str) -> None:
        super().__init__(f"catalog item not found: {tile_id}")
        self.tile_id = tile_id


class ConfigError(MosaicError):
    """The configuration file is missing or malformed."""
