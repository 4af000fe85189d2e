"""Centralised configuration via a frozen dataclass, loadable from TOML."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import typer

from tile_mosaic.errors import ConfigError, InvalidInputError
from tile_mosaic.models import CATALOG, MosaicSpec, TilesSource

APP_NAME = "tile-mosaic"
CATALOG_FILENAME = "catalog.json"


@dataclass(frozen=True)
class MosaicConfig:
    """Defaults for catalog maintenance and mosaic generation.

    Attributes:
        catalog_path:      Catalog file (None = per-user application dir).
        default_tile_size: Tile edge in pixels when nothing more specific is given.
        input_path:        Default source image for ``generate``.
        output_path:       Default output image for ``generate``.
        tiles:             Default tiles source: ``"catalog"`` or a directory.
        tile_size:         Default tile edge for ``generate``; beats *default_tile_size*.
    """

    catalog_path: Path | None = None
    default_tile_size: int = 32

    # [generate] table
    input_path: Path | None = None
    output_path: Path | None = None
    tiles: str | None = None
    tile_size: int | None = None

    SUPPORTED_EXTENSIONS: frozenset[str] = frozenset(
        {".png", ".jpg", ".jpeg", ".bmp", ".gif"}
    )

    def resolved_catalog_path(self) -> Path:
        return self.catalog_path if self.catalog_path is not None else default_catalog_path()


def default_catalog_path() -> Path:
    """``catalog.json`` inside the per-user application directory."""
    return Path(typer.get_app_dir(APP_NAME)) / CATALOG_FILENAME


def _optional(table: dict[str, Any], key: str, kind: type) -> Any:
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ConfigError(f"config key '{key}' must be a {kind.__name__}")
    return value


def _optional_path(table: dict[str, Any], key: str) -> Path | None:
    value = _optional(table, key, str)
    return Path(value) if value is not None else None


def load_config(path: Path | None) -> MosaicConfig:
    """Read a TOML config file.

    ``None`` gives the built-in defaults.  An explicit path that does not
    exist is an error rather than a silent fallback.

    Example::

        catalog_path = "~/mosaic/catalog.json"
        default_tile_size = 24

        [generate]
        input = "photo.jpg"
        output = "mosaic.png"
        tiles = "catalog"
        tile_size = 16
    """
    if path is None:
        return MosaicConfig()
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")

    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"config parse error: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"cannot read config {path}: {exc}") from exc

    generate = data.get("generate", {})
    if not isinstance(generate, dict):
        raise ConfigError("config key 'generate' must be a table")

    catalog_path = _optional_path(data, "catalog_path")
    default_tile_size = _optional(data, "default_tile_size", int)

    return MosaicConfig(
        catalog_path=catalog_path.expanduser() if catalog_path else None,
        default_tile_size=default_tile_size if default_tile_size is not None else 32,
        input_path=_optional_path(generate, "input"),
        output_path=_optional_path(generate, "output"),
        tiles=_optional(generate, "tiles", str),
        tile_size=_optional(generate, "tile_size", int),
    )


def resolve_tiles_source(value: str | None) -> TilesSource:
    """``None`` or ``"catalog"`` (any case) select the catalog; anything else is a directory."""
    if value is None or value.strip().lower() == "catalog":
        return CATALOG
    return Path(value)


def build_mosaic_spec(
    cfg: MosaicConfig,
    input_path: Path | None = None,
    output_path: Path | None = None,
    tiles: str | None = None,
    tile_size: int | None = None,
) -> MosaicSpec:
    """Merge explicit arguments over the configured defaults."""
    input_path = input_path or cfg.input_path
    if input_path is None:
        raise InvalidInputError("input image is required")

    output_path = output_path or cfg.output_path
    if output_path is None:
        raise InvalidInputError("output path is required")

    if tile_size is None:
        tile_size = cfg.tile_size if cfg.tile_size is not None else cfg.default_tile_size

    return MosaicSpec(
        input_path=input_path,
        output_path=output_path,
        tile_size=tile_size,
        tiles_source=resolve_tiles_source(tiles if tiles is not None else cfg.tiles),
    )
