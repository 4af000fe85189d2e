"""Rich command-line interface powered by Typer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from tile_mosaic.app import MosaicApp
from tile_mosaic.config import MosaicConfig, build_mosaic_spec, load_config
from tile_mosaic.errors import MosaicError
from tile_mosaic.menu import run_menu

app = typer.Typer(
    name="tile-mosaic",
    help="Build photo mosaics from a catalog or a folder of tile images.",
    add_completion=False,
    rich_markup_mode="rich",
)
catalog_app = typer.Typer(help="Maintain the tile catalog.", rich_markup_mode="rich")
app.add_typer(catalog_app, name="catalog")

console = Console()
logger = logging.getLogger("tile_mosaic")


@dataclass
class _State:
    mosaic: MosaicApp
    cfg: MosaicConfig


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False, markup=True)],
    )
    logger.setLevel(level)


def _fail(exc: MosaicError) -> NoReturn:
    logger.debug("Command failed", exc_info=True)
    console.print(f"[red]Error:[/red] {escape(str(exc))}")
    raise typer.Exit(1)


def _state(ctx: typer.Context) -> _State:
    return ctx.find_root().obj


# -- global options ----------------------------------------------------

@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Path | None = typer.Option(
        None, "--config", "-c", help="TOML file with default settings",
    ),
    catalog_path: Path | None = typer.Option(
        None, "--catalog-path", help="Catalog file (overrides the config file)",
    ),
    default_tile_size: int | None = typer.Option(
        None, "--default-tile-size", help="Fallback tile size in pixels",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Run a sub-command, or start the interactive menu when none is given."""
    _setup_logging(verbose)

    try:
        cfg = load_config(config)
    except MosaicError as exc:
        _fail(exc)

    cfg = replace(
        cfg,
        catalog_path=catalog_path or cfg.catalog_path,
        default_tile_size=(
            default_tile_size if default_tile_size is not None else cfg.default_tile_size
        ),
    )
    catalog_file = cfg.resolved_catalog_path()
    logger.debug("Catalog: %s", catalog_file)
    ctx.obj = _State(MosaicApp.from_catalog_path(catalog_file), cfg)

    if ctx.invoked_subcommand is None:
        run_menu(ctx.obj.mosaic, cfg, console)


# -- catalog commands --------------------------------------------------

@catalog_app.command("add")
def catalog_add(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="Image file or folder to scan recursively"),
) -> None:
    """Fingerprint images and add the new ones to the catalog."""
    try:
        added = _state(ctx).mosaic.catalog_add(path)
    except MosaicError as exc:
        _fail(exc)

    if not added:
        console.print("No new tiles added.")
        return
    console.print(f"[green]✓[/green] Added {len(added)} tile(s):")
    for tile in added:
        console.print(f"{tile.id}  {escape(tile.path)}", soft_wrap=True)


@catalog_app.command("list")
def catalog_list(ctx: typer.Context) -> None:
    """Show every tile in the catalog."""
    try:
        catalog = _state(ctx).mosaic.catalog_list()
    except MosaicError as exc:
        _fail(exc)

    if not catalog.tiles:
        console.print("Catalog is empty.")
        return

    table = Table(title=f"Catalog tiles ({len(catalog)})")
    table.add_column("id", no_wrap=True)
    table.add_column("path", overflow="fold")
    table.add_column("avg colour", justify="right")
    for tile in catalog:
        r, g, b = tile.avg_color
        table.add_row(tile.id, escape(tile.path), f"[rgb({r},{g},{b})]■[/] {r},{g},{b}")
    console.print(table)


@catalog_app.command("remove")
def catalog_remove(
    ctx: typer.Context,
    tile_id: str = typer.Argument(..., metavar="ID", help="Tile id as shown by 'list'"),
) -> None:
    """Remove one tile from the catalog."""
    try:
        removed = _state(ctx).mosaic.catalog_remove(tile_id)
    except MosaicError as exc:
        _fail(exc)
    console.print(f"Removed tile {removed.id} ({escape(removed.path)})", soft_wrap=True)


# -- generate ----------------------------------------------------------

@app.command()
def generate(
    ctx: typer.Context,
    input_path: Path | None = typer.Option(None, "--input", "-i", help="Source image"),
    output_path: Path | None = typer.Option(None, "--output", "-o", help="Mosaic image to write"),
    tiles: str | None = typer.Option(
        None, "--tiles", "-t", help="'catalog' or a folder of tile images",
    ),
    tile_size: int | None = typer.Option(
        None, "--tile-size", "-s", help="Tile edge in pixels",
    ),
) -> None:
    """Generate a mosaic of INPUT and write it to OUTPUT."""
    state = _state(ctx)
    try:
        spec = build_mosaic_spec(
            state.cfg,
            input_path=input_path,
            output_path=output_path,
            tiles=tiles,
            tile_size=tile_size,
        )
        result = state.mosaic.generate(spec)
    except MosaicError as exc:
        _fail(exc)

    console.print(Panel.fit(
        f"[bold green]MOSAIC GENERATED[/bold green]\n"
        f"Mosaic generated at {escape(str(result.output_path))}\n"
        f"Grid: {result.grid_width} x {result.grid_height}\n"
        f"Tiles used: {result.tiles_used}",
        border_style="green",
    ))


# -- interactive menu --------------------------------------------------

@app.command()
def menu(ctx: typer.Context) -> None:
    """Start the interactive menu."""
    state = _state(ctx)
    run_menu(state.mosaic, state.cfg, console)


if __name__ == "__main__":
    app()
