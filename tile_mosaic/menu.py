"""Interactive, prompt-driven front-end exposing the same operations as the CLI."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt

from tile_mosaic.app import MosaicApp
from tile_mosaic.config import MosaicConfig, build_mosaic_spec
from tile_mosaic.errors import MosaicError
from tile_mosaic.models import Tile

logger = logging.getLogger(__name__)

MENU_ITEMS = [
    ("1", "Generate mosaic"),
    ("2", "Add tiles to catalog"),
    ("3", "List catalog"),
    ("4", "Remove tile"),
    ("5", "Exit"),
]
EXIT_CHOICE = "5"
PREVIEW_LIMIT = 10


def _ask(console: Console, label: str, default: str | None = None) -> str:
    if default is None:
        return Prompt.ask(label, console=console).strip()
    return Prompt.ask(label, default=default, console=console).strip()


def _print_tiles(console: Console, tiles: Sequence[Tile]) -> None:
    for tile in tiles[:PREVIEW_LIMIT]:
        console.print(f"  {tile.id}  {escape(tile.path)}", soft_wrap=True)
    if len(tiles) > PREVIEW_LIMIT:
        console.print(f"  [dim]... and {len(tiles) - PREVIEW_LIMIT} more[/dim]")


def _generate(app: MosaicApp, cfg: MosaicConfig, console: Console) -> None:
    input_path = _ask(console, "Input image", str(cfg.input_path) if cfg.input_path else None)
    output_path = _ask(console, "Output image", str(cfg.output_path) if cfg.output_path else None)
    tiles = _ask(console, "Tiles source ('catalog' or a directory)", cfg.tiles or "catalog")
    tile_size = IntPrompt.ask(
        "Tile size",
        default=cfg.tile_size if cfg.tile_size is not None else cfg.default_tile_size,
        console=console,
    )

    spec = build_mosaic_spec(
        cfg,
        input_path=Path(input_path) if input_path else None,
        output_path=Path(output_path) if output_path else None,
        tiles=tiles or None,
        tile_size=tile_size,
    )
    with console.status("Generating mosaic ..."):
        result = app.generate(spec)
    console.print(
        f"[green]✓[/green] Mosaic generated at {escape(str(result.output_path))}  "
        f"[dim]grid {result.grid_width} x {result.grid_height}  "
        f"tiles used {result.tiles_used}[/dim]"
    )


def _add(app: MosaicApp, console: Console) -> None:
    path = _ask(console, "Image file or directory")
    if not path:
        console.print("[yellow]Path is required.[/yellow]")
        return
    added = app.catalog_add(path)
    if not added:
        console.print("No new tiles added.")
        return
    console.print(f"[green]Added {len(added)} tile(s):[/green]")
    _print_tiles(console, added)


def _list(app: MosaicApp, console: Console) -> None:
    catalog = app.catalog_list()
    if not catalog.tiles:
        console.print("Catalog is empty.")
        return
    console.print(f"Catalog tiles: {len(catalog)}")
    _print_tiles(console, catalog.tiles)


def _remove(app: MosaicApp, console: Console) -> None:
    tile_id = _ask(console, "Tile id")
    if not tile_id:
        console.print("[yellow]Tile id is required.[/yellow]")
        return
    removed = app.catalog_remove(tile_id)
    console.print(f"Removed tile {removed.id} ({escape(removed.path)})", soft_wrap=True)


def run_menu(app: MosaicApp, cfg: MosaicConfig, console: Console) -> None:
    """Loop over the main menu until the user exits.

    A failed operation is reported and the menu is shown again.  Ctrl-C
    or end of input leaves the loop like choosing *Exit*.
    """
    console.print(Panel.fit("[bold]TILE MOSAIC[/bold]", border_style="cyan"))
    try:
        while True:
            console.print()
            for key, label in MENU_ITEMS:
                console.print(f"  [cyan]{key}[/cyan]  {label}")
            choice = Prompt.ask(
                "Choose", choices=[k for k, _ in MENU_ITEMS], console=console,
            )
            if choice == EXIT_CHOICE:
                break
            try:
                if choice == "1":
                    _generate(app, cfg, console)
                elif choice == "2":
                    _add(app, console)
                elif choice == "3":
                    _list(app, console)
                elif choice == "4":
                    _remove(app, console)
            except MosaicError as exc:
                logger.debug("Menu operation failed", exc_info=True)
                console.print(f"[red]Error:[/red] {escape(str(exc))}")
    except (KeyboardInterrupt, EOFError):
        console.print()
    finally:
        console.print("[dim]Bye.[/dim]")
