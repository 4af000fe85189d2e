#!/usr/bin/env python3
"""
main.py: quick-start entry point.

Start the interactive menu:

    python main.py

Or use the sub-commands directly:

    python main.py catalog add tiles/
    python main.py generate -i photo.jpg -o mosaic.png -s 32
    python -m tile_mosaic.cli --help
"""

from tile_mosaic.cli import app

if __name__ == "__main__":
    app()
