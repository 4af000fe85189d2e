"""Tests for configuration loading, the Typer CLI and the interactive menu."""

from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import pytest
from PIL import Image
from typer.testing import CliRunner

from tile_mosaic.cli import app
from tile_mosaic.config import (
    MosaicConfig,
    build_mosaic_spec,
    default_catalog_path,
    load_config,
    resolve_tiles_source,
)
from tile_mosaic.errors import ConfigError, InvalidInputError
from tile_mosaic.models import CATALOG

runner = CliRunner()

# -- Fixtures ----------------------------------------------------------


@pytest.fixture
def catalog_file(tmp_path: Path) -> Path:
    return tmp_path / "state" / "catalog.json"


@pytest.fixture
def tiles(tmp_path: Path) -> Path:
    folder = tmp_path / "tiles"
    folder.mkdir()
    Image.new("RGB", (9, 9), (0, 0, 0)).save(folder / "black.png")
    Image.new("RGB", (9, 9), (255, 255, 255)).save(folder / "white.png")
    return folder


@pytest.fixture
def photo(tmp_path: Path) -> Path:
    arr = np.zeros((40, 40, 3), dtype=np.uint8)
    arr[:, 20:] = 250
    p = tmp_path / "photo.png"
    Image.fromarray(arr).save(p)
    return p


def invoke(catalog_file: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--catalog-path", str(catalog_file), *args], input=input)


# -- Config ------------------------------------------------------------

class TestConfig:
    def test_defaults(self) -> None:
        cfg = MosaicConfig()
        assert cfg.default_tile_size == 32
        assert cfg.catalog_path is None
        assert cfg.tiles is None

    def test_frozen(self) -> None:
        cfg = MosaicConfig()
        with pytest.raises(AttributeError):
            cfg.default_tile_size = 128  # type: ignore[misc]

    def test_default_catalog_path(self) -> None:
        assert default_catalog_path().name == "catalog.json"
        assert MosaicConfig().resolved_catalog_path() == default_catalog_path()

    def test_load_none(self) -> None:
        assert load_config(None) == MosaicConfig()

    def test_load_missing(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "nope.toml")

    def test_load_values(self, tmp_path: Path) -> None:
        p = tmp_path / "mosaic.toml"
        p.write_text(
            'catalog_path = "cat.json"\n'
            "default_tile_size = 24\n"
            "[generate]\n"
            'input = "in.jpg"\n'
            'output = "out.png"\n'
            'tiles = "my_tiles"\n'
            "tile_size = 16\n",
            encoding="utf-8",
        )
        cfg = load_config(p)
        assert cfg.catalog_path == Path("cat.json")
        assert cfg.default_tile_size == 24
        assert cfg.input_path == Path("in.jpg")
        assert cfg.output_path == Path("out.png")
        assert cfg.tiles == "my_tiles"
        assert cfg.tile_size == 16

    @pytest.mark.parametrize("content", [
        "default_tile_size = [",
        'default_tile_size = "big"',
        "generate = 3",
        "[generate]\ntile_size = true",
    ])
    def test_load_malformed(self, tmp_path: Path, content: str) -> None:
        p = tmp_path / "bad.toml"
        p.write_text(content, encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(p)


class TestBuildSpec:
    def test_tiles_source(self) -> None:
        assert resolve_tiles_source(None) is CATALOG
        assert resolve_tiles_source("CataLog") is CATALOG
        assert resolve_tiles_source("some/dir") == Path("some/dir")

    def test_requires_input_and_output(self) -> None:
        with pytest.raises(InvalidInputError, match="input image is required"):
            build_mosaic_spec(MosaicConfig(), output_path=Path("o.png"))
        with pytest.raises(InvalidInputError, match="output path is required"):
            build_mosaic_spec(MosaicConfig(), input_path=Path("i.png"))

    def test_precedence(self) -> None:
        cfg = MosaicConfig(
            default_tile_size=8,
            input_path=Path("cfg_in.png"),
            output_path=Path("cfg_out.png"),
            tiles="cfg_tiles",
        )
        spec = build_mosaic_spec(cfg)
        assert spec.input_path == Path("cfg_in.png")
        assert spec.tile_size == 8
        assert spec.tiles_source == Path("cfg_tiles")

        spec = build_mosaic_spec(
            cfg, input_path=Path("a.png"), tiles="catalog", tile_size=4,
        )
        assert spec.input_path == Path("a.png")
        assert spec.output_path == Path("cfg_out.png")
        assert spec.tile_size == 4
        assert spec.tiles_source is CATALOG

    def test_generate_tile_size_beats_default(self) -> None:
        cfg = MosaicConfig(default_tile_size=8, tile_size=12)
        spec = build_mosaic_spec(cfg, input_path=Path("i"), output_path=Path("o"))
        assert spec.tile_size == 12


# -- CLI ---------------------------------------------------------------

class TestCli:
    def test_catalog_round_trip(self, catalog_file: Path, tiles: Path) -> None:
        result = invoke(catalog_file, "catalog", "list")
        assert result.exit_code == 0, result.output
        assert "Catalog is empty." in result.output

        result = invoke(catalog_file, "catalog", "add", str(tiles))
        assert result.exit_code == 0, result.output
        assert "Added 2 tile(s)" in result.output

        result = invoke(catalog_file, "catalog", "add", str(tiles))
        assert "No new tiles added." in result.output

        data = json.loads(catalog_file.read_text(encoding="utf-8"))
        first_id = data["tiles"][0]["id"]

        result = invoke(catalog_file, "catalog", "list")
        assert result.exit_code == 0, result.output
        assert "Catalog tiles (2)" in result.output

        result = invoke(catalog_file, "catalog", "remove", first_id)
        assert result.exit_code == 0, result.output
        assert "Removed tile" in result.output
        assert len(json.loads(catalog_file.read_text(encoding="utf-8"))["tiles"]) == 1

    def test_remove_unknown(self, catalog_file: Path) -> None:
        result = invoke(catalog_file, "catalog", "remove", "nope")
        assert result.exit_code == 1
        assert "catalog item not found" in result.output

    def test_add_keeps_path_as_typed(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch, catalog_file: Path, tiles: Path,
    ) -> None:
        monkeypatch.chdir(tmp_path)
        result = invoke(catalog_file, "catalog", "add", "./tiles/black.png")
        assert result.exit_code == 0, result.output
        result = invoke(catalog_file, "catalog", "add", "tiles/black.png")
        assert "Added 1 tile(s)" in result.output
        paths = [t["path"] for t in json.loads(catalog_file.read_text(encoding="utf-8"))["tiles"]]
        assert paths == ["./tiles/black.png", "tiles/black.png"]

    def test_add_non_image(self, tmp_path: Path, catalog_file: Path) -> None:
        p = tmp_path / "notes.txt"
        p.write_text("hi")
        result = invoke(catalog_file, "catalog", "add", str(p))
        assert result.exit_code == 1
        assert "not an image" in result.output

    def test_generate_from_directory(
        self, tmp_path: Path, catalog_file: Path, tiles: Path, photo: Path,
    ) -> None:
        out = tmp_path / "out" / "mosaic.png"
        result = invoke(
            catalog_file, "generate",
            "--input", str(photo), "--output", str(out),
            "--tiles", str(tiles), "--tile-size", "20",
        )
        assert result.exit_code == 0, result.output
        assert "Grid: 2 x 2" in result.output
        assert "Tiles used: 2" in result.output
        with Image.open(out) as img:
            assert img.size == (40, 40)

    def test_generate_from_catalog(
        self, tmp_path: Path, catalog_file: Path, tiles: Path, photo: Path,
    ) -> None:
        invoke(catalog_file, "catalog", "add", str(tiles))
        out = tmp_path / "mosaic.png"
        result = invoke(
            catalog_file, "generate", "-i", str(photo), "-o", str(out), "-s", "10",
        )
        assert result.exit_code == 0, result.output
        assert "Grid: 4 x 4" in result.output
        assert out.exists()

    def test_generate_tile_too_big(
        self, tmp_path: Path, catalog_file: Path, tiles: Path, photo: Path,
    ) -> None:
        result = invoke(
            catalog_file, "generate", "-i", str(photo), "-o", str(tmp_path / "o.png"),
            "-t", str(tiles), "-s", "64",
        )
        assert result.exit_code == 1
        assert "smaller than the tile size" in result.output

    def test_generate_uses_config_defaults(
        self, tmp_path: Path, tiles: Path, photo: Path,
    ) -> None:
        out = tmp_path / "from_config.png"
        cfg = tmp_path / "mosaic.toml"
        cfg.write_text(
            f"catalog_path = {json.dumps(str(tmp_path / 'cfg_catalog.json'))}\n"
            "default_tile_size = 8\n"
            "[generate]\n"
            f"input = {json.dumps(str(photo))}\n"
            f"output = {json.dumps(str(out))}\n"
            f"tiles = {json.dumps(str(tiles))}\n",
            encoding="utf-8",
        )
        result = runner.invoke(app, ["--config", str(cfg), "generate"])
        assert result.exit_code == 0, result.output
        assert "Grid: 5 x 5" in result.output
        assert out.exists()

        result = runner.invoke(
            app, ["--config", str(cfg), "--default-tile-size", "20", "generate"],
        )
        assert "Grid: 2 x 2" in result.output

    def test_missing_config(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["--config", str(tmp_path / "nope.toml"), "catalog", "list"])
        assert result.exit_code == 1
        assert "config file not found" in result.output


# -- Interactive menu --------------------------------------------------

class TestMenu:
    def test_exit(self, catalog_file: Path) -> None:
        result = invoke(catalog_file, input="5\n")
        assert result.exit_code == 0, result.output
        assert "Bye." in result.output

    def test_add_then_list(self, catalog_file: Path, tiles: Path) -> None:
        result = invoke(catalog_file, "menu", input=f"3\n2\n{tiles}\n3\n5\n")
        assert result.exit_code == 0, result.output
        assert "Catalog is empty." in result.output
        assert "Added 2 tile(s)" in result.output
        assert "Catalog tiles: 2" in result.output

    def test_errors_do_not_leave_menu(self, catalog_file: Path) -> None:
        result = invoke(catalog_file, input="4\nnope\n4\n\n5\n")
        assert result.exit_code == 0, result.output
        assert "catalog item not found" in result.output
        assert "Tile id is required." in result.output
        assert "Bye." in result.output

    def test_generate(
        self, tmp_path: Path, catalog_file: Path, tiles: Path, photo: Path,
    ) -> None:
        out = tmp_path / "menu_mosaic.png"
        result = invoke(
            catalog_file, input=f"1\n{photo}\n{out}\n{tiles}\n20\n5\n",
        )
        assert result.exit_code == 0, result.output
        assert "Mosaic generated" in result.output
        assert out.exists()

    def test_end_of_input(self, catalog_file: Path) -> None:
        result = invoke(catalog_file, input="3\n")
        assert result.exit_code == 0, result.output
        assert "Bye." in result.output
