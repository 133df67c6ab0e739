"""Tests for InitService: library creation."""

import tomllib
from pathlib import Path

from cglctl.config.discovery import CONFIG_FILENAME
from cglctl.services.init import InitService, render_config


class TestRenderConfig:
    def test_valid_toml(self) -> None:
        data = tomllib.loads(render_config('Quote "and" backslash \\'))
        assert data == {"library": {"name": 'Quote "and" backslash \\'}}


class TestInitLibrary:
    def test_creates_config_and_database(self, tmp_path: Path) -> None:
        root = tmp_path / "lib"
        result = InitService.init_library(root, name="scriptures")
        assert result.ok
        assert result.data["config_created"] is True
        assert (root / CONFIG_FILENAME).is_file()
        assert (root / ".cglctl" / "cglctl.db").is_file()
        config = tomllib.loads((root / CONFIG_FILENAME).read_text())
        assert config["library"]["name"] == "scriptures"

    def test_name_defaults_to_directory(self, tmp_path: Path) -> None:
        result = InitService.init_library(tmp_path / "psalms")
        assert result.data["name"] == "psalms"

    def test_rerun_keeps_config(self, tmp_path: Path) -> None:
        InitService.init_library(tmp_path, name="first")
        result = InitService.init_library(tmp_path, name="second")
        assert result.ok
        assert result.data["config_created"] is False
        assert result.warnings
        assert 'name = "first"' in (tmp_path / CONFIG_FILENAME).read_text()

    def test_custom_database_filename(self, tmp_path: Path) -> None:
        InitService.init_library(tmp_path, filename="books.db")
        assert (tmp_path / ".cglctl" / "books.db").is_file()

    def test_path_is_a_file(self, tmp_path: Path) -> None:
        target = tmp_path / "file.txt"
        target.write_text("x")
        result = InitService.init_library(target)
        assert result.error.code == "VALIDATION_FAILED"
