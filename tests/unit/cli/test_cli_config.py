#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/cli/test_cli_config.py
"""Unit tests for org2md CLI configuration management.

This module tests configuration file discovery, loading in each supported
format, priority handling and the split into export and parser options.
"""

import argparse
import json
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml

from org2md.cli.config import (
    discover_config_file,
    find_config_in_parents,
    load_config_file,
    load_config_with_priority,
    split_config,
)


@pytest.mark.unit
@pytest.mark.cli
class TestConfigDiscovery:
    """Test configuration file discovery functionality."""

    def test_discover_config_in_cwd(self, tmp_path: Path) -> None:
        """Test discovering a config file in the working directory."""
        config_file = tmp_path / ".org2md.toml"
        config_file.write_text('md_headline_style = "setext"\n')

        with patch("pathlib.Path.cwd", return_value=tmp_path):
            discovered = discover_config_file()

        assert discovered is not None
        assert discovered.resolve() == config_file.resolve()

    def test_discover_config_in_parent(self, tmp_path: Path) -> None:
        """Test that parent directories are searched."""
        config_file = tmp_path / ".org2md.yaml"
        config_file.write_text("with_toc: false\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_in_parents(nested) == config_file.resolve()

    def test_discover_config_in_home(self, tmp_path: Path) -> None:
        """Test falling back to the home directory."""
        home = tmp_path / "home"
        work = tmp_path / "work"
        home.mkdir()
        work.mkdir()
        config_file = home / ".org2md.json"
        config_file.write_text('{"with_toc": 2}')

        with patch("org2md.cli.config.find_config_in_parents", return_value=None):
            with patch("pathlib.Path.home", return_value=home):
                discovered = discover_config_file(work)

        assert discovered == config_file

    def test_pyproject_section(self, tmp_path: Path) -> None:
        """Test that pyproject.toml counts only with a [tool.org2md] table."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[project]\nname = "x"\n')
        assert find_config_in_parents(tmp_path) != pyproject.resolve()

        pyproject.write_text('[tool.org2md]\nwith_toc = false\n')
        assert find_config_in_parents(tmp_path) == pyproject.resolve()

    def test_dedicated_file_wins_over_pyproject(self, tmp_path: Path) -> None:
        """Test the search order inside one directory."""
        (tmp_path / "pyproject.toml").write_text("[tool.org2md]\nwith_toc = false\n")
        dedicated = tmp_path / ".org2md.toml"
        dedicated.write_text("with_toc = 1\n")
        assert find_config_in_parents(tmp_path) == dedicated.resolve()


@pytest.mark.unit
@pytest.mark.cli
class TestConfigLoading:
    """Test loading configuration files."""

    def test_load_toml(self, tmp_path: Path) -> None:
        """Test a TOML config with a parser table."""
        path = tmp_path / "config.toml"
        path.write_text('md_headline_style = "setext"\n\n[parser]\ntodo_keywords = ["TODO", "NEXT"]\n')
        config = load_config_file(path)
        assert config["md_headline_style"] == "setext"
        assert config["parser"]["todo_keywords"] == ["TODO", "NEXT"]

    def test_load_yaml(self, tmp_path: Path) -> None:
        """Test a YAML config."""
        path = tmp_path / "config.yml"
        path.write_text(yaml.safe_dump({"with_toc": 2, "exclude_tags": ["noexport", "draft"]}))
        assert load_config_file(path) == {"with_toc": 2, "exclude_tags": ["noexport", "draft"]}

    def test_load_empty_yaml(self, tmp_path: Path) -> None:
        """Test that an empty YAML file is an empty config."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config_file(path) == {}

    def test_load_json(self, tmp_path: Path) -> None:
        """Test a JSON config."""
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"backend": "html"}))
        assert load_config_file(str(path)) == {"backend": "html"}

    def test_load_pyproject(self, tmp_path: Path) -> None:
        """Test reading the [tool.org2md] table of pyproject.toml."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool.org2md]\nsection_numbers = false\n')
        assert load_config_file(path) == {"section_numbers": False}

    @pytest.mark.parametrize(
        "filename,content,message",
        [
            ("bad.toml", "a = ", "Invalid TOML"),
            ("bad.json", "{", "Invalid JSON"),
            ("list.json", "[1, 2]", "must contain an object"),
            ("bad.yaml", "a: [", "Invalid YAML"),
            ("list.yaml", "- a\n- b\n", "must contain a mapping"),
            ("config.ini", "[x]", "Unsupported config file format"),
        ],
    )
    def test_invalid_files(self, tmp_path: Path, filename: str, content: str, message: str) -> None:
        """Test that malformed files raise ArgumentTypeError."""
        path = tmp_path / filename
        path.write_text(content)
        with pytest.raises(argparse.ArgumentTypeError, match=message):
            load_config_file(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test a path that does not exist."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "missing.toml")

    def test_directory(self, tmp_path: Path) -> None:
        """Test a path that is not a file."""
        with pytest.raises(argparse.ArgumentTypeError, match="not a file"):
            load_config_file(tmp_path)


@pytest.mark.unit
@pytest.mark.cli
class TestConfigPriority:
    """Test which configuration source is used."""

    def test_explicit_path_wins(self, tmp_path: Path) -> None:
        """Test that an explicit path beats the environment variable."""
        explicit = tmp_path / "explicit.json"
        explicit.write_text('{"with_toc": 1}')
        env = tmp_path / "env.json"
        env.write_text('{"with_toc": 2}')
        assert load_config_with_priority(str(explicit), str(env)) == {"with_toc": 1}

    def test_env_path(self, tmp_path: Path) -> None:
        """Test the environment variable path."""
        env = tmp_path / "env.json"
        env.write_text('{"with_toc": 2}')
        assert load_config_with_priority(env_var_path=str(env)) == {"with_toc": 2}

    def test_nothing_found(self) -> None:
        """Test that no config gives an empty dict."""
        with patch("org2md.cli.config.discover_config_file", return_value=None):
            assert load_config_with_priority() == {}


@pytest.mark.unit
@pytest.mark.cli
class TestSplitConfig:
    """Test splitting a config into its parts."""

    def test_split(self) -> None:
        """Test backend, export and parser options."""
        backend, export_options, parser_options = split_config(
            {
                "backend": "html",
                "md-headline-style": "setext",
                "exclude_tags": ["noexport", "draft"],
                "parser": {"todo_keywords": ["TODO", "NEXT"]},
            }
        )
        assert backend == "html"
        assert export_options == {"md_headline_style": "setext", "exclude_tags": ("noexport", "draft")}
        assert parser_options == {"todo_keywords": ["TODO", "NEXT"]}

    def test_defaults(self) -> None:
        """Test an empty config."""
        assert split_config({}) == (None, {}, {})

    def test_parser_must_be_table(self) -> None:
        """Test that a scalar parser entry is rejected."""
        with pytest.raises(argparse.ArgumentTypeError, match="must be a table"):
            split_config({"parser": "orgparse"})
