"""Tests for init CLI command."""

from __future__ import annotations

import json
import tomllib
from pathlib import Path

import pytest
from click.testing import CliRunner

from nixcomment.cli import cli


@pytest.mark.usefixtures("_isolated_project")
class TestInitCommand:
    def test_creates_config(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["init"])
        assert result.exit_code == 0
        assert "init_config" in result.output
        data = tomllib.loads((project_root / "nixcomment.toml").read_text())
        assert data["lint"]["line_length"] == 100

    def test_refuses_existing(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["--json", "init"])
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "CONFIG_EXISTS"

    def test_force(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["--json", "init", "--force"])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["data"]["overwritten"] is True

    def test_target_directory(self, cli_runner: CliRunner, project_root: Path) -> None:
        result = cli_runner.invoke(cli, ["init", "pkgs"])
        assert result.exit_code == 0
        assert (project_root / "pkgs" / "nixcomment.toml").is_file()

    def test_generated_config_is_usable(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["init"])
        result = cli_runner.invoke(cli, ["check"])
        assert result.exit_code == 0
