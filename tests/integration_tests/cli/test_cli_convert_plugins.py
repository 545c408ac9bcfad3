"""Integration tests for CLI conversion with validation and custom plugins."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from raml_oas_converter.cli import cli as cli_module

runner = CliRunner()

PLUGIN_SOURCE = '''
from raml_oas_converter.types import Formats


class StubPlugin:
    name = "stub"

    def can_handle(self, source_format, target_format):
        return False

    def convert(self, text, base_dir, options):
        return {"swagger": "2.0", "info": {"title": "stub", "version": ""}, "paths": {}}


PLUGINS = [StubPlugin()]
'''


def test_convert_with_validation(project_root: Path) -> None:
    """Validated conversion writes a Swagger document."""
    pytest.importorskip("openapi_spec_validator")

    result = runner.invoke(
        cli_module.app,
        ["--verbose", "convert", "--root", str(project_root), "--validate"],
    )

    assert result.exit_code == 0, result.output
    assert "done." in result.output
    document = json.loads((project_root / "api.swagger.json").read_text("utf-8"))
    assert document["info"]["title"] == "Music API"


def test_convert_with_extra_plugin_module(project_root: Path, tmp_path: Path) -> None:
    """Extra plugin modules are loaded alongside the built-in plugin."""
    plugin_file = tmp_path / "stub_plugin.py"
    plugin_file.write_text(PLUGIN_SOURCE, encoding="utf-8")

    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            "--root",
            str(project_root),
            "--plugin-module",
            str(plugin_file),
        ],
    )

    assert result.exit_code == 0, result.output
    document = json.loads((project_root / "api.swagger.json").read_text("utf-8"))
    assert document["info"]["title"] == "Music API"


def test_convert_debug_failure_shows_traceback(tmp_path: Path) -> None:
    """``--debug`` adds the traceback to the failure output."""
    result = runner.invoke(cli_module.app, ["--debug", "convert", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "Traceback:" in result.output
