"""Unit tests for CLI command behavior."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from raml_oas_converter.cli import cli as cli_module
from raml_oas_converter.errors import ConversionFailure, UnsupportedFormatError

runner = CliRunner()


def test_help_shows_commands() -> None:
    """Ensure top-level help lists the available subcommands."""
    result = runner.invoke(cli_module.app, ["--help"])
    assert result.exit_code == 0
    assert "convert" in result.output
    assert "doctor" in result.output


def test_convert_uses_project_layout_by_default(project_root: Path) -> None:
    """Convert ``<root>/tmpdoc/api.raml`` into ``<root>/api.swagger.json``."""
    result = runner.invoke(
        cli_module.app, ["convert", "--root", str(project_root), "--no-color"]
    )

    assert result.exit_code == 0, result.output
    assert "# Converting RAML to OAS2 ... done." in result.output
    document = json.loads((project_root / "api.swagger.json").read_text("utf-8"))
    assert document["swagger"] == "2.0"


def test_convert_explicit_paths_and_indent(tmp_path: Path, fixtures_dir: Path) -> None:
    """Positional paths and ``--indent`` are honoured."""
    destination = tmp_path / "out" / "legacy.json"
    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            str(fixtures_dir / "legacy_v08.raml"),
            str(destination),
            "--indent",
            "4",
        ],
    )

    assert result.exit_code == 0, result.output
    text = destination.read_text(encoding="utf-8")
    assert text.startswith('{\n    "swagger": "2.0"')


def test_convert_failure_exits_non_zero(tmp_path: Path) -> None:
    """A missing source prints ``failed.`` and exits with code 1."""
    result = runner.invoke(cli_module.app, ["convert", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "failed." in result.output
    assert "ConversionFailure" in result.output
    assert not (tmp_path / "api.swagger.json").exists()


def test_convert_failure_keeps_existing_destination(
    tmp_path: Path, fixtures_dir: Path
) -> None:
    """A failed run leaves a previous destination untouched."""
    destination = tmp_path / "api.swagger.json"
    destination.write_text("previous", encoding="utf-8")

    result = runner.invoke(
        cli_module.app,
        ["convert", str(fixtures_dir / "malformed.raml"), str(destination)],
    )

    assert result.exit_code == 1
    assert destination.read_text(encoding="utf-8") == "previous"


def test_convert_validate_missing_deps(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Ensure missing optional deps surface a user-facing CLI error."""
    monkeypatch.setattr(
        cli_module,
        "_is_importable",
        lambda name: name != "openapi_spec_validator",
    )

    result = runner.invoke(
        cli_module.app, ["convert", "--root", str(tmp_path), "--validate"]
    )

    assert result.exit_code != 0
    assert "Missing optional dependencies" in result.output


def test_convert_bad_plugin_module_is_bad_parameter(tmp_path: Path) -> None:
    """Unimportable plugin modules are reported as bad parameters."""
    result = runner.invoke(
        cli_module.app,
        [
            "convert",
            "--root",
            str(tmp_path),
            "--plugin-module",
            "definitely_missing_plugin_module",
        ],
    )

    assert result.exit_code == 2
    assert "Unable to import plugin module" in result.output


def test_convert_handles_converter_setup_errors(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Converter errors raised before the run use the shared error printer."""
    import raml_oas_converter.conversion as conversion_module

    def fake_converter(*args: object, **kwargs: object) -> object:
        raise UnsupportedFormatError("no plugin")

    monkeypatch.setattr(conversion_module, "Converter", fake_converter)

    result = runner.invoke(cli_module.app, ["convert", "--root", str(tmp_path)])

    assert result.exit_code == 1
    assert "UnsupportedFormatError" in result.output
    assert "no plugin" in result.output


def test_print_conversion_error_returns_exit_code(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Return the error's exit code and print it on stderr."""
    code = cli_module._print_conversion_error(ConversionFailure("boom"), debug=False)

    assert code == 1
    assert "ConversionFailure" in capsys.readouterr().err


def test_print_conversion_error_debug_traceback(
    capsys: pytest.CaptureFixture[str],
) -> None:
    """Debug mode prints a traceback section."""
    try:
        raise ConversionFailure("boom")
    except ConversionFailure as exc:
        cli_module._print_conversion_error(exc, debug=True)

    assert "Traceback:" in capsys.readouterr().err


def test_require_deps_passes_when_available(monkeypatch: pytest.MonkeyPatch) -> None:
    """No error when every dependency resolves."""
    monkeypatch.setattr(cli_module, "_is_importable", lambda name: True)
    cli_module._require_deps(
        [cli_module.MissingDep("openapi_spec_validator", "validate", "validation")]
    )
