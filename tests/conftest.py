"""Shared pytest configuration and marker assignment."""

from __future__ import annotations

from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


@pytest.fixture
def fixtures_dir() -> Path:
    """Directory holding the sample RAML documents."""
    return FIXTURES_DIR


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Project layout with ``tmpdoc/api.raml`` copied from the music fixture."""
    source = tmp_path / "tmpdoc" / "api.raml"
    source.parent.mkdir()
    source.write_text(
        (FIXTURES_DIR / "music_v10.raml").read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    return tmp_path
