#!/usr/bin/env python3
"""Convert the project's RAML documentation into Swagger 2.0 JSON.

Reads ``tmpdoc/api.raml`` and writes ``api.swagger.json``, both relative to
the repository root (the parent of this script's directory).
"""

from __future__ import annotations

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = REPO_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from raml_oas_converter.api import convert_project_docs  # noqa: E402


def main() -> int:
    outcome = convert_project_docs(REPO_ROOT)
    return outcome.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
