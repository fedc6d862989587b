from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure repo root is importable when running pytest from any CWD.
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from icosa_lcd.vertices import LcdGeometry, build_geometry  # noqa: E402


@pytest.fixture(scope="session")
def geometry() -> LcdGeometry:
    """Face/region transforms shared by all tests (read-only)."""
    return build_geometry()
