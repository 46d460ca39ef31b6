"""Shared pytest setup for the logs shipper.

The code lives under `src/` without being installed, so `src/` is put on
`sys.path` before collection. That makes `ddlogs`, `config` and the `main` demo
harness importable from both the unit and integration suites.
"""

from __future__ import annotations

import sys
from pathlib import Path


def pytest_configure() -> None:
    """Make the `src/` modules importable."""
    src_dir = Path(__file__).resolve().parents[1] / "src"
    src_dir_str = str(src_dir)
    if src_dir_str not in sys.path:
        sys.path.insert(0, src_dir_str)
