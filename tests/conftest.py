"""Global pytest configuration.

The diagnostics CLI lives in the top-level `scripts/` folder, which is not part of
the installed package. Unit tests run from the project root, so the root is put on
`sys.path` to make `scripts.*` importable.
"""

from __future__ import annotations

import sys
from pathlib import Path


def pytest_configure() -> None:
    root_dir = Path(__file__).resolve().parents[1]

    raw = str(root_dir)
    if raw not in sys.path:
        sys.path.insert(0, raw)
