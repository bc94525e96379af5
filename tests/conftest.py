"""Pytest configuration helpers."""

import sys
from pathlib import Path


def _ensure_backend_on_path() -> None:
    """Allow tests to import backend modules without setting PYTHONPATH."""
    backend = Path(__file__).resolve().parents[1] / "backend"
    path_str = str(backend)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_backend_on_path()
