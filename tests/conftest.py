"""Pytest configuration helpers."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


def _ensure_repo_on_path() -> None:
    """Allow tests to import from repo modules without installing the package."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()


@pytest.fixture
def ramp_buffer() -> np.ndarray:
    """4096 distinct int16 samples, so slices can be checked by value."""
    return (np.arange(4096) - 2048).astype(np.int16)
