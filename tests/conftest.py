"""Pytest configuration.

This repository uses the "src" layout. To make running tests convenient without
an editable install, we add the src/ directory to sys.path.

Users can still install the package normally (recommended for real use).
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def water_atoms():
    from ase import Atoms

    return Atoms(
        "OH2",
        positions=[
            [0.0, 0.0, 0.0],
            [0.9572, 0.0, 0.0],
            [-0.2400, 0.9266, 0.0],
        ],
    )


@pytest.fixture
def dimer_positions():
    # two atoms 2.0 apart
    return np.array([[0.0, 0.0, 0.0], [2.0, 0.0, 0.0]])
