"""StructureGraph entity and its construction entry points."""

from __future__ import annotations

from .structure_graph import StructureGraph
from .construct import (
    from_adjacency,
    from_atoms,
    from_crystal,
    from_file,
    from_molecule,
)

__all__ = [
    "StructureGraph",
    "from_adjacency",
    "from_atoms",
    "from_crystal",
    "from_file",
    "from_molecule",
]
