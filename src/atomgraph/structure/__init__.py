"""Structure records and readers.

Entrypoints:
- :func:`atomgraph.structure.io.read_structure` (any ``ase.io`` format)
- :class:`atomgraph.structure.records.StructureData` (positions / species / periodicity)
- :class:`atomgraph.structure.records.StructureSource` (graph provenance)
- RDKit helpers in :mod:`atomgraph.structure.molecule`

The optional extras `atomgraph[crystal]` and `atomgraph[molecule]` install
`pymatgen` and `rdkit`.
"""

from __future__ import annotations

from ..graph.neighbors import Periodicity
from .records import SOURCE_KINDS, StructureData, StructureSource
from .io import read_structure, read_structure_data
from .molecule import check_molecule, molecule_adjacency, molecule_atom_count, molecule_elements

__all__ = [
    "Periodicity",
    "StructureData",
    "StructureSource",
    "SOURCE_KINDS",
    "read_structure",
    "read_structure_data",
    "check_molecule",
    "molecule_adjacency",
    "molecule_atom_count",
    "molecule_elements",
]
