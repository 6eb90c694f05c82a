"""RDKit molecular-graph helpers.

Molecular graphs carry bonds but no geometry, so they yield unweighted
adjacency matrices (every bond has weight 1).

RDKit is optional: install with ``pip install atomgraph[molecule]``.
"""

from __future__ import annotations

from typing import Any, Tuple

import numpy as np


def _require_rdkit():
    try:
        from rdkit import Chem  # type: ignore
    except ImportError as e:
        raise ImportError(
            "rdkit is required for molecular graphs. Install with `pip install atomgraph[molecule]`."
        ) from e
    return Chem


def check_molecule(mol: Any) -> Any:
    """Return ``mol`` if it is an RDKit ``Mol``, else raise TypeError."""
    Chem = _require_rdkit()
    if not isinstance(mol, Chem.Mol):
        raise TypeError(f"Expected an RDKit Mol, got {type(mol).__name__!r}")
    return mol


def molecule_atom_count(mol: Any) -> int:
    return int(check_molecule(mol).GetNumAtoms())


def molecule_elements(mol: Any) -> Tuple[str, ...]:
    """Element symbol of every atom, in atom-index order."""
    return tuple(atom.GetSymbol() for atom in mol.GetAtoms())


def molecule_adjacency(mol: Any) -> np.ndarray:
    """Unweighted bond adjacency matrix of shape (N, N)."""
    Chem = _require_rdkit()
    return np.asarray(Chem.GetAdjacencyMatrix(check_molecule(mol)), dtype=np.float64)
