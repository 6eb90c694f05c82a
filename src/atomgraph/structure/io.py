"""Structure file I/O.

Any format understood by ``ase.io.read`` is accepted (CIF, POSCAR, XYZ,
extxyz, PDB, ...). Serialized graphs (see
:data:`atomgraph.graph.cache.GRAPH_ARTIFACT_SUFFIXES`) are not structures and
are handled by the construction layer before reaching this reader.

Reader failures are re-raised as :class:`atomgraph.errors.StructureReadError`
so the file-based construction path can treat them uniformly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple, Union

import ase.io
from ase import Atoms
from ase.io.formats import UnknownFileTypeError

from ..errors import StructureReadError
from .records import StructureData

_READ_ERRORS = (
    OSError,
    ValueError,
    KeyError,
    IndexError,
    RuntimeError,
    StopIteration,
    UnknownFileTypeError,
)


def read_structure(
    path: Union[str, Path],
    *,
    index: int = -1,
    format: Optional[str] = None,
) -> Atoms:
    """Read one structure from disk.

    Args:
        path: structure file.
        index: which frame to read from multi-frame files (default: last).
        format: explicit ASE format name; inferred from the file if None.

    Returns:
        ``ase.Atoms`` with at least one atom.

    Raises:
        StructureReadError: if the file is missing, unreadable or empty.
    """
    p = Path(path)
    if not p.is_file():
        raise StructureReadError(f"Structure file not found: {p}")

    try:
        atoms = ase.io.read(p, index=index, format=format)
    except _READ_ERRORS as e:
        raise StructureReadError(f"Could not read structure from {p}: {e}") from e

    if not isinstance(atoms, Atoms):
        raise StructureReadError(f"Expected a single structure from {p}, got {type(atoms).__name__}")
    if len(atoms) == 0:
        raise StructureReadError(f"No atoms found in {p}")
    return atoms


def read_structure_data(
    path: Union[str, Path],
    *,
    index: int = -1,
    format: Optional[str] = None,
) -> Tuple[StructureData, Atoms]:
    """Read a structure file and return ``(StructureData, ase.Atoms)``."""
    atoms = read_structure(path, index=index, format=format)
    return StructureData.from_atoms(atoms), atoms
