"""Structure records and provenance.

:class:`StructureData` is the plain-array view of a structure that the
neighbour search consumes: Cartesian positions, element symbols and optional
periodicity. It can be built from ``ase.Atoms`` or pymatgen
``Structure``/``Molecule`` objects.

:class:`StructureSource` records where a graph came from. It is a small tagged
union over the supported source kinds; the wrapped object is kept by reference
and never interpreted by the graph code.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, Optional, Tuple

import numpy as np
import scipy.sparse as sp
from ase import Atoms

from ..graph.neighbors import Periodicity

SourceKind = Literal["atoms", "crystal", "molecule", "graph"]
SOURCE_KINDS: Tuple[str, ...] = ("atoms", "crystal", "molecule", "graph")


@dataclass(frozen=True)
class StructureData:
    """Positions (N, 3), element symbols and periodicity of a structure."""

    positions: np.ndarray
    species: Tuple[str, ...]
    periodicity: Optional[Periodicity] = None

    def __post_init__(self) -> None:
        pos = np.asarray(self.positions, dtype=np.float64)
        if pos.ndim != 2 or pos.shape[1] != 3:
            raise ValueError(f"positions must have shape (N, 3), got shape={pos.shape}")
        species = tuple(str(s) for s in self.species)
        if len(species) != pos.shape[0]:
            raise ValueError(
                f"species length ({len(species)}) does not match number of positions ({pos.shape[0]})"
            )
        object.__setattr__(self, "positions", pos)
        object.__setattr__(self, "species", species)

    @property
    def num_atoms(self) -> int:
        return int(self.positions.shape[0])

    @classmethod
    def from_atoms(cls, atoms: Atoms) -> "StructureData":
        """Build from an ``ase.Atoms`` object."""
        pbc = tuple(bool(p) for p in atoms.pbc)
        periodicity = Periodicity(np.asarray(atoms.cell), pbc) if any(pbc) else None
        return cls(atoms.get_positions(), tuple(atoms.get_chemical_symbols()), periodicity)

    @classmethod
    def from_pymatgen(cls, record: Any) -> "StructureData":
        """Build from a pymatgen ``Structure`` (periodic) or ``Molecule``.

        Disordered (partially occupied) sites have no single element and are
        rejected.
        """
        if not record.is_ordered:
            raise ValueError("Disordered structures are not supported; order the structure first.")
        species = tuple(site.specie.symbol for site in record)
        lattice = getattr(record, "lattice", None)
        periodicity = None
        if lattice is not None:
            pbc = tuple(bool(p) for p in getattr(lattice, "pbc", (True, True, True)))
            if any(pbc):
                periodicity = Periodicity(np.asarray(lattice.matrix), pbc)
        return cls(np.asarray(record.cart_coords), species, periodicity)


@dataclass(frozen=True, eq=False)
class StructureSource:
    """Provenance of a graph: the source kind and the original object.

    Kinds:
        - ``atoms``: an ``ase.Atoms`` (``path`` is set when read from a file)
        - ``crystal``: a pymatgen ``Structure`` or ``Molecule``
        - ``molecule``: an RDKit ``Mol``
        - ``graph``: the adjacency matrix itself

    Equality is identity; two sources are never compared by content.
    """

    kind: SourceKind
    obj: Any
    path: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind not in SOURCE_KINDS:
            raise ValueError(f"Unknown source kind {self.kind!r}. Expected one of {SOURCE_KINDS}.")

    @classmethod
    def wrap(cls, obj: Any, *, path: Optional[str] = None) -> "StructureSource":
        """Infer the source kind of ``obj``."""
        if isinstance(obj, StructureSource):
            return obj
        if isinstance(obj, Atoms):
            return cls("atoms", obj, path)
        module = type(obj).__module__ or ""
        if module.startswith("pymatgen."):
            return cls("crystal", obj, path)
        if module.startswith("rdkit."):
            return cls("molecule", obj, path)
        if sp.issparse(obj) or isinstance(obj, np.ndarray):
            return cls("graph", obj, path)
        raise TypeError(f"Unsupported structure type {type(obj).__name__!r}")

    def __repr__(self) -> str:
        where = f", path={self.path!r}" if self.path else ""
        return f"StructureSource(kind={self.kind!r}, obj={type(self.obj).__name__}{where})"
