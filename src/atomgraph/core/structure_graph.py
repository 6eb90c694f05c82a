"""The StructureGraph entity.

A :class:`StructureGraph` bundles:

- ``graph``: symmetric, zero-diagonal, non-negative weighted adjacency matrix
  (SciPy CSR), one node per atom
- ``elements``: element symbol per node
- ``laplacian``: normalized Laplacian of ``graph`` (dense float32), computed
  once at construction so convolution layers never recompute it
- ``structure``: :class:`~atomgraph.structure.StructureSource` provenance
- ``id``: free-form label, the only attribute that may be reassigned

Graph topology and weights cannot change after construction; the stored
arrays are flagged read-only.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from ..errors import ElementCountError
from ..graph.adjacency import dense_to_csr
from ..graph.laplacian import normalized_laplacian
from ..structure.records import StructureSource

# Relative tolerance for accepting an adjacency matrix as symmetric.
SYMMETRY_RTOL = 1e-8


def _freeze(arr: np.ndarray) -> np.ndarray:
    arr.flags.writeable = False
    return arr


def _freeze_csr(A: "sp.csr_matrix") -> "sp.csr_matrix":
    for arr in (A.data, A.indices, A.indptr):
        _freeze(arr)
    return A


def _validate_adjacency(adjacency) -> "sp.csr_matrix":
    A = dense_to_csr(adjacency)

    if A.nnz:
        if not np.all(np.isfinite(A.data)):
            raise ValueError("Adjacency contains non-finite values")
        if A.data.min() < 0:
            raise ValueError("Adjacency weights must be non-negative")

    # Remove diagonal explicitly (self-loops) if any slipped in.
    if A.diagonal().any():
        A = (A - sp.diags(A.diagonal())).tocsr()
        A.eliminate_zeros()

    if A.nnz:
        diff = abs(A - A.T)
        if diff.nnz and diff.max() > SYMMETRY_RTOL * max(1.0, float(A.data.max())):
            raise ValueError("Adjacency must be symmetric (undirected graph)")

    A.sort_indices()
    return A


class StructureGraph:
    """Weighted graph of an atomic structure with cached normalized Laplacian.

    Args:
        adjacency: (N, N) symmetric non-negative weight matrix, dense or sparse.
        elements: N element symbols, index-aligned with the nodes.
        structure: originating object or :class:`StructureSource`. If None, the
            adjacency matrix itself is recorded as the source.
        id: optional label.

    Raises:
        ElementCountError: if ``len(elements) != N``.
        LaplacianError: if the normalized Laplacian is not finite.
        ValueError: for non-square, asymmetric, negative or non-finite input.

    Use the ``from_*`` classmethods to build from files, crystals or
    molecules.
    """

    __slots__ = ("_graph", "_elements", "_laplacian", "_structure", "id")

    def __init__(
        self,
        adjacency,
        elements: Sequence[str],
        structure: Any = None,
        id: str = "",
    ):
        A = _validate_adjacency(adjacency)
        elements = tuple(str(e) for e in elements)

        num_atoms = A.shape[0]
        if len(elements) != num_atoms:
            raise ElementCountError(
                f"Element list length ({len(elements)}) doesn't match graph size ({num_atoms})!"
            )

        laplacian = normalized_laplacian(A)

        self._graph = _freeze_csr(A)
        self._elements = elements
        self._laplacian = _freeze(laplacian)
        self._structure = StructureSource("graph", A) if structure is None else StructureSource.wrap(structure)
        self.id = str(id)

    # -- read accessors -------------------------------------------------

    @property
    def graph(self) -> "sp.csr_matrix":
        return self._graph

    @property
    def elements(self) -> Tuple[str, ...]:
        return self._elements

    @property
    def laplacian(self) -> np.ndarray:
        return self._laplacian

    @property
    def structure(self) -> StructureSource:
        return self._structure

    @property
    def num_nodes(self) -> int:
        return int(self._graph.shape[0])

    @property
    def num_edges(self) -> int:
        return int(sp.triu(self._graph, k=1).nnz)

    def edges(self) -> List[Tuple[int, int, float]]:
        """Undirected edges ``(src, dst, weight)`` with ``src < dst``.

        Ordered by source node index, then destination node index.
        """
        upper = sp.triu(self._graph, k=1).tocoo()
        order = np.lexsort((upper.col, upper.row))
        return [
            (int(upper.row[k]), int(upper.col[k]), float(upper.data[k]))
            for k in order
        ]

    def edge_weights(self) -> np.ndarray:
        """Edge weights in :meth:`edges` order."""
        return np.array([w for _, _, w in self.edges()], dtype=np.float64)

    def adjacency_matrix(self) -> np.ndarray:
        """Dense, writable copy of the adjacency matrix."""
        return self._graph.toarray()

    # -- construction ---------------------------------------------------

    @classmethod
    def from_adjacency(cls, adjacency, elements, structure=None, id: str = "") -> "StructureGraph":
        from .construct import from_adjacency

        return from_adjacency(adjacency, elements, structure=structure, id=id)

    @classmethod
    def from_file(cls, path, id: Optional[str] = None, **kwargs) -> Optional["StructureGraph"]:
        from .construct import from_file

        return from_file(path, id, **kwargs)

    @classmethod
    def from_atoms(cls, atoms, id: str = "", **kwargs) -> "StructureGraph":
        from .construct import from_atoms

        return from_atoms(atoms, id, **kwargs)

    @classmethod
    def from_crystal(cls, crystal, id: str = "", **kwargs) -> "StructureGraph":
        from .construct import from_crystal

        return from_crystal(crystal, id, **kwargs)

    @classmethod
    def from_molecule(cls, mol, id: str = "") -> Optional["StructureGraph"]:
        from .construct import from_molecule

        return from_molecule(mol, id)

    # -- pickling -------------------------------------------------------

    def __getstate__(self) -> Dict[str, Any]:
        return {
            "graph": self._graph,
            "elements": self._elements,
            "laplacian": self._laplacian,
            "structure": self._structure,
            "id": self.id,
        }

    def __setstate__(self, state: Dict[str, Any]) -> None:
        # unpickled arrays come back writable
        self._graph = _freeze_csr(state["graph"])
        self._elements = tuple(state["elements"])
        self._laplacian = _freeze(state["laplacian"])
        self._structure = state["structure"]
        self.id = state["id"]

    # -- printing -------------------------------------------------------

    def __repr__(self) -> str:
        return f"StructureGraph {self.id} with {self.num_nodes} nodes, {self.num_edges} edges"

    def __str__(self) -> str:
        return f"{self!r}\n\tatoms: {list(self._elements)}"
