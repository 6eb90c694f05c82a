"""atomgraph.

Atomic structures as weighted graphs for graph-based learning models:

- Neighbour lists from 3D coordinates (cutoff with a soft nearest-k limit, or
  Voronoi face sharing), periodic images included
- Edge weights from a configurable distance-decay function
- Normalized graph Laplacian, validated to be finite and cached per graph
- :class:`StructureGraph` built from adjacency matrices, structure files,
  crystal records or molecular graphs, with optional on-disk caching

The project is intentionally modular:
- Base installation depends on NumPy, SciPy, ASE and joblib.
- Extras:
  - `atomgraph[crystal]` installs `pymatgen` (crystal records)
  - `atomgraph[molecule]` installs `rdkit` (molecular graphs)
"""

from __future__ import annotations

from .config import DEFAULT_CONFIG, GraphBuildConfig
from .errors import (
    AtomGraphError,
    ElementCountError,
    LaplacianError,
    NeighborSearchError,
    StructureReadError,
)
from .core import (
    StructureGraph,
    from_adjacency,
    from_atoms,
    from_crystal,
    from_file,
    from_molecule,
)
from .logging_config import setup_logging

__all__ = [
    "__version__",
    "StructureGraph",
    "from_adjacency",
    "from_atoms",
    "from_crystal",
    "from_file",
    "from_molecule",
    "GraphBuildConfig",
    "DEFAULT_CONFIG",
    "AtomGraphError",
    "ElementCountError",
    "LaplacianError",
    "NeighborSearchError",
    "StructureReadError",
    "setup_logging",
]

__version__ = "0.1.0"
