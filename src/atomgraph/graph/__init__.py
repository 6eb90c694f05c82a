"""Graph construction for atomic structures.

Pipeline building blocks, leaf first:

- Distance-decay functions mapping interatomic distances to edge weights
- Cutoff (soft nearest-k) and Voronoi neighbour search
- Conversion of neighbour pairs to a SciPy sparse weighted adjacency matrix
- Normalized graph Laplacian with a finiteness check
- joblib-based caching of built graphs
"""

from __future__ import annotations

from .decay import DECAY_FUNCTIONS, exponential, get_decay_function, inverse, inverse_square
from .adjacency import adjacency_from_pairs, dense_to_csr
from .neighbors import Periodicity, cutoff_neighbors, find_neighbors, voronoi_neighbors
from .laplacian import normalized_laplacian
from .cache import deserialize, is_graph_artifact, serialize

__all__ = [
    "DECAY_FUNCTIONS",
    "inverse_square",
    "inverse",
    "exponential",
    "get_decay_function",
    "adjacency_from_pairs",
    "dense_to_csr",
    "Periodicity",
    "cutoff_neighbors",
    "voronoi_neighbors",
    "find_neighbors",
    "normalized_laplacian",
    "serialize",
    "deserialize",
    "is_graph_artifact",
]
