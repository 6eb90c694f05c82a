"""Adjacency matrix construction.

This module converts directed, weighted neighbour pairs into sparse adjacency
matrices.

- input: parallel arrays ``src``, ``dst``, ``weights`` of length E
- output: SciPy sparse CSR matrix of shape (N, N)

Several entries for the same directed pair (e.g. distinct periodic images of
the same atom) are summed. The undirected weight of an edge is then the larger
of its two directed weights, so a pair found from both ends is counted once.
"""

from __future__ import annotations

import numpy as np
import scipy.sparse as sp


def adjacency_from_pairs(
    src: np.ndarray,
    dst: np.ndarray,
    weights: np.ndarray,
    n_nodes: int,
    *,
    symmetric: bool = True,
    remove_self_loops: bool = True,
    dtype: np.dtype = np.float64,
) -> "sp.csr_matrix":
    """Build a sparse weighted adjacency matrix from directed pairs.

    Args:
        src: source node indices, shape (E,).
        dst: destination node indices, shape (E,).
        weights: edge weights, shape (E,). Must be finite and non-negative.
        n_nodes: number of nodes N.
        symmetric: if True, return ``max(W, W.T)``.
        remove_self_loops: if True, discard i->i entries.
        dtype: dtype for adjacency data.

    Returns:
        A: SciPy CSR sparse matrix of shape (N, N).
    """
    rows = np.asarray(src, dtype=np.int64).reshape(-1)
    cols = np.asarray(dst, dtype=np.int64).reshape(-1)
    data = np.asarray(weights, dtype=dtype).reshape(-1)

    if not (rows.shape == cols.shape == data.shape):
        raise ValueError(
            f"src, dst and weights must have the same length, got {rows.shape}, {cols.shape}, {data.shape}"
        )
    if n_nodes < 0:
        raise ValueError(f"n_nodes must be non-negative, got {n_nodes}")
    if rows.size and (rows.min() < 0 or cols.min() < 0 or rows.max() >= n_nodes or cols.max() >= n_nodes):
        raise ValueError(f"node indices out of range for n_nodes={n_nodes}")
    if data.size and (not np.all(np.isfinite(data)) or data.min() < 0):
        raise ValueError("edge weights must be finite and non-negative")

    if remove_self_loops:
        mask = rows != cols
        rows, cols, data = rows[mask], cols[mask], data[mask]

    # duplicates are summed on conversion
    A = sp.coo_matrix((data, (rows, cols)), shape=(n_nodes, n_nodes)).tocsr()

    if symmetric:
        A = A.maximum(A.T).tocsr()

    A.eliminate_zeros()
    A.sort_indices()
    return A


def dense_to_csr(adjacency, *, dtype: np.dtype = np.float64) -> "sp.csr_matrix":
    """Convert a dense or sparse square matrix to a clean CSR adjacency."""
    A = sp.csr_matrix(adjacency, dtype=dtype, copy=True)
    if A.shape[0] != A.shape[1]:
        raise ValueError(f"Adjacency must be square, got shape={A.shape}")
    A.eliminate_zeros()
    A.sort_indices()
    return A
