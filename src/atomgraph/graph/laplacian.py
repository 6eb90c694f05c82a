"""Normalized graph Laplacian.

Graph-convolution models consume the normalized Laplacian of the structure
graph:

    L = I - D^{-1/2} A D^{-1/2}

where D is the diagonal matrix of weighted degrees (row sums of A).

The Laplacian is returned as a dense NumPy array: atomic graphs are small, and
the dense form is what gets cached on :class:`atomgraph.core.StructureGraph`.

A node with zero total edge weight makes ``D^{-1/2}`` undefined. Rather than
masking it, the result is checked for non-finite entries and a
:class:`atomgraph.errors.LaplacianError` is raised.
"""

from __future__ import annotations

from typing import Union

import numpy as np
import scipy.sparse as sp

from ..errors import LaplacianError

MatrixLike = Union[np.ndarray, "sp.spmatrix"]


def _as_dense(A: MatrixLike) -> np.ndarray:
    if sp.issparse(A):
        return A.toarray().astype(np.float64, copy=False)
    return np.asarray(A, dtype=np.float64)


def normalized_laplacian(A: MatrixLike, *, dtype: np.dtype = np.float32) -> np.ndarray:
    """Return ``I - D^{-1/2} A D^{-1/2}`` as a dense matrix.

    No symmetrization is applied: the result is symmetric exactly when ``A`` is.

    Args:
        A: adjacency matrix (dense or sparse), shape (N, N).
        dtype: dtype of the returned matrix.

    Raises:
        ValueError: if ``A`` is not square.
        LaplacianError: if the result contains NaN/Inf (e.g. isolated atoms).
    """
    a = _as_dense(A)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Adjacency must be square, got shape={a.shape}")

    d = a.sum(axis=1)

    # zero degrees give inf here and NaN below, caught by the check
    with np.errstate(divide="ignore", invalid="ignore"):
        inv_sqrt = d ** -0.5
        L = np.eye(a.shape[0]) - inv_sqrt[:, None] * a * inv_sqrt[None, :]

    if not np.all(np.isfinite(L)):
        bad = np.flatnonzero(~(d > 0)).tolist()
        raise LaplacianError(
            "NaN values in graph Laplacian! This is most likely due to atomic separations "
            "larger than the specified cutoff distance leading to block zeros in the adjacency "
            f"matrix (zero-degree nodes: {bad})...try increasing the cutoff radius or inspecting "
            "your structure to ensure the file is correct."
        )

    return L.astype(dtype, copy=False)
