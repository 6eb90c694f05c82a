"""Neighbour search for atomic structures.

Two strategies are provided, both returning *directed* neighbour pairs
``(src, dst, distance)``:

- :func:`cutoff_neighbors`: every atom within ``cutoff_radius`` (including
  periodic images), trimmed to the ``max_num_nbr`` nearest per atom. The limit
  is soft: candidates tied with the ``max_num_nbr``-th distance are kept too.
  Pair enumeration uses ``ase.neighborlist.neighbor_list``.
- :func:`voronoi_neighbors`: atoms whose Voronoi cells share a face, via
  ``scipy.spatial.Voronoi``. Periodic structures are tiled into the 3x3x3 block
  of neighbouring images first.

:func:`find_neighbors` runs either strategy, applies a decay function and
returns the weighted adjacency matrix.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import product
from typing import Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp
from ase import Atoms
from ase.neighborlist import neighbor_list
from scipy.spatial import QhullError, Voronoi

from ..errors import NeighborSearchError
from .adjacency import adjacency_from_pairs
from .decay import DecayFn, inverse_square

logger = logging.getLogger(__name__)

# Distances within this tolerance of the max_num_nbr-th distance count as tied.
TIE_RTOL = 1e-6
TIE_ATOL = 1e-9


@dataclass(frozen=True)
class Periodicity:
    """Lattice vectors (rows of ``cell``) and per-axis periodic flags."""

    cell: np.ndarray
    pbc: Tuple[bool, bool, bool] = (True, True, True)

    def __post_init__(self) -> None:
        cell = np.asarray(self.cell, dtype=np.float64)
        if cell.shape != (3, 3):
            raise ValueError(f"cell must have shape (3, 3), got {cell.shape}")
        pbc = tuple(bool(p) for p in np.broadcast_to(np.asarray(self.pbc, dtype=bool), (3,)))
        periodic = [k for k, p in enumerate(pbc) if p]
        if periodic and np.linalg.matrix_rank(cell[periodic]) < len(periodic):
            raise NeighborSearchError(
                f"singular periodic cell: lattice vectors along periodic axes {periodic} are "
                f"linearly dependent (cell={cell.tolist()})"
            )
        object.__setattr__(self, "cell", cell)
        object.__setattr__(self, "pbc", pbc)

    @property
    def is_periodic(self) -> bool:
        return any(self.pbc)


def _validate_positions(positions, species: Optional[Sequence[str]] = None) -> np.ndarray:
    pos = np.asarray(positions, dtype=np.float64)
    if pos.ndim != 2 or pos.shape[1] != 3:
        raise NeighborSearchError(f"positions must have shape (N, 3), got shape={pos.shape}")
    if pos.shape[0] == 0:
        raise NeighborSearchError("structure contains no atoms")
    if not np.all(np.isfinite(pos)):
        raise NeighborSearchError("positions contain non-finite values")
    if species is not None and len(species) != pos.shape[0]:
        raise NeighborSearchError(
            f"species length ({len(species)}) does not match number of positions ({pos.shape[0]})"
        )
    return pos


def _soft_nearest_mask(
    src: np.ndarray,
    dist: np.ndarray,
    n_atoms: int,
    max_num_nbr: int,
) -> np.ndarray:
    """Mask of pairs within the soft ``max_num_nbr`` limit of their source atom.

    ``src`` must be grouped by source atom and sorted by distance within each
    group.
    """
    counts = np.bincount(src, minlength=n_atoms)
    starts = np.concatenate(([0], np.cumsum(counts)[:-1]))

    threshold = np.full(n_atoms, np.inf)
    full = counts >= max_num_nbr
    threshold[full] = dist[starts[full] + max_num_nbr - 1]

    limit = threshold[src] * (1.0 + TIE_RTOL) + TIE_ATOL
    return dist <= limit


def cutoff_neighbors(
    positions,
    periodicity: Optional[Periodicity] = None,
    *,
    cutoff_radius: float = 8.0,
    max_num_nbr: int = 12,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return directed neighbour pairs within a cutoff radius.

    Args:
        positions: Cartesian coordinates, shape (N, 3).
        periodicity: lattice and periodic flags, or None for an isolated system.
        cutoff_radius: largest allowed neighbour distance.
        max_num_nbr: soft limit on the number of neighbours per atom.

    Returns:
        (src, dst, distance) arrays, grouped by ``src`` and sorted by distance
        within each group. Periodic self-images (``src == dst``) are excluded.
    """
    pos = _validate_positions(positions)
    if not cutoff_radius > 0:
        raise NeighborSearchError(f"cutoff_radius must be positive, got {cutoff_radius}")
    if int(max_num_nbr) < 1:
        raise NeighborSearchError(f"max_num_nbr must be >= 1, got {max_num_nbr}")

    if periodicity is not None and periodicity.is_periodic:
        atoms = Atoms(positions=pos, cell=periodicity.cell, pbc=periodicity.pbc)
    else:
        atoms = Atoms(positions=pos, pbc=False)

    try:
        src, dst, dist = neighbor_list("ijd", atoms, float(cutoff_radius), self_interaction=False)
    except (ValueError, RuntimeError) as e:
        raise NeighborSearchError(f"neighbour search failed for {pos.shape[0]} atoms: {e}") from e

    mask = src != dst
    src, dst, dist = src[mask], dst[mask], dist[mask]

    order = np.lexsort((dist, src))
    src, dst, dist = src[order], dst[order], dist[order]

    keep = _soft_nearest_mask(src, dist, pos.shape[0], int(max_num_nbr))
    logger.debug(
        f"cutoff search: {src.size} candidate pairs within {cutoff_radius}, kept {int(keep.sum())}"
    )
    return src[keep], dst[keep], dist[keep]


def _tile_images(pos: np.ndarray, periodicity: Optional[Periodicity]) -> Tuple[np.ndarray, np.ndarray]:
    """Return (points, owner) with the central-cell atoms first."""
    n = pos.shape[0]
    if periodicity is None or not periodicity.is_periodic:
        return pos, np.arange(n)

    ranges = [(0, -1, 1) if p else (0,) for p in periodicity.pbc]
    shifts = np.array(list(product(*ranges)), dtype=np.float64)  # (0, 0, 0) first
    offsets = shifts @ periodicity.cell
    points = (pos[None, :, :] + offsets[:, None, :]).reshape(-1, 3)
    owner = np.tile(np.arange(n), shifts.shape[0])
    return points, owner


def voronoi_neighbors(
    positions,
    periodicity: Optional[Periodicity] = None,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Return directed pairs of atoms whose Voronoi cells share a face.

    Returns:
        (src, dst, distance) arrays. ``src`` indexes central-cell atoms, ``dst``
        the atom owning the neighbouring (possibly image) point.
    """
    pos = _validate_positions(positions)
    n = pos.shape[0]
    points, owner = _tile_images(pos, periodicity)

    try:
        vor = Voronoi(points)
    except (QhullError, ValueError) as e:
        raise NeighborSearchError(f"Voronoi tessellation failed for {n} atoms: {e}") from e

    ridge = np.asarray(vor.ridge_points, dtype=np.int64)
    a = np.concatenate([ridge[:, 0], ridge[:, 1]])
    b = np.concatenate([ridge[:, 1], ridge[:, 0]])

    central = a < n
    a, b = a[central], b[central]
    dist = np.linalg.norm(points[a] - points[b], axis=1)
    src, dst = a, owner[b]

    mask = src != dst
    logger.debug(f"voronoi search: {int(mask.sum())} face-sharing pairs for {n} atoms")
    return src[mask], dst[mask], dist[mask]


def _apply_decay(decay_fn: DecayFn, dist: np.ndarray) -> np.ndarray:
    """Evaluate ``decay_fn`` on every distance.

    Vectorized callables get the whole array. Callables that only accept
    scalars (they raise, or return something other than one weight per
    distance) are evaluated element by element.
    """
    try:
        weights = np.asarray(decay_fn(dist), dtype=np.float64)
    except (TypeError, ValueError):
        weights = None
    if weights is not None and weights.shape == dist.shape:
        return weights

    try:
        return np.fromiter((decay_fn(float(x)) for x in dist), dtype=np.float64, count=dist.size)
    except (TypeError, ValueError, ArithmeticError) as e:
        raise NeighborSearchError(f"decay function failed on {dist.size} distances: {e}") from e


def find_neighbors(
    positions,
    species: Sequence[str],
    periodicity: Optional[Periodicity] = None,
    *,
    cutoff_radius: float = 8.0,
    max_num_nbr: int = 12,
    decay_fn: DecayFn = inverse_square,
    use_voronoi: bool = False,
) -> Tuple["sp.csr_matrix", Tuple[str, ...]]:
    """Build the weighted adjacency matrix of an atomic structure.

    Args:
        positions: Cartesian coordinates, shape (N, 3).
        species: element symbol per atom, length N.
        periodicity: lattice and periodic flags, or None.
        cutoff_radius: cutoff-mode neighbour distance (ignored for Voronoi).
        max_num_nbr: cutoff-mode soft neighbour limit (ignored for Voronoi).
        decay_fn: maps distances to edge weights; vectorized or scalar-only.
        use_voronoi: use Voronoi face sharing instead of the cutoff.

    Returns:
        (A, elements): symmetric zero-diagonal CSR adjacency of shape (N, N)
        and the element symbols in input order.
    """
    pos = _validate_positions(positions, species)
    elements = tuple(str(s) for s in species)

    if use_voronoi:
        src, dst, dist = voronoi_neighbors(pos, periodicity)
    else:
        src, dst, dist = cutoff_neighbors(
            pos,
            periodicity,
            cutoff_radius=cutoff_radius,
            max_num_nbr=max_num_nbr,
        )

    weights = _apply_decay(decay_fn, dist)
    if weights.size and (not np.all(np.isfinite(weights)) or weights.min() < 0):
        raise NeighborSearchError(
            "decay function produced non-finite or negative edge weights; "
            "check for overlapping atoms (zero interatomic distance)"
        )

    A = adjacency_from_pairs(src, dst, weights, pos.shape[0])
    return A, elements
