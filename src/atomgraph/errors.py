"""Exception types raised by atomgraph.

Each error also derives from the builtin it specializes (``ValueError`` /
``OSError``) so callers that only know the builtin still catch it.

The file-based construction path (:func:`atomgraph.core.construct.from_file`)
downgrades :class:`StructureReadError`, :class:`NeighborSearchError` and
:class:`LaplacianError` to an absent result. Anything else propagates.
"""

from __future__ import annotations


class AtomGraphError(Exception):
    """Base class for atomgraph errors."""


class ElementCountError(AtomGraphError, ValueError):
    """Element list length does not match the number of graph nodes."""


class LaplacianError(AtomGraphError, ValueError):
    """The normalized Laplacian contains non-finite values."""


class NeighborSearchError(AtomGraphError, ValueError):
    """Neighbor search failed or produced unusable edge weights."""


class StructureReadError(AtomGraphError, OSError):
    """A structure file could not be read or parsed."""


__all__ = [
    "AtomGraphError",
    "ElementCountError",
    "LaplacianError",
    "NeighborSearchError",
    "StructureReadError",
]
