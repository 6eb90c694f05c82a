"""Filesystem caching of built graphs.

Building a graph from a structure file (parsing + neighbour search +
Laplacian) is the expensive part of the pipeline, so built
:class:`~atomgraph.core.StructureGraph` objects can be persisted and reloaded.

Artifacts are written with :func:`joblib.dump`, which stores NumPy/SciPy
buffers verbatim, so a reload reproduces the arrays bit for bit. A path is
recognised as a serialized graph by its suffix (:data:`GRAPH_ARTIFACT_SUFFIXES`).

This module provides:
- artifact detection
- atomic serialize / deserialize helpers
"""

from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Any

import joblib

GRAPH_ARTIFACT_SUFFIXES = (".agz", ".joblib", ".pkl")


def is_graph_artifact(path: os.PathLike) -> bool:
    """True if ``path`` has a serialized-graph suffix."""
    return Path(path).suffix.lower() in GRAPH_ARTIFACT_SUFFIXES


def serialize(path: os.PathLike, obj: Any, *, compress: int = 0) -> Path:
    """Atomically write ``obj`` to ``path``.

    The object is dumped to a temporary sibling file that then replaces
    ``path``, so readers never see a partially written artifact.
    """
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    tmp = p.with_name(p.name + f".tmp.{os.getpid()}.{uuid.uuid4().hex}")
    try:
        with open(tmp, "wb") as f:
            joblib.dump(obj, f, compress=compress)
        os.replace(tmp, p)
    finally:
        if tmp.exists():
            tmp.unlink()
    return p


def deserialize(path: os.PathLike) -> Any:
    """Load an object written by :func:`serialize`."""
    return joblib.load(Path(path))
