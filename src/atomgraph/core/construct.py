"""Construction entry points for :class:`StructureGraph`.

Supported sources:

- :func:`from_adjacency`: a weight matrix plus element symbols
- :func:`from_file`: any ``ase.io`` structure file, or a serialized graph
- :func:`from_atoms`: an in-memory ``ase.Atoms``
- :func:`from_crystal`: a pymatgen ``Structure``/``Molecule`` (or ``ase.Atoms``)
- :func:`from_molecule`: an RDKit ``Mol`` (unweighted, bonds only)

``from_file`` never raises for a bad input structure: missing files and
failures of the read / neighbour / Laplacian pipeline are logged and ``None``
is returned. The other entry points let errors propagate.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from ase import Atoms

from ..config import GraphBuildConfig, resolve_config
from ..errors import LaplacianError, NeighborSearchError, StructureReadError
from ..graph.cache import deserialize, is_graph_artifact, serialize
from ..graph.decay import DecayFn
from ..graph.neighbors import find_neighbors
from ..structure.io import read_structure_data
from ..structure.molecule import molecule_adjacency, molecule_atom_count, molecule_elements
from ..structure.records import StructureData, StructureSource
from .structure_graph import StructureGraph

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]

# Failures of the file pipeline that are reported as "no graph".
BUILD_ERRORS = (StructureReadError, NeighborSearchError, LaplacianError)


def _build(data: StructureData, config: GraphBuildConfig, source: StructureSource, id: str) -> StructureGraph:
    adjacency, elements = find_neighbors(
        data.positions,
        data.species,
        data.periodicity,
        cutoff_radius=config.cutoff_radius,
        max_num_nbr=config.max_num_nbr,
        decay_fn=config.resolve_decay(),
        use_voronoi=config.use_voronoi,
    )
    return StructureGraph(adjacency, elements, structure=source, id=id)


def _persist(graph: StructureGraph, output_path: PathLike, overwrite: bool) -> bool:
    out = Path(output_path)
    if out.exists() and not overwrite:
        logger.info(
            f"Output file {out} already exists, and `overwrite` is set to False. "
            "If you want to overwrite the existing graph, set `overwrite=True`, "
            "or remove the existing file and retry."
        )
        return False
    if not is_graph_artifact(out):
        logger.warning(
            f"{out} does not have a serialized-graph suffix; it will not be recognised by from_file()."
        )
    serialize(out, graph)
    logger.debug(f"Serialized graph {graph.id!r} to {out}")
    return True


def from_adjacency(
    adjacency,
    elements: Sequence[str],
    structure: Any = None,
    id: str = "",
) -> StructureGraph:
    """Build directly from an adjacency matrix.

    Raises:
        ElementCountError: if ``len(elements)`` differs from the node count.
        LaplacianError: if some node has zero total edge weight.
    """
    return StructureGraph(adjacency, elements, structure=structure, id=id)


def from_file(
    input_path: PathLike,
    id: Optional[str] = None,
    *,
    output_path: Optional[PathLike] = None,
    overwrite: bool = False,
    use_voronoi: Optional[bool] = None,
    cutoff_radius: Optional[float] = None,
    max_num_nbr: Optional[int] = None,
    decay_fn: Union[str, DecayFn, None] = None,
    config: Optional[GraphBuildConfig] = None,
) -> Optional[StructureGraph]:
    """Build a graph from a structure file, or load a serialized one.

    Args:
        input_path: structure file readable by ``ase.io.read``, or a graph
            previously written with ``output_path``.
        id: label for the graph. Defaults to the file name without suffix.
        output_path: if given, newly built graphs are serialized here.
        overwrite: whether to replace an existing file at ``output_path``.
        use_voronoi: build neighbour lists from Voronoi face sharing.
        cutoff_radius: cutoff-mode neighbour distance, in Angstroms.
        max_num_nbr: cutoff-mode soft neighbour limit. Atoms tied at the
            limiting distance are all kept, so lists can be longer.
        decay_fn: name or callable mapping distances to edge weights.
        config: base configuration; the keyword arguments above override it.

    Returns:
        The graph, or None if the file does not exist or the graph could not
        be built.
    """
    p = Path(input_path)
    if id is None:
        id = p.stem

    if not p.is_file():
        logger.warning(f"{p} does not exist. Cannot build graph from a non-existent file.")
        return None

    if is_graph_artifact(p):
        graph = deserialize(p)
        if not isinstance(graph, StructureGraph):
            raise TypeError(f"{p} does not contain a StructureGraph (got {type(graph).__name__})")
        graph.id = id
        return graph

    cfg = resolve_config(
        config,
        use_voronoi=use_voronoi,
        cutoff_radius=cutoff_radius,
        max_num_nbr=max_num_nbr,
        decay_fn=decay_fn,
    )

    try:
        data, atoms = read_structure_data(p)
        graph = _build(data, cfg, StructureSource("atoms", atoms, str(p)), id)
    except BUILD_ERRORS as e:
        logger.warning(f"Unable to build graph for {p}: {e}")
        return None

    if output_path is not None:
        _persist(graph, output_path, overwrite)

    return graph


def from_atoms(
    atoms: Atoms,
    id: str = "",
    *,
    use_voronoi: Optional[bool] = None,
    cutoff_radius: Optional[float] = None,
    max_num_nbr: Optional[int] = None,
    decay_fn: Union[str, DecayFn, None] = None,
    config: Optional[GraphBuildConfig] = None,
) -> StructureGraph:
    """Build a graph from an in-memory ``ase.Atoms`` (cutoff or Voronoi mode)."""
    if not isinstance(atoms, Atoms):
        raise TypeError(f"Expected ase.Atoms, got {type(atoms).__name__!r}")
    cfg = resolve_config(
        config,
        use_voronoi=use_voronoi,
        cutoff_radius=cutoff_radius,
        max_num_nbr=max_num_nbr,
        decay_fn=decay_fn,
    )
    return _build(StructureData.from_atoms(atoms), cfg, StructureSource("atoms", atoms), id)


def from_crystal(
    crystal: Any,
    id: str = "",
    *,
    cutoff_radius: Optional[float] = None,
    max_num_nbr: Optional[int] = None,
    decay_fn: Union[str, DecayFn, None] = None,
    config: Optional[GraphBuildConfig] = None,
) -> StructureGraph:
    """Build a graph from a crystal record.

    Accepts a pymatgen ``Structure``/``Molecule`` or an ``ase.Atoms``. Only
    cutoff-based neighbour lists are supported here; ``use_voronoi`` in
    ``config`` is ignored.
    """
    cfg = resolve_config(
        config,
        cutoff_radius=cutoff_radius,
        max_num_nbr=max_num_nbr,
        decay_fn=decay_fn,
    ).with_overrides(use_voronoi=False)

    source = StructureSource.wrap(crystal)
    if source.kind == "atoms":
        data = StructureData.from_atoms(crystal)
    elif source.kind == "crystal":
        data = StructureData.from_pymatgen(crystal)
    else:
        raise TypeError(f"Expected a pymatgen structure or ase.Atoms, got {type(crystal).__name__!r}")

    return _build(data, cfg, source, id)


def from_molecule(mol: Any, id: str = "") -> Optional[StructureGraph]:
    """Build an unweighted graph from an RDKit ``Mol``.

    There is no 3D information, so every bond gets weight 1. Single-atom
    molecules have no meaningful Laplacian and return None.
    """
    if molecule_atom_count(mol) <= 1:
        logger.info("A single-node graph is not very interesting...and also hard to compute a Laplacian for.")
        return None

    adjacency = molecule_adjacency(mol)
    elements = molecule_elements(mol)
    return StructureGraph(adjacency, elements, structure=StructureSource("molecule", mol), id=id)
