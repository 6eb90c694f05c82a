import logging
import math

import numpy as np
import pytest


def _write_xyz(path, atoms):
    from ase.io import write

    write(str(path), atoms, format="extxyz")
    return path


def test_from_file_builds_graph(tmp_path, water_atoms):
    from atomgraph import StructureGraph, from_file

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)

    g = from_file(p)
    assert isinstance(g, StructureGraph)
    assert g.id == "water"
    assert g.elements == ("O", "H", "H")
    assert g.num_nodes == 3
    assert g.laplacian.dtype == np.float32
    assert np.all(np.isfinite(g.laplacian))
    assert g.structure.kind == "atoms"
    assert g.structure.path == str(p)


def test_from_file_uses_given_id(tmp_path, water_atoms):
    from atomgraph import from_file

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)
    assert from_file(p, "mp-0001").id == "mp-0001"


def test_from_file_scalar_decay_function(tmp_path):
    from ase import Atoms

    from atomgraph import from_file

    atoms = Atoms("H3", positions=[[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 2.0, 0.0]])
    p = _write_xyz(tmp_path / "h3.xyz", atoms)

    g = from_file(p, decay_fn=lambda d: math.exp(-d))
    assert g is not None
    assert g.graph[0, 1] == pytest.approx(math.exp(-1.0))
    assert g.graph[0, 2] == pytest.approx(math.exp(-2.0))
    assert np.all(np.isfinite(g.laplacian))


def test_from_file_missing_returns_none(tmp_path, caplog):
    from atomgraph import from_file

    out = tmp_path / "out.agz"
    with caplog.at_level(logging.WARNING, logger="atomgraph"):
        g = from_file(tmp_path / "nope.cif", output_path=out)
    assert g is None
    assert not out.exists()
    assert "does not exist" in caplog.text


def test_from_file_unreadable_returns_none(tmp_path, caplog):
    from atomgraph import from_file

    p = tmp_path / "bad.xyz"
    p.write_text("this is not a structure\n")
    with caplog.at_level(logging.WARNING, logger="atomgraph"):
        assert from_file(p) is None
    assert "Unable to build graph" in caplog.text


def test_from_file_isolated_atom_returns_none(tmp_path):
    from ase import Atoms

    from atomgraph import from_file

    atoms = Atoms("H2He", positions=[[0, 0, 0], [0, 0, 0.74], [20.0, 0, 0]])
    p = _write_xyz(tmp_path / "far.xyz", atoms)

    # He is beyond the cutoff of everything -> Laplacian rejected -> None
    assert from_file(p, cutoff_radius=5.0) is None
    # a larger cutoff connects it
    assert from_file(p, cutoff_radius=25.0).num_nodes == 3


def test_from_file_voronoi_needs_enough_points(tmp_path, water_atoms):
    from atomgraph import from_file

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)
    # three atoms cannot be tessellated in 3D
    assert from_file(p, use_voronoi=True) is None


def test_round_trip_through_output_file(tmp_path, water_atoms):
    from atomgraph import from_file

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)
    out = tmp_path / "water.agz"

    g = from_file(p, "first", output_path=out)
    assert out.exists()

    g2 = from_file(out, "reloaded")
    assert g2.id == "reloaded"
    assert g.id == "first"
    assert g2.elements == g.elements
    assert np.array_equal(g2.laplacian, g.laplacian)
    assert g2.laplacian.dtype == g.laplacian.dtype
    assert np.array_equal(g2.graph.toarray(), g.graph.toarray())
    assert g2.structure.kind == "atoms"
    # reloaded graphs stay read-only
    with pytest.raises(ValueError):
        g2.laplacian[0, 0] = 0.0


def test_artifact_id_defaults_to_stem(tmp_path, water_atoms):
    from atomgraph import from_file

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)
    out = tmp_path / "cached.agz"
    from_file(p, output_path=out)
    assert from_file(out).id == "cached"


def test_overwrite_false_keeps_existing_bytes(tmp_path, water_atoms, caplog):
    from atomgraph import StructureGraph, from_file

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)
    out = tmp_path / "water.agz"
    out.write_bytes(b"precious")

    with caplog.at_level(logging.INFO, logger="atomgraph"):
        g = from_file(p, output_path=out, overwrite=False)
    assert g is not None
    assert out.read_bytes() == b"precious"
    assert "already exists" in caplog.text

    from_file(p, output_path=out, overwrite=True)
    assert out.read_bytes() != b"precious"
    assert isinstance(from_file(out), StructureGraph)


def test_deserialized_artifact_is_not_re_persisted(tmp_path, water_atoms):
    from atomgraph import from_atoms, from_file
    from atomgraph.graph.cache import serialize

    g = from_atoms(water_atoms, "w")
    art = serialize(tmp_path / "w.agz", g)
    out = tmp_path / "copy.agz"
    assert from_file(art, output_path=out) is not None
    assert not out.exists()


def test_artifact_with_wrong_content_raises(tmp_path):
    from atomgraph import from_file
    from atomgraph.graph.cache import serialize

    art = serialize(tmp_path / "junk.pkl", {"not": "a graph"})
    with pytest.raises(TypeError):
        from_file(art)


def test_from_atoms_matches_adjacency_example():
    from ase import Atoms

    from atomgraph import from_atoms

    atoms = Atoms("H2", positions=[[0, 0, 0], [2.0, 0, 0]])
    g = from_atoms(atoms)
    assert np.allclose(g.adjacency_matrix(), [[0.0, 0.25], [0.25, 0.0]])
    assert np.array_equal(g.laplacian, np.array([[1.0, -1.0], [-1.0, 1.0]], dtype=np.float32))


def test_from_atoms_decay_override(water_atoms):
    from atomgraph import from_atoms

    g_sq = from_atoms(water_atoms)
    g_inv = from_atoms(water_atoms, decay_fn="inverse")
    assert g_inv.graph[0, 1] == pytest.approx(np.sqrt(g_sq.graph[0, 1]))


def test_from_atoms_zero_cell_with_pbc_reports_singular_cell():
    from ase import Atoms

    from atomgraph import NeighborSearchError, from_atoms

    atoms = Atoms("H2", positions=[[0, 0, 0], [0.74, 0, 0]], pbc=True)
    with pytest.raises(NeighborSearchError, match="singular periodic cell"):
        from_atoms(atoms)


def test_from_file_zero_cell_with_pbc_returns_none(tmp_path, monkeypatch, caplog):
    from ase import Atoms

    from atomgraph import from_file
    import atomgraph.structure.io as structure_io

    atoms = Atoms("H2", positions=[[0, 0, 0], [0.74, 0, 0]], pbc=True)
    p = tmp_path / "h2.xyz"
    p.write_text("placeholder\n")
    monkeypatch.setattr(structure_io.ase.io, "read", lambda *a, **k: atoms)

    with caplog.at_level(logging.WARNING, logger="atomgraph"):
        assert from_file(p) is None
    assert "singular periodic cell" in caplog.text


def test_from_crystal_ase_periodic():
    from ase.build import bulk

    from atomgraph import from_crystal

    atoms = bulk("NaCl", "rocksalt", a=5.64)
    g = from_crystal(atoms, "nacl")
    assert g.elements == ("Na", "Cl")
    assert g.structure.kind == "atoms"
    assert np.all(np.isfinite(g.laplacian))


def test_from_crystal_ignores_voronoi_flag():
    from ase.build import bulk

    from atomgraph import GraphBuildConfig, from_crystal

    atoms = bulk("NaCl", "rocksalt", a=5.64)
    g_cut = from_crystal(atoms)
    g_cfg = from_crystal(atoms, config=GraphBuildConfig(use_voronoi=True))
    assert np.array_equal(g_cut.adjacency_matrix(), g_cfg.adjacency_matrix())


def test_from_crystal_pymatgen_matches_ase():
    pytest.importorskip("pymatgen")

    from ase import Atoms
    from pymatgen.core import Lattice, Structure

    from atomgraph import from_crystal

    structure = Structure(Lattice.cubic(4.0), ["Cs", "Cl"], [[0, 0, 0], [0.5, 0.5, 0.5]])
    g = from_crystal(structure, "cscl", cutoff_radius=6.0)
    assert g.elements == ("Cs", "Cl")
    assert g.structure.kind == "crystal"
    assert g.structure.obj is structure

    atoms = Atoms("CsCl", scaled_positions=[[0, 0, 0], [0.5, 0.5, 0.5]], cell=4.0 * np.eye(3), pbc=True)
    g_ase = from_crystal(atoms, cutoff_radius=6.0)
    assert np.allclose(g.adjacency_matrix(), g_ase.adjacency_matrix())


def test_from_crystal_rejects_unknown_type():
    from atomgraph import from_crystal

    with pytest.raises(TypeError):
        from_crystal(object())


def test_from_molecule():
    pytest.importorskip("rdkit")

    from rdkit import Chem

    from atomgraph import from_molecule

    g = from_molecule(Chem.MolFromSmiles("CCO"), "ethanol")
    assert g.elements == ("C", "C", "O")
    assert g.num_edges == 2
    assert g.edges() == [(0, 1, 1.0), (1, 2, 1.0)]
    assert g.structure.kind == "molecule"


def test_from_molecule_single_atom_returns_none(caplog):
    pytest.importorskip("rdkit")

    from rdkit import Chem

    from atomgraph import from_molecule

    with caplog.at_level(logging.INFO, logger="atomgraph"):
        assert from_molecule(Chem.MolFromSmiles("C")) is None
    assert "single-node" in caplog.text


def test_from_molecule_disconnected_atom_raises():
    pytest.importorskip("rdkit")

    from rdkit import Chem

    from atomgraph import LaplacianError, from_molecule

    with pytest.raises(LaplacianError):
        from_molecule(Chem.MolFromSmiles("[Na+].[Cl-]"))


def test_from_molecule_rejects_non_mol():
    pytest.importorskip("rdkit")

    from atomgraph import from_molecule

    with pytest.raises(TypeError):
        from_molecule("CCO")


def test_classmethods_delegate(tmp_path, water_atoms):
    from atomgraph import StructureGraph

    p = _write_xyz(tmp_path / "water.xyz", water_atoms)
    assert StructureGraph.from_file(p).num_nodes == 3
    assert StructureGraph.from_atoms(water_atoms, "w").id == "w"
    g = StructureGraph.from_adjacency(np.array([[0.0, 1.0], [1.0, 0.0]]), ["H", "H"], id="h2")
    assert g.id == "h2"
