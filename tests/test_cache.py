import logging

import numpy as np


def test_is_graph_artifact():
    from atomgraph.graph.cache import is_graph_artifact

    assert is_graph_artifact("a/b/graph.agz")
    assert is_graph_artifact("graph.JOBLIB")
    assert is_graph_artifact("graph.pkl")
    assert not is_graph_artifact("POSCAR")
    assert not is_graph_artifact("structure.cif")


def test_serialize_round_trip(tmp_path):
    from atomgraph import from_adjacency
    from atomgraph.graph.cache import deserialize, serialize

    g = from_adjacency(np.array([[0.0, 0.25], [0.25, 0.0]]), ["Na", "Cl"], id="x")
    out = serialize(tmp_path / "sub" / "g.agz", g)

    assert out.exists()
    # no temporary files left behind
    assert [p.name for p in out.parent.iterdir()] == ["g.agz"]

    g2 = deserialize(out)
    assert g2.id == "x"
    assert g2.elements == g.elements
    assert np.array_equal(g2.laplacian, g.laplacian)
    assert np.array_equal(g2.graph.toarray(), g.graph.toarray())
    assert g2.structure.obj is g2.graph


def test_serialize_replaces_existing_file(tmp_path):
    from atomgraph.graph.cache import deserialize, serialize

    p = tmp_path / "obj.pkl"
    p.write_bytes(b"old")
    serialize(p, {"a": 1})
    assert deserialize(p) == {"a": 1}


def test_setup_logging_file(tmp_path):
    from atomgraph import setup_logging

    log_file = tmp_path / "atomgraph.log"
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))
    try:
        logging.getLogger("atomgraph.core.construct").info("hello from construct")
        for h in logger.handlers:
            h.flush()
        assert "hello from construct" in log_file.read_text(encoding="utf-8")
        # calling again does not duplicate handlers
        logger = setup_logging(logging.INFO)
        assert len(logger.handlers) == 1
    finally:
        for h in list(logger.handlers):
            h.close()
        logger.handlers.clear()
        logger.setLevel(logging.NOTSET)
