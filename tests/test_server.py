import io
import json

import pytest

from tree_visualizer.core.errors import NodeNotFoundError
from tree_visualizer.server import BridgeSession, serve


def run(session, *requests):
    """Feed JSON-line requests through the bridge and decode every response."""
    lines = [json.dumps(r) if isinstance(r, dict) else r for r in requests]
    out = io.StringIO()
    serve(session, lines, out=out)
    return [json.loads(line) for line in out.getvalue().splitlines()]


@pytest.fixture
def session():
    return BridgeSession()


def test_ready_then_ping(session):
    ready, pong = run(session, {"id": "a", "command": "ping"})

    assert ready["id"] == "__ready__" and ready["success"]
    assert "add_child" in ready["result"]["commands"]
    assert pong == {"id": "a", "success": True, "result": {"status": "alive", "pid": pong["result"]["pid"]}}


def test_add_child_relayouts(session):
    _, added = run(session, {"id": "1", "command": "add_child", "data": {"parent_id": "1"}})

    assert added["result"] == {"node_id": "2"}
    assert session.document.find("2").position is not None


def test_missing_node_reported(session):
    _, response = run(session, {"id": "x", "command": "delete_subtree", "data": {"node_id": "9"}})

    assert response["success"] is False
    assert response["error_type"] == "NodeNotFoundError"
    assert response["error"] == "Node '9' not found"


def test_root_deletion_reported(session):
    _, response = run(session, {"id": "x", "command": "delete_subtree", "data": {"node_id": "1"}})

    assert response["error_type"] == "RootDeletionError"
    assert session.document.find("1") is session.document.root


def test_bad_json_does_not_stop_loop(session):
    responses = run(session, "{not json", {"id": "p", "command": "ping"})

    assert responses[1]["success"] is False
    assert responses[1]["error_type"] == "JSONDecodeError"
    assert responses[2]["id"] == "p" and responses[2]["success"]


def test_non_object_request_does_not_stop_loop(session):
    responses = run(
        session,
        "[1, 2]",
        {"id": "s", "command": "search", "data": [1]},
        {"id": "m", "command": "add_child", "data": {"parent_id": "1", "metadata": [1]}},
        {"id": "p", "command": "ping"},
    )

    assert [r["success"] for r in responses[1:]] == [False, False, False, True]
    assert responses[1]["id"] == "unknown"
    assert responses[1]["error"] == "request must be a JSON object"
    assert responses[2]["id"] == "s"
    assert responses[2]["error"] == "request data must be a JSON object"
    assert responses[3]["error_type"] == "InvalidNodeValueError"
    assert responses[4]["id"] == "p"
    assert session.document.root.children == []


def test_null_label_rejected_over_bridge(session):
    session.handle("add_child", {"parent_id": "1"})
    _, response = run(
        session, {"id": "n", "command": "update_node", "data": {"node_id": "2", "label": None}},
    )

    assert response["success"] is False
    assert response["error_type"] == "InvalidNodeValueError"
    assert session.document.find("2").label == "2"


def test_unknown_command(session):
    _, response = run(session, {"id": "u", "command": "export"})

    assert response["success"] is False
    assert response["error"] == "Unknown command: export"


def test_shutdown_stops_reading(session):
    responses = run(
        session,
        {"id": "s", "command": "shutdown"},
        {"id": "late", "command": "ping"},
    )

    assert [r["id"] for r in responses] == ["__ready__", "s"]


def test_layout_hit_test_and_scene(session):
    session.handle("add_child", {"parent_id": "1"})
    session.handle("add_child", {"parent_id": "2"})

    layout = session.handle("layout", {"strategy": "radial", "canvas_size": [400, 400]})
    assert layout["strategy"] == "radial"
    assert layout["positions"]["1"] == (200.0, 200.0)

    x, y = layout["positions"]["3"]
    assert session.handle("hit_test", {"point": [x, y]}) == {"node_id": "3"}

    session.handle("toggle_expand", {"node_id": "2"})
    assert session.handle("hit_test", {"point": [x, y]}) == {"node_id": None}

    scene = session.handle("scene", {"selected": ["1", "2"], "presentation": True})
    kinds = [p["kind"] for p in scene["primitives"]]
    assert kinds == ["edge", "node", "node", "connection", "overlay"]


def test_layout_rejects_unknown_strategy(session):
    with pytest.raises(KeyError):
        session.handle("layout", {"strategy": "spiral"})
    assert session.strategy == "hierarchical"


def test_layout_strategy_name_is_case_insensitive(session):
    session.handle("add_child", {"parent_id": "1"})
    result = session.handle("layout", {"strategy": "Radial"})

    assert result["strategy"] == "radial"
    assert session.strategy == "radial"
    assert result["positions"]["1"] == (400.0, 300.0)


def test_update_and_find(session):
    session.handle("add_child", {"parent_id": "1"})
    updated = session.handle("update_node", {"node_id": "2", "label": "Plan", "size_factor": 1.5})

    assert updated["label"] == "Plan"
    assert session.handle("find", {"node_id": "2"})["size_factor"] == 1.5
    with pytest.raises(NodeNotFoundError):
        session.handle("find", {"node_id": "3"})


def test_statistics_and_search(session):
    session.handle("add_child", {"parent_id": "1", "label": "Budget"})
    session.handle("add_child", {"parent_id": "1", "label": "Roadmap"})

    stats = session.handle("statistics", {})
    assert stats["total_nodes"] == 3
    assert stats["leaf_count"] == 2

    found = session.handle("search", {"query": "budget"})
    assert found["matches"][0]["node_id"] == "2"


def test_bulk_commands(session):
    created = session.handle("add_random_subtree", {"seed": 5})["created"]
    assert created

    session.handle("collapse_all", {})
    assert [n.id for n in session.document.visible_nodes()] == \
        ["1"] + [c.id for c in session.document.root.children]

    session.handle("expand_all", {})
    assert session.handle("clear", {}) == {"removed": len(created)}
