import math

import pytest

from tree_visualizer.config import LayoutConfig
from tree_visualizer.core.document import TreeDocument
from tree_visualizer.core.math_utils import Vector2D, stable_seed
from tree_visualizer.layouts import (
    LayoutKind,
    compute_layout,
    get_layout,
    list_layouts,
)
from tree_visualizer.layouts.layout_hierarchical import collect_levels

CANVAS = (800.0, 600.0)

CENTER = Vector2D(CANVAS[0] / 2, CANVAS[1] / 2)


def positions(doc):
    return {n.id: n.position for n in doc.root.iter_nodes()}


def angle_of(offset):
    return math.atan2(offset.y, offset.x)


def angle_in_sector(angle, start, end):
    """Strictly inside (start, end), measured counter-clockwise modulo 2*pi."""
    if end - start >= 2 * math.pi:
        return True
    offset = (angle - start) % (2 * math.pi)
    return 0 < offset < end - start


def test_all_strategies_registered():
    assert set(list_layouts()) >= {"hierarchical", "radial", "organic", "force"}


def test_unknown_strategy():
    with pytest.raises(KeyError, match="Available"):
        compute_layout(TreeDocument().root, CANVAS, 1.0, "spiral")


def test_layout_kind_accepted():
    assert get_layout(LayoutKind.RADIAL).name == "radial"


@pytest.mark.parametrize("strategy", ["hierarchical", "radial", "organic", "force"])
def test_collapsed_subtree_is_not_visited(branching_document, strategy):
    doc = branching_document
    doc.toggle_expand("2")

    compute_layout(doc.root, CANVAS, 1.0, strategy)

    assert doc.find("2").position is not None
    assert doc.find("5").position is None
    assert doc.find("6").position is None
    assert doc.find("7").position is not None


@pytest.mark.parametrize("strategy", ["hierarchical", "radial", "organic", "force"])
def test_hidden_nodes_keep_last_position(branching_document, strategy):
    doc = branching_document
    compute_layout(doc.root, CANVAS, 1.0, "hierarchical")
    before = doc.find("5").position
    doc.toggle_expand("2")

    compute_layout(doc.root, CANVAS, 1.0, strategy)

    assert doc.find("5").position == before


# ---------- hierarchical ----------

def test_collect_levels_uses_document_order(branching_document):
    levels = collect_levels(branching_document.root)

    assert [[n.id for n in nodes] for nodes in levels.values()] == [
        ["1"], ["2", "3", "4"], ["5", "6", "7"],
    ]


def test_hierarchical_rows(branching_document):
    doc = branching_document
    compute_layout(doc.root, CANVAS, 1.0, "hierarchical")
    pos = positions(doc)

    assert pos["1"] == Vector2D(400, 75)
    assert [pos[i] for i in ("2", "3", "4")] == [
        Vector2D(310, 195), Vector2D(400, 195), Vector2D(490, 195),
    ]
    assert {pos[i].y for i in ("5", "6", "7")} == {315}


def test_hierarchical_distinct_x_and_centred_single(chain_document):
    doc = chain_document
    doc.add_child("1")
    compute_layout(doc.root, CANVAS, 2.0, "hierarchical")
    pos = positions(doc)

    # level 1 has two nodes, level 2 only "3"
    assert pos["2"].x != pos["4"].x
    assert (pos["2"].x + pos["4"].x) / 2 == pytest.approx(400)
    assert pos["4"].x - pos["2"].x == pytest.approx(180)
    assert pos["3"].x == 400
    assert pos["3"].y == pytest.approx(2 * 120 * 2.0 + 75)


# ---------- radial ----------

def test_radial_root_and_ring_radii(chain_document):
    compute_layout(chain_document.root, CANVAS, 1.0, "radial")
    pos = positions(chain_document)

    assert pos["1"] == CENTER
    assert pos["2"].distance_to(pos["1"]) == pytest.approx(80)
    assert pos["3"].distance_to(pos["2"]) == pytest.approx(56)


def test_radial_children_stay_in_parent_sector(document):
    doc = document
    doc.add_random_subtree("1", max_depth=4, seed=11)
    compute_layout(doc.root, CANVAS, 1.0, "radial")

    def check(node, start, end):
        if not node.children:
            return
        step = (end - start) / len(node.children)
        for i, child in enumerate(node.children):
            angle = angle_of(child.position - node.position)
            assert angle_in_sector(angle, start, end)
            check(child, start + i * step, start + (i + 1) * step)

    for i, child in enumerate(doc.root.children):
        step = 2 * math.pi / len(doc.root.children)
        check(child, i * step, (i + 1) * step)


def test_radial_four_children_quarter_slices(document):
    for _ in range(4):
        document.add_child("1")
    compute_layout(document.root, CANVAS, 1.0, "radial")

    first = document.find("2").position - CENTER
    assert angle_of(first) == pytest.approx(math.pi / 4)


# ---------- organic ----------

def test_organic_is_deterministic(branching_document):
    doc = branching_document
    compute_layout(doc.root, CANVAS, 1.0, "organic")
    first = positions(doc)
    compute_layout(doc.root, CANVAS, 1.0, "organic")

    assert positions(doc) == first
    assert first["1"] == CENTER


def test_organic_distance_band(branching_document):
    doc = branching_document
    compute_layout(doc.root, CANVAS, 2.0, "organic")

    for node in doc.root.iter_nodes():
        for child in node.children:
            distance = child.position.distance_to(node.position)
            assert 200 <= distance <= 300


def test_organic_offset_depends_on_own_id(branching_document):
    doc = branching_document
    compute_layout(doc.root, CANVAS, 1.0, "organic")
    offset = doc.find("2").position - doc.root.position

    # Growing the child's own subtree does not move it relative to its parent
    doc.add_child("2")
    compute_layout(doc.root, CANVAS, 1.0, "organic")
    assert doc.find("2").position - doc.root.position == offset


def test_stable_seed_is_crc32():
    assert stable_seed("1") == 2212294583
    assert stable_seed("2") != stable_seed("1")


# ---------- force ----------

def test_force_root_pinned_at_centre(branching_document):
    compute_layout(branching_document.root, CANVAS, 1.0, "force")

    assert branching_document.root.position == CENTER


def test_force_single_node():
    doc = TreeDocument()
    compute_layout(doc.root, CANVAS, 1.0, "force")

    assert doc.root.position == CENTER


def test_force_is_deterministic_and_finite(branching_document):
    doc = branching_document
    compute_layout(doc.root, CANVAS, 1.0, "force")
    first = positions(doc)
    compute_layout(doc.root, CANVAS, 1.0, "force")

    assert positions(doc) == first
    for p in first.values():
        assert math.isfinite(p.x) and math.isfinite(p.y)


def test_force_springs_pull_children_towards_rest_length(document):
    document.add_child("1")
    config = LayoutConfig(force_repulsion=0.0)

    compute_layout(document.root, CANVAS, 1.0, "force", config)

    child = document.find("2")
    assert child.position.distance_to(document.root.position) == pytest.approx(100, abs=3.0)


def test_force_no_iterations_keeps_seeded_positions(document):
    document.add_child("1")
    config = LayoutConfig(force_iterations=0)

    compute_layout(document.root, CANVAS, 1.0, "force", config)

    child = document.find("2").position
    assert 0 <= child.x <= CANVAS[0]
    assert 0 <= child.y <= CANVAS[1]
