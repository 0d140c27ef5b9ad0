from __future__ import annotations

from domain.models import Axis, DesignNode, Rect
from domain.services.spatial_relationships import (
    build_containment_forest,
    containment_parents,
    group_nodes_by_rows,
    group_nodes_into_grid,
    group_row_nodes_by_columns,
    projection_lines,
)
from tests.helpers.design_fixtures import box


def _ids(groups: list[list[DesignNode]]) -> list[list[str]]:
    return [[node.id for node in group] for group in groups]


def _child_ids(node: DesignNode) -> list[str]:
    return [child.id for child in node.children or []]


def test_containment_parents_pick_innermost_container() -> None:
    rects = [Rect(0, 0, 200, 200), Rect(10, 10, 100, 100), Rect(20, 20, 10, 10)]

    assert containment_parents(rects) == [None, 0, 1]


def test_identical_containers_resolve_to_first_in_input_order() -> None:
    nodes = [
        box("first", 0, 0, 100, 100),
        box("second", 0, 0, 100, 100),
        box("x", 10, 10, 10, 10),
    ]

    forest = build_containment_forest(nodes)

    assert [node.id for node in forest] == ["first", "second"]
    assert _child_ids(forest[0]) == ["x"]
    assert forest[1].children is None


def test_forest_nests_by_innermost_container() -> None:
    nodes = [
        box("leaf", 20, 20, 10, 10),
        box("outer", 0, 0, 200, 200),
        box("other", 150, 150, 20, 20),
        box("inner", 10, 10, 100, 100),
        box("free", 300, 0, 10, 10),
    ]

    forest = build_containment_forest(nodes)

    assert [node.id for node in forest] == ["outer", "free"]
    outer = forest[0]
    assert _child_ids(outer) == ["other", "inner"]
    inner = (outer.children or [])[1]
    assert _child_ids(inner) == ["leaf"]


def test_forest_keeps_existing_children_first() -> None:
    existing = DesignNode(id="label")
    nodes = [
        box("panel", 0, 0, 100, 100, children=[existing]),
        box("icon", 10, 10, 10, 10),
    ]

    forest = build_containment_forest(nodes)

    assert _child_ids(forest[0]) == ["label", "icon"]


def test_forest_returns_input_when_geometry_is_missing() -> None:
    nodes = [box("panel", 0, 0, 100, 100), DesignNode(id="loose")]

    assert build_containment_forest(nodes) == nodes
    assert build_containment_forest(nodes[:1]) == nodes[:1]


def test_projection_lines_merge_close_coordinates() -> None:
    rects = [Rect(0, 0, 10, 10), Rect(0, 10.5, 10, 10)]

    lines = projection_lines(rects, Axis.VERTICAL)

    assert [line.position for line in lines] == [0, 10, 20.5]
    assert [line.node_indices for line in lines] == [(0,), (0,), (1,)]
    assert projection_lines([], Axis.VERTICAL) == []


def test_grid_groups_rows_then_columns() -> None:
    nodes = [
        box("d", 50, 30, 40, 20),
        box("a", 0, 0, 40, 20),
        box("c", 0, 30, 40, 20),
        box("b", 50, 0, 40, 20),
    ]

    rows = group_nodes_by_rows(nodes)
    grid = group_nodes_into_grid(nodes)

    assert _ids(rows) == [["a", "b"], ["c", "d"]]
    assert [_ids(columns) for columns in grid] == [[["a"], ["b"]], [["c"], ["d"]]]


def test_columns_are_ordered_top_to_bottom() -> None:
    nodes = [box("low", 0, 50, 40, 20), box("high", 0, 0, 40, 20), box("side", 60, 0, 40, 20)]

    assert _ids(group_row_nodes_by_columns(nodes)) == [["high", "low"], ["side"]]


def test_nodes_spanning_several_rows_are_kept() -> None:
    nodes = [box("a", 0, 0, 40, 20), box("b", 0, 30, 40, 20), box("tall", 60, 0, 40, 50)]

    assert _ids(group_nodes_by_rows(nodes)) == [["a"], ["b"], ["tall"]]


def test_overlapping_nodes_form_a_single_row() -> None:
    nodes = [box("a", 0, 0, 10, 30), box("b", 0, 10, 10, 30)]

    assert _ids(group_nodes_by_rows(nodes)) == [["a", "b"]]
    assert _ids(group_nodes_by_rows([DesignNode(id="x")])) == [["x"]]


def test_trailing_band_is_ordered_like_the_others() -> None:
    nodes = [
        DesignNode(id="loose"),
        box("tall-right", 100, 0, 40, 50),
        box("a", 0, 0, 40, 20),
        box("tall-left", 60, 0, 30, 50),
        box("b", 0, 30, 40, 20),
    ]

    assert _ids(group_nodes_by_rows(nodes)) == [
        ["a"],
        ["b"],
        ["tall-left", "tall-right", "loose"],
    ]
