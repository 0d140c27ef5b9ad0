from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.models import Axis, DesignNode, Rect
from domain.services.geometry import contains, rect_of


@dataclass(frozen=True)
class ProjectionLine:
    position: float
    axis: Axis
    node_indices: tuple[int, ...]


def containment_parents(rects: Sequence[Rect]) -> list[int | None]:
    """Index of the innermost rect containing each rect, or None for roots.

    Identical rects are peers and never nest. Among several containers the
    smallest one wins; containers of equal area resolve to the earliest index.
    """
    parents: list[int | None] = []
    for child_index, child in enumerate(rects):
        best: int | None = None
        best_area = float("inf")
        for candidate_index, candidate in enumerate(rects):
            if candidate_index == child_index or candidate == child:
                continue
            if not contains(candidate, child):
                continue
            if candidate.area < best_area:
                best = candidate_index
                best_area = candidate.area
        parents.append(best)
    return parents


def build_containment_forest(nodes: Sequence[DesignNode]) -> list[DesignNode]:
    """Nest a flat list of nodes by bounding-box containment.

    Contained nodes are appended after a parent's existing children, in input
    order. When any node has no usable geometry the input is returned as-is.
    """
    if len(nodes) <= 1:
        return list(nodes)

    rects: list[Rect] = []
    for node in nodes:
        rect = rect_of(node)
        if rect is None:
            return list(nodes)
        rects.append(rect)

    parents = containment_parents(rects)
    children_of: dict[int, list[int]] = {index: [] for index in range(len(nodes))}
    roots: list[int] = []
    for index, parent in enumerate(parents):
        if parent is None:
            roots.append(index)
        else:
            children_of[parent].append(index)

    def build(index: int) -> DesignNode:
        node = nodes[index]
        nested = [build(child) for child in children_of[index]]
        if not nested:
            return node
        return node.with_children([*(node.children or []), *nested])

    return [build(index) for index in roots]


def projection_lines(
    rects: Sequence[Rect],
    axis: Axis,
    tolerance: float = 1.0,
) -> list[ProjectionLine]:
    if not rects:
        return []

    coordinates = sorted(
        coordinate
        for rect in rects
        for coordinate in (rect.leading(axis), rect.trailing(axis))
    )
    unique: list[float] = []
    for coordinate in coordinates:
        if not unique or abs(coordinate - unique[-1]) > tolerance:
            unique.append(coordinate)

    return [
        ProjectionLine(
            position=position,
            axis=axis,
            node_indices=tuple(
                index
                for index, rect in enumerate(rects)
                if rect.leading(axis) <= position <= rect.trailing(axis)
            ),
        )
        for position in unique
    ]


def group_nodes_by_rows(
    nodes: Sequence[DesignNode],
    tolerance: float = 1.0,
) -> list[list[DesignNode]]:
    return _group_into_bands(nodes, Axis.VERTICAL, tolerance)


def group_row_nodes_by_columns(
    row_nodes: Sequence[DesignNode],
    tolerance: float = 1.0,
) -> list[list[DesignNode]]:
    return _group_into_bands(row_nodes, Axis.HORIZONTAL, tolerance)


def group_nodes_into_grid(
    nodes: Sequence[DesignNode],
    tolerance: float = 1.0,
) -> list[list[list[DesignNode]]]:
    return [group_row_nodes_by_columns(row, tolerance) for row in group_nodes_by_rows(nodes, tolerance)]


def _group_into_bands(
    nodes: Sequence[DesignNode],
    axis: Axis,
    tolerance: float,
) -> list[list[DesignNode]]:
    # Bands are cut along ``axis``; members of a band are ordered along the other axis.
    positioned: list[tuple[int, Rect]] = []
    for index, node in enumerate(nodes):
        rect = rect_of(node)
        if rect is not None:
            positioned.append((index, rect))
    if not positioned:
        return [list(nodes)]

    lines = projection_lines([rect for _, rect in positioned], axis, tolerance)
    order_axis = axis.cross
    bands: list[list[DesignNode]] = []
    assigned: set[int] = set()
    for current, following in zip(lines, lines[1:]):
        members = [
            (index, rect)
            for index, rect in positioned
            if index not in assigned
            and rect.leading(axis) >= current.position - tolerance
            and rect.trailing(axis) <= following.position + tolerance
        ]
        if not members:
            continue
        members.sort(key=lambda item: item[1].leading(order_axis))
        assigned.update(index for index, _ in members)
        bands.append([nodes[index] for index, _ in members])

    if not bands:
        return [list(nodes)]

    spanning = sorted(
        (item for item in positioned if item[0] not in assigned),
        key=lambda item: item[1].leading(order_axis),
    )
    placed = {index for index, _ in positioned}
    leftovers = [nodes[index] for index, _ in spanning]
    leftovers.extend(node for index, node in enumerate(nodes) if index not in placed)
    if leftovers:
        bands.append(leftovers)
    return bands
