from __future__ import annotations

from collections.abc import Sequence

from domain.models import DesignNode, Direction
from domain.services.geometry import position_of


def group_children_by_layout(
    children: Sequence[DesignNode],
    direction: Direction,
    split_threshold: float = 20.0,
) -> list[list[DesignNode]]:
    """Split siblings into runs that share a cross-axis position.

    Siblings are walked in cross-axis order (main-axis order breaks ties) and
    a new run starts whenever the cross-axis position jumps by more than
    ``split_threshold``. Each run is returned in main-axis order. Siblings
    without any styling cannot be placed and join the last run.
    """
    if len(children) <= 1:
        return [list(children)]

    is_row = direction is not Direction.COLUMN
    placed: list[tuple[int, float, float]] = []
    unplaced: list[DesignNode] = []
    for index, child in enumerate(children):
        position = position_of(child)
        if position is None:
            unplaced.append(child)
            continue
        left, top = position
        main, cross = (left, top) if is_row else (top, left)
        placed.append((index, main, cross))

    if not placed:
        return [list(children)]

    placed.sort(key=lambda item: (item[2], item[1]))
    runs: list[list[tuple[int, float, float]]] = [[placed[0]]]
    for previous, following in zip(placed, placed[1:]):
        if abs(following[2] - previous[2]) > split_threshold:
            runs.append([])
        runs[-1].append(following)

    groups = [
        [children[index] for index, _, _ in sorted(run, key=lambda item: item[1])]
        for run in runs
    ]
    groups[-1].extend(unplaced)
    return groups
