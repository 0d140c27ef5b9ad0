from __future__ import annotations

from collections.abc import Sequence

from domain.models import AlignmentSummary, Axis, EdgeAlignment, Rect
from domain.services.geometry import ToleranceFn, bounding_rect, fixed_tolerance, values_aligned

_LEADING = {Axis.HORIZONTAL: EdgeAlignment.LEFT, Axis.VERTICAL: EdgeAlignment.TOP}
_TRAILING = {Axis.HORIZONTAL: EdgeAlignment.RIGHT, Axis.VERTICAL: EdgeAlignment.BOTTOM}


def edge_alignment(
    rects: Sequence[Rect],
    axis: Axis,
    tolerance: ToleranceFn | None = None,
) -> EdgeAlignment:
    if not rects:
        return EdgeAlignment.NONE
    policy = tolerance or fixed_tolerance()
    bounds = bounding_rect(rects)
    limit = policy(bounds.extent(axis) if bounds else 0.0)

    # Leading edge wins over trailing edge, which wins over center.
    if values_aligned([rect.leading(axis) for rect in rects], limit):
        return _LEADING[axis]
    if values_aligned([rect.trailing(axis) for rect in rects], limit):
        return _TRAILING[axis]
    if values_aligned([rect.center(axis) for rect in rects], limit):
        return EdgeAlignment.CENTER
    return EdgeAlignment.NONE


def gaps_between(rects: Sequence[Rect], axis: Axis) -> list[float]:
    ordered = sorted(rects, key=lambda rect: rect.leading(axis))
    return [
        following.leading(axis) - current.trailing(axis)
        for current, following in zip(ordered, ordered[1:])
    ]


def average_gap(rects: Sequence[Rect], axis: Axis) -> float:
    if len(rects) < 2:
        return 0.0
    positive = [gap for gap in gaps_between(rects, axis) if gap > 0]
    if not positive:
        return 0.0
    return sum(positive) / len(positive)


def analyze_alignment(
    rects: Sequence[Rect],
    tolerance: ToleranceFn | None = None,
) -> AlignmentSummary:
    return AlignmentSummary(
        horizontal=edge_alignment(rects, Axis.HORIZONTAL, tolerance),
        vertical=edge_alignment(rects, Axis.VERTICAL, tolerance),
        horizontal_gap=average_gap(rects, Axis.HORIZONTAL),
        vertical_gap=average_gap(rects, Axis.VERTICAL),
    )
