from __future__ import annotations

from domain.models import Axis, EdgeAlignment, Rect
from domain.services.alignment import analyze_alignment, average_gap, edge_alignment, gaps_between
from domain.services.geometry import relative_tolerance


def test_leading_edge_wins_over_trailing_and_center() -> None:
    # Same left and same width: every horizontal test passes.
    rects = [Rect(10, 0, 50, 20), Rect(10, 40, 50, 20)]

    assert edge_alignment(rects, Axis.HORIZONTAL) is EdgeAlignment.LEFT


def test_trailing_and_center_alignment() -> None:
    right_aligned = [Rect(0, 0, 100, 20), Rect(60, 30, 40, 20)]
    centered = [Rect(0, 0, 100, 20), Rect(30, 30, 40, 20)]

    assert edge_alignment(right_aligned, Axis.HORIZONTAL) is EdgeAlignment.RIGHT
    assert edge_alignment(centered, Axis.HORIZONTAL) is EdgeAlignment.CENTER


def test_vertical_alignment_uses_top_and_bottom() -> None:
    bottoms = [Rect(0, 0, 10, 40), Rect(20, 20, 10, 20)]

    assert edge_alignment(bottoms, Axis.VERTICAL) is EdgeAlignment.BOTTOM
    assert edge_alignment([Rect(0, 0, 10, 10), Rect(20, 1, 10, 30)], Axis.VERTICAL) is EdgeAlignment.TOP


def test_relative_tolerance_accepts_larger_drift() -> None:
    rects = [Rect(0, 0, 10, 10), Rect(4, 20, 10, 10)]

    assert edge_alignment(rects, Axis.HORIZONTAL) is EdgeAlignment.NONE
    assert edge_alignment(rects, Axis.HORIZONTAL, relative_tolerance()) is EdgeAlignment.LEFT


def test_average_gap_ignores_overlaps_and_touching_pairs() -> None:
    rects = [
        Rect(100, 0, 40, 20),
        Rect(0, 0, 40, 20),
        Rect(50, 0, 60, 20),
        Rect(160, 0, 10, 20),
        Rect(170, 0, 10, 20),
    ]

    assert gaps_between(rects, Axis.HORIZONTAL) == [10, -10, 20, 0]
    assert average_gap(rects, Axis.HORIZONTAL) == (10 + 20) / 2


def test_average_gap_is_zero_without_positive_gaps() -> None:
    rects = [Rect(0, 0, 40, 20), Rect(40, 0, 40, 20)]

    assert average_gap(rects, Axis.HORIZONTAL) == 0
    assert average_gap(rects[:1], Axis.HORIZONTAL) == 0


def test_analyze_alignment_summarizes_both_axes() -> None:
    rects = [Rect(0, 0, 40, 20), Rect(50, 0, 40, 20), Rect(100, 0, 40, 20)]

    summary = analyze_alignment(rects)

    assert summary.horizontal is EdgeAlignment.NONE
    assert summary.vertical is EdgeAlignment.TOP
    assert summary.horizontal_gap == 10
    assert summary.vertical_gap == 0
