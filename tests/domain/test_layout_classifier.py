from __future__ import annotations

import pytest

from domain.models import (
    AlignItems,
    Axis,
    Direction,
    EdgeAlignment,
    JustifyContent,
    LayoutThresholds,
    Rect,
)
from domain.services.layout_classifier import ScoreLayoutClassifier, align_for, justify_for


def test_uniform_row_is_detected() -> None:
    rects = [Rect(0, 0, 40, 20), Rect(50, 0, 40, 20), Rect(100, 0, 40, 20)]

    decision = ScoreLayoutClassifier().classify(rects)

    assert decision.direction is Direction.ROW
    assert decision.gap == pytest.approx(10)
    assert decision.align is AlignItems.START
    assert decision.justify is JustifyContent.SPACE_BETWEEN
    assert decision.row_score == pytest.approx(1.0)
    assert decision.column_score == pytest.approx(0.0)


def test_uniform_column_is_detected() -> None:
    rects = [Rect(0, 0, 20, 40), Rect(0, 50, 20, 40), Rect(0, 100, 20, 40)]

    decision = ScoreLayoutClassifier().classify(rects)

    assert decision.direction is Direction.COLUMN
    assert decision.gap == pytest.approx(10)
    assert decision.align is AlignItems.START


def test_scattered_siblings_have_no_layout() -> None:
    rects = [Rect(0, 0, 30, 30), Rect(17, 41, 30, 30), Rect(53, 9, 30, 30)]

    decision = ScoreLayoutClassifier().classify(rects)

    assert not decision.detected
    assert decision.row_score <= 0.4
    assert decision.column_score <= 0.4


def test_equal_scores_resolve_to_no_layout() -> None:
    rects = [Rect(0, 0, 10, 10), Rect(20, 20, 10, 10)]

    decision = ScoreLayoutClassifier().classify(rects)

    assert decision.row_score == pytest.approx(decision.column_score)
    assert decision.direction is Direction.NONE


def test_score_must_clear_minimum() -> None:
    rects = [Rect(0, 0, 10, 10), Rect(100, 0, 10, 10)]

    decision = ScoreLayoutClassifier().classify(rects)

    assert decision.row_score == pytest.approx(0.3)
    assert decision.direction is Direction.NONE

    relaxed = ScoreLayoutClassifier(LayoutThresholds(max_distribution_gap=100))
    assert relaxed.classify(rects).direction is Direction.ROW


def test_fewer_than_two_rects_have_no_layout() -> None:
    classifier = ScoreLayoutClassifier()

    assert classifier.classify([]).direction is Direction.NONE
    assert classifier.classify([Rect(0, 0, 10, 10)]).direction is Direction.NONE


def test_bottom_aligned_row_aligns_to_end() -> None:
    rects = [Rect(0, 0, 40, 40), Rect(50, 20, 40, 20), Rect(100, 10, 40, 30)]

    decision = ScoreLayoutClassifier().classify(rects)

    assert decision.direction is Direction.ROW
    assert decision.align is AlignItems.END


def test_distribution_score_counts_small_gaps() -> None:
    classifier = ScoreLayoutClassifier()
    rects = [Rect(0, 0, 10, 10), Rect(20, 0, 10, 10), Rect(200, 0, 10, 10)]

    assert classifier.distribution_score(rects, Axis.HORIZONTAL) == pytest.approx(0.5)
    assert classifier.distribution_score(rects[:1], Axis.HORIZONTAL) == 0


@pytest.mark.parametrize(
    ("alignment", "justify", "align"),
    [
        (EdgeAlignment.LEFT, JustifyContent.START, AlignItems.START),
        (EdgeAlignment.TOP, JustifyContent.START, AlignItems.START),
        (EdgeAlignment.RIGHT, JustifyContent.END, AlignItems.END),
        (EdgeAlignment.BOTTOM, JustifyContent.END, AlignItems.END),
        (EdgeAlignment.CENTER, JustifyContent.CENTER, AlignItems.CENTER),
        (EdgeAlignment.NONE, JustifyContent.SPACE_BETWEEN, None),
    ],
)
def test_alignment_mapping(
    alignment: EdgeAlignment,
    justify: JustifyContent,
    align: AlignItems | None,
) -> None:
    assert justify_for(alignment) is justify
    assert align_for(alignment) is align
