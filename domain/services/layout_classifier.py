from __future__ import annotations

from collections.abc import Sequence

from domain.models import (
    AlignItems,
    AlignmentSummary,
    Axis,
    Direction,
    EdgeAlignment,
    JustifyContent,
    LayoutDecision,
    LayoutThresholds,
    Rect,
)
from domain.ports.layout import LayoutClassifier
from domain.services.alignment import analyze_alignment, gaps_between
from domain.services.geometry import fixed_tolerance

_LEADING_EDGES = {EdgeAlignment.LEFT, EdgeAlignment.TOP}
_TRAILING_EDGES = {EdgeAlignment.RIGHT, EdgeAlignment.BOTTOM}


def justify_for(alignment: EdgeAlignment) -> JustifyContent:
    if alignment in _LEADING_EDGES:
        return JustifyContent.START
    if alignment in _TRAILING_EDGES:
        return JustifyContent.END
    if alignment is EdgeAlignment.CENTER:
        return JustifyContent.CENTER
    return JustifyContent.SPACE_BETWEEN


def align_for(alignment: EdgeAlignment) -> AlignItems | None:
    if alignment in _LEADING_EDGES:
        return AlignItems.START
    if alignment in _TRAILING_EDGES:
        return AlignItems.END
    if alignment is EdgeAlignment.CENTER:
        return AlignItems.CENTER
    return None


class ScoreLayoutClassifier(LayoutClassifier):
    """Scores a sibling set for row-ness and column-ness.

    A direction's score is the share of consecutive siblings separated by a
    small non-negative gap along its main axis, weighted, plus a bonus when
    the siblings share an edge or center on the cross axis. The winner must
    beat the other direction strictly and clear ``min_score``.
    """

    def __init__(self, thresholds: LayoutThresholds | None = None) -> None:
        self.thresholds = thresholds or LayoutThresholds()

    def classify(self, rects: Sequence[Rect]) -> LayoutDecision:
        if len(rects) < 2:
            return LayoutDecision.undetected()

        summary = analyze_alignment(rects, fixed_tolerance(self.thresholds.alignment_tolerance))
        row_score = self.row_score(rects, summary)
        column_score = self.column_score(rects, summary)
        minimum = self.thresholds.min_score

        if row_score > column_score and row_score > minimum:
            return LayoutDecision(
                direction=Direction.ROW,
                gap=summary.horizontal_gap,
                justify=justify_for(summary.horizontal),
                align=align_for(summary.vertical),
                row_score=row_score,
                column_score=column_score,
            )
        if column_score > row_score and column_score > minimum:
            return LayoutDecision(
                direction=Direction.COLUMN,
                gap=summary.vertical_gap,
                justify=justify_for(summary.vertical),
                align=align_for(summary.horizontal),
                row_score=row_score,
                column_score=column_score,
            )
        return LayoutDecision.undetected(row_score=row_score, column_score=column_score)

    def row_score(self, rects: Sequence[Rect], summary: AlignmentSummary) -> float:
        return self._score(rects, Axis.HORIZONTAL, summary.vertical)

    def column_score(self, rects: Sequence[Rect], summary: AlignmentSummary) -> float:
        return self._score(rects, Axis.VERTICAL, summary.horizontal)

    def distribution_score(self, rects: Sequence[Rect], axis: Axis) -> float:
        if len(rects) < 2:
            return 0.0
        limit = self.thresholds.max_distribution_gap
        close = [gap for gap in gaps_between(rects, axis) if 0 <= gap <= limit]
        return len(close) / (len(rects) - 1)

    def _score(self, rects: Sequence[Rect], axis: Axis, cross_alignment: EdgeAlignment) -> float:
        if len(rects) < 2:
            return 0.0
        bonus = self.thresholds.alignment_bonus if cross_alignment is not EdgeAlignment.NONE else 0.0
        return self.distribution_score(rects, axis) * self.thresholds.distribution_weight + bonus
