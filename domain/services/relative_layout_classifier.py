from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from domain.models import (
    AlignItems,
    Axis,
    Direction,
    JustifyContent,
    LayoutDecision,
    LayoutThresholds,
    Rect,
)
from domain.ports.layout import LayoutClassifier
from domain.services.alignment import gaps_between
from domain.services.geometry import bounding_rect, relative_tolerance, values_aligned


@dataclass(frozen=True)
class AxisProfile:
    axis: Axis
    distribution_score: float
    alignment_score: float
    leading_aligned: bool
    trailing_aligned: bool
    center_aligned: bool
    average_gap: float
    gap_consistency: float
    gaps: tuple[float, ...]

    @property
    def aligned(self) -> bool:
        return self.leading_aligned or self.trailing_aligned or self.center_aligned


def variance(values: Sequence[float]) -> float:
    if len(values) <= 1:
        return 0.0
    mean = sum(values) / len(values)
    return sum((value - mean) ** 2 for value in values) / len(values)


def profile_axis(
    rects: Sequence[Rect],
    axis: Axis,
    bounds: Rect,
    thresholds: LayoutThresholds | None = None,
) -> AxisProfile:
    limits = thresholds or LayoutThresholds()
    tolerance = relative_tolerance(
        limits.relative_tolerance_minimum, limits.relative_tolerance_ratio
    )(bounds.extent(axis))

    ordered = sorted(rects, key=lambda rect: rect.leading(axis))
    gaps = [gap for gap in gaps_between(ordered, axis) if gap >= 0]
    pairs = max(len(ordered) - 1, 1)
    leading = values_aligned([rect.leading(axis) for rect in ordered], tolerance)
    trailing = values_aligned([rect.trailing(axis) for rect in ordered], tolerance)
    center = values_aligned([rect.center(axis) for rect in ordered], tolerance)
    average = sum(gaps) / len(gaps) if gaps else 0.0
    consistency = 1 - variance(gaps) / (average * average + 0.1) if len(gaps) > 1 else 0.0

    return AxisProfile(
        axis=axis,
        distribution_score=len(gaps) / pairs,
        alignment_score=0.5 if (leading or trailing or center) else 0.0,
        leading_aligned=leading,
        trailing_aligned=trailing,
        center_aligned=center,
        average_gap=average,
        gap_consistency=consistency,
        gaps=tuple(gaps),
    )


def flex_properties(
    main: AxisProfile,
    cross: AxisProfile,
    consistency_threshold: float = 0.7,
) -> tuple[JustifyContent, AlignItems]:
    justify = JustifyContent.START
    if main.trailing_aligned:
        justify = JustifyContent.END
    elif main.center_aligned:
        justify = JustifyContent.CENTER
    elif main.gaps and main.gap_consistency > consistency_threshold:
        justify = JustifyContent.SPACE_BETWEEN

    align = AlignItems.START
    if cross.trailing_aligned:
        align = AlignItems.END
    elif cross.center_aligned:
        align = AlignItems.CENTER
    return justify, align


class RelativeLayoutClassifier(LayoutClassifier):
    """Classifier variant whose alignment tolerance scales with the group size.

    Direction scoring follows the same weights as the score-based classifier;
    justification and alignment come from ``flex_properties`` and always carry
    a value.
    """

    def __init__(self, thresholds: LayoutThresholds | None = None) -> None:
        self.thresholds = thresholds or LayoutThresholds()

    def classify(self, rects: Sequence[Rect]) -> LayoutDecision:
        bounds = bounding_rect(rects)
        if len(rects) < 2 or bounds is None:
            return LayoutDecision.undetected()

        horizontal = profile_axis(rects, Axis.HORIZONTAL, bounds, self.thresholds)
        vertical = profile_axis(rects, Axis.VERTICAL, bounds, self.thresholds)
        row_score = self._score(horizontal, vertical)
        column_score = self._score(vertical, horizontal)
        minimum = self.thresholds.min_score

        if row_score > column_score and row_score > minimum:
            return self._decision(Direction.ROW, horizontal, vertical, row_score, column_score)
        if column_score > row_score and column_score > minimum:
            return self._decision(Direction.COLUMN, vertical, horizontal, row_score, column_score)
        return LayoutDecision.undetected(row_score=row_score, column_score=column_score)

    def _score(self, main: AxisProfile, cross: AxisProfile) -> float:
        bonus = self.thresholds.alignment_bonus if cross.aligned else 0.0
        return main.distribution_score * self.thresholds.distribution_weight + bonus

    def _decision(
        self,
        direction: Direction,
        main: AxisProfile,
        cross: AxisProfile,
        row_score: float,
        column_score: float,
    ) -> LayoutDecision:
        justify, align = flex_properties(
            main, cross, self.thresholds.gap_consistency_threshold
        )
        return LayoutDecision(
            direction=direction,
            gap=main.average_gap,
            justify=justify,
            align=align,
            row_score=row_score,
            column_score=column_score,
        )
