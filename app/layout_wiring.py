from __future__ import annotations

from app.config import AppSettings, LayoutSettings
from domain.ports.layout import LayoutClassifier, LayoutTraceHook
from domain.services.container_synthesizer import ContainerIdAllocator
from domain.services.layout_classifier import ScoreLayoutClassifier
from domain.services.optimize_layout import LayoutOptimizer
from domain.services.relative_layout_classifier import RelativeLayoutClassifier


def build_classifier(settings: LayoutSettings) -> LayoutClassifier:
    thresholds = settings.to_thresholds()
    if settings.classifier == "relative":
        return RelativeLayoutClassifier(thresholds)
    if settings.classifier == "score":
        return ScoreLayoutClassifier(thresholds)
    msg = f"Unknown layout classifier: {settings.classifier}"
    raise ValueError(msg)


def build_layout_optimizer(
    settings: AppSettings,
    trace: LayoutTraceHook | None = None,
) -> LayoutOptimizer:
    layout = settings.layout
    return LayoutOptimizer(
        classifier=build_classifier(layout),
        thresholds=layout.to_thresholds(),
        id_allocator=ContainerIdAllocator(),
        trace=trace,
        container_types=layout.container_types,
    )
