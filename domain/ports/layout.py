from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from domain.models import LayoutDecision, LayoutTraceEvent, Rect


class LayoutClassifier(Protocol):
    def classify(self, rects: Sequence[Rect]) -> LayoutDecision:
        ...


class IdAllocator(Protocol):
    def allocate(self, name: str) -> str:
        ...


LayoutTraceHook = Callable[[LayoutTraceEvent], None]
