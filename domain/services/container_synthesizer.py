from __future__ import annotations

from collections.abc import Sequence

from domain.models import (
    SYNTHETIC_ID_PREFIX,
    SYNTHETIC_NODE_TYPE,
    DesignNode,
    Direction,
    LayoutDecision,
    StyleValue,
)
from domain.ports.layout import IdAllocator, LayoutClassifier
from domain.services.geometry import bounding_rect, format_pixels, valid_rects


class ContainerIdAllocator(IdAllocator):
    """Mints ids for synthetic containers: ``container-<n>-<name>``.

    One allocator is meant to serve one optimization run; two allocators
    created with the same ``start`` hand out the same sequence.
    """

    def __init__(self, start: int = 1, prefix: str = SYNTHETIC_ID_PREFIX) -> None:
        self.prefix = prefix
        self._next = start

    def allocate(self, name: str) -> str:
        container_id = f"{self.prefix}{self._next}-{name}"
        self._next += 1
        return container_id

    @property
    def issued(self) -> int:
        return self._next - 1


def flex_styles(decision: LayoutDecision, include_gap: bool = True) -> dict[str, StyleValue]:
    styles: dict[str, StyleValue] = {
        "display": "flex",
        "flexDirection": decision.direction.value,
    }
    if include_gap and decision.gap > 0:
        styles["gap"] = f"{round(decision.gap)}px"
    if decision.justify is not None:
        styles["justifyContent"] = decision.justify.value
    if decision.align is not None:
        styles["alignItems"] = decision.align.value
    return styles


def create_layout_container(
    name: str,
    direction: Direction,
    children: Sequence[DesignNode],
    *,
    allocator: IdAllocator,
    classifier: LayoutClassifier,
) -> DesignNode:
    rects = valid_rects(children)
    bounds = bounding_rect(rects)
    container_id = allocator.allocate(name)
    styles: dict[str, StyleValue] = {"display": "flex", "flexDirection": direction.value}

    if bounds is None:
        styles.update({"width": "100%", "height": "auto"})
    else:
        decision = classifier.classify(rects)
        styles.update(
            {
                "position": "absolute",
                "left": format_pixels(bounds.left),
                "top": format_pixels(bounds.top),
                "width": format_pixels(bounds.width),
                "height": format_pixels(bounds.height),
            }
        )
        if decision.justify is not None:
            styles["justifyContent"] = decision.justify.value
        if decision.align is not None:
            styles["alignItems"] = decision.align.value

    return DesignNode(
        id=container_id,
        name=f"Layout Container {name}",
        type=SYNTHETIC_NODE_TYPE,
        css_styles=styles,
        children=list(children),
    )
