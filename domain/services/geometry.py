from __future__ import annotations

import math
import re
from collections.abc import Callable, Iterable, Sequence

from domain.models import DesignNode, NodeRelationship, Rect

ToleranceFn = Callable[[float], float]

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def parse_pixels(value: object) -> float:
    # Mirrors CSS-style parsing: "12px" -> 12.0, anything unreadable -> 0.0.
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        match = _LEADING_NUMBER.match(str(value))
        if not match:
            return 0.0
        number = float(match.group(1))
    return number if math.isfinite(number) else 0.0


def format_pixels(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value)}px"
    return f"{value}px"


def rect_of(node: DesignNode) -> Rect | None:
    styles = node.css_styles
    if not styles:
        return None
    width = parse_pixels(styles.get("width"))
    height = parse_pixels(styles.get("height"))
    if width <= 0 or height <= 0:
        return None
    return Rect(
        left=parse_pixels(styles.get("left")),
        top=parse_pixels(styles.get("top")),
        width=width,
        height=height,
    )


def position_of(node: DesignNode) -> tuple[float, float] | None:
    styles = node.css_styles
    if not styles:
        return None
    return parse_pixels(styles.get("left")), parse_pixels(styles.get("top"))


def valid_rects(nodes: Iterable[DesignNode]) -> list[Rect]:
    rects: list[Rect] = []
    for node in nodes:
        rect = rect_of(node)
        if rect is not None:
            rects.append(rect)
    return rects


def contains(outer: Rect, inner: Rect) -> bool:
    return (
        outer.left <= inner.left
        and outer.top <= inner.top
        and outer.right >= inner.right
        and outer.bottom >= inner.bottom
    )


def intersects(a: Rect, b: Rect) -> bool:
    return not (
        a.right <= b.left or b.right <= a.left or a.bottom <= b.top or b.bottom <= a.top
    )


def intersection(a: Rect, b: Rect) -> Rect | None:
    if not intersects(a, b):
        return None
    left = max(a.left, b.left)
    top = max(a.top, b.top)
    right = min(a.right, b.right)
    bottom = min(a.bottom, b.bottom)
    return Rect(left=left, top=top, width=right - left, height=bottom - top)


def relationship(a: Rect, b: Rect) -> NodeRelationship:
    if contains(a, b) or contains(b, a):
        return NodeRelationship.CONTAINS
    if intersects(a, b):
        return NodeRelationship.INTERSECTS
    return NodeRelationship.SEPARATE


def bounding_rect(rects: Sequence[Rect]) -> Rect | None:
    if not rects:
        return None
    left = min(rect.left for rect in rects)
    top = min(rect.top for rect in rects)
    right = max(rect.right for rect in rects)
    bottom = max(rect.bottom for rect in rects)
    return Rect(left=left, top=top, width=right - left, height=bottom - top)


def values_aligned(values: Sequence[float], tolerance: float = 2.0) -> bool:
    if len(values) < 2:
        return True
    first = values[0]
    return all(abs(value - first) <= tolerance for value in values)


def fixed_tolerance(pixels: float = 2.0) -> ToleranceFn:
    def _tolerance(_extent: float) -> float:
        return pixels

    return _tolerance


def relative_tolerance(minimum: float = 5.0, ratio: float = 0.01) -> ToleranceFn:
    """Tolerance that grows with the extent of the analysed group."""

    def _tolerance(extent: float) -> float:
        return max(minimum, extent * ratio)

    return _tolerance
