from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

CONTAINER_NODE_TYPES = frozenset({"FRAME", "GROUP"})
SYNTHETIC_ID_PREFIX = "container-"
SYNTHETIC_NODE_TYPE = "FRAME"

StyleValue = Union[str, int, float]


class Axis(StrEnum):
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"

    @property
    def cross(self) -> Axis:
        return Axis.VERTICAL if self is Axis.HORIZONTAL else Axis.HORIZONTAL


class Direction(StrEnum):
    ROW = "row"
    COLUMN = "column"
    NONE = "none"

    @property
    def orthogonal(self) -> Direction:
        if self is Direction.ROW:
            return Direction.COLUMN
        if self is Direction.COLUMN:
            return Direction.ROW
        return Direction.NONE


class EdgeAlignment(StrEnum):
    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    CENTER = "center"
    NONE = "none"


class JustifyContent(StrEnum):
    START = "flex-start"
    END = "flex-end"
    CENTER = "center"
    SPACE_BETWEEN = "space-between"


class AlignItems(StrEnum):
    START = "flex-start"
    END = "flex-end"
    CENTER = "center"


class NodeRelationship(StrEnum):
    CONTAINS = "contains"
    INTERSECTS = "intersects"
    SEPARATE = "separate"


class DesignNode(BaseModel):
    """A positioned node handed over by the node extractor.

    Keys the extractor emits besides the ones declared here (text, fills,
    exportInfo, ...) are kept as extras and written back untouched.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    id: str = Field(..., min_length=1)
    name: str = ""
    type: str = ""
    css_styles: Optional[Dict[str, StyleValue]] = Field(default=None, alias="cssStyles")
    children: Optional[List[DesignNode]] = None

    def with_styles(self, updates: Mapping[str, StyleValue]) -> DesignNode:
        styles: Dict[str, StyleValue] = dict(self.css_styles or {})
        styles.update(updates)
        return self.model_copy(update={"css_styles": styles})

    def with_children(self, children: Sequence[DesignNode]) -> DesignNode:
        return self.model_copy(update={"children": list(children)})

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class SimplifiedDesign(BaseModel):
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    name: str = ""
    last_modified: str = Field(default="", alias="lastModified")
    thumbnail_url: str = Field(default="", alias="thumbnailUrl")
    nodes: List[DesignNode] = Field(default_factory=list)

    def with_nodes(self, nodes: Sequence[DesignNode]) -> SimplifiedDesign:
        return self.model_copy(update={"nodes": list(nodes)})

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    @property
    def area(self) -> float:
        return self.width * self.height

    def leading(self, axis: Axis) -> float:
        return self.left if axis is Axis.HORIZONTAL else self.top

    def trailing(self, axis: Axis) -> float:
        return self.right if axis is Axis.HORIZONTAL else self.bottom

    def center(self, axis: Axis) -> float:
        return self.center_x if axis is Axis.HORIZONTAL else self.center_y

    def extent(self, axis: Axis) -> float:
        return self.width if axis is Axis.HORIZONTAL else self.height


@dataclass(frozen=True)
class AlignmentSummary:
    horizontal: EdgeAlignment
    vertical: EdgeAlignment
    horizontal_gap: float
    vertical_gap: float


@dataclass(frozen=True)
class LayoutDecision:
    direction: Direction
    gap: float = 0.0
    justify: JustifyContent | None = None
    align: AlignItems | None = None
    row_score: float = 0.0
    column_score: float = 0.0

    @property
    def detected(self) -> bool:
        return self.direction is not Direction.NONE

    @classmethod
    def undetected(cls, row_score: float = 0.0, column_score: float = 0.0) -> LayoutDecision:
        return cls(direction=Direction.NONE, row_score=row_score, column_score=column_score)


@dataclass(frozen=True)
class LayoutThresholds:
    alignment_tolerance: float = 2.0
    max_distribution_gap: float = 50.0
    distribution_weight: float = 0.7
    alignment_bonus: float = 0.3
    min_score: float = 0.4
    group_split_threshold: float = 20.0
    projection_tolerance: float = 1.0
    relative_tolerance_minimum: float = 5.0
    relative_tolerance_ratio: float = 0.01
    gap_consistency_threshold: float = 0.7


TraceAction = Literal["unchanged", "flex", "grouped"]


@dataclass(frozen=True)
class LayoutTraceEvent:
    node_id: str
    node_name: str
    child_count: int
    action: TraceAction
    direction: Direction
    row_score: float
    column_score: float
    group_count: int = 0
