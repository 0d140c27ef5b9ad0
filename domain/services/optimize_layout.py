from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from domain.models import (
    CONTAINER_NODE_TYPES,
    DesignNode,
    LayoutDecision,
    LayoutThresholds,
    LayoutTraceEvent,
    SimplifiedDesign,
    TraceAction,
)
from domain.ports.layout import IdAllocator, LayoutClassifier, LayoutTraceHook
from domain.services.container_synthesizer import (
    ContainerIdAllocator,
    create_layout_container,
    flex_styles,
)
from domain.services.geometry import valid_rects
from domain.services.grouping import group_children_by_layout
from domain.services.layout_classifier import ScoreLayoutClassifier

logger = logging.getLogger(__name__)


class LayoutOptimizer:
    """Rewrites absolutely positioned node trees into flex layouts.

    Subtrees are optimized bottom-up. Frames and groups whose children line
    up get flex styling in place; other nodes get their children regrouped
    into synthetic containers when the children form several runs.
    """

    def __init__(
        self,
        classifier: LayoutClassifier | None = None,
        thresholds: LayoutThresholds | None = None,
        id_allocator: IdAllocator | None = None,
        trace: LayoutTraceHook | None = None,
        container_types: Iterable[str] = CONTAINER_NODE_TYPES,
    ) -> None:
        self.thresholds = thresholds or LayoutThresholds()
        self.classifier = classifier or ScoreLayoutClassifier(self.thresholds)
        self.id_allocator = id_allocator or ContainerIdAllocator()
        self.trace = trace
        self.container_types = frozenset(container_types)

    def optimize_design(self, design: SimplifiedDesign) -> SimplifiedDesign:
        if not design.nodes:
            return design
        return design.with_nodes(self.optimize_nodes(design.nodes))

    def optimize_nodes(self, nodes: Sequence[DesignNode]) -> list[DesignNode]:
        return [self.optimize_node_tree(node) for node in nodes]

    def optimize_node_tree(self, node: DesignNode) -> DesignNode:
        if not node.children:
            return node
        optimized = [self.optimize_node_tree(child) for child in node.children]
        return self.optimize_container(node.with_children(optimized))

    def optimize_container(self, node: DesignNode) -> DesignNode:
        children = node.children or []
        if len(children) <= 1:
            return node

        decision = self.classifier.classify(valid_rects(children))
        if not decision.detected:
            self._emit(node, decision, "unchanged")
            return node

        if node.type in self.container_types:
            self._emit(node, decision, "flex")
            return node.with_styles(flex_styles(decision))

        groups = group_children_by_layout(
            children, decision.direction, self.thresholds.group_split_threshold
        )
        if len(groups) == 1 and len(groups[0]) == len(children):
            self._emit(node, decision, "flex")
            return node.with_styles(flex_styles(decision))

        inner_direction = decision.direction.orthogonal
        regrouped: list[DesignNode] = []
        for index, group in enumerate(groups):
            if len(group) == 1:
                regrouped.append(group[0])
                continue
            regrouped.append(
                create_layout_container(
                    f"group-{index}",
                    inner_direction,
                    group,
                    allocator=self.id_allocator,
                    classifier=self.classifier,
                )
            )
        self._emit(node, decision, "grouped", group_count=len(groups))
        return node.with_styles(flex_styles(decision, include_gap=False)).with_children(regrouped)

    def _emit(
        self,
        node: DesignNode,
        decision: LayoutDecision,
        action: TraceAction,
        group_count: int = 0,
    ) -> None:
        child_count = len(node.children or [])
        logger.debug(
            "Layout %s for %s (%s): %d children, row=%.2f column=%.2f direction=%s",
            action,
            node.id,
            node.name,
            child_count,
            decision.row_score,
            decision.column_score,
            decision.direction.value,
        )
        if self.trace is None:
            return
        self.trace(
            LayoutTraceEvent(
                node_id=node.id,
                node_name=node.name,
                child_count=child_count,
                action=action,
                direction=decision.direction,
                row_score=decision.row_score,
                column_score=decision.column_score,
                group_count=group_count,
            )
        )
