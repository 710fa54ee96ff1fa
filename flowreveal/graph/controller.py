"""Reveal cursor and live edge set, with the edits users can make."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import List, Mapping, Optional, Tuple

from flowreveal.graph.positions import PositionStore
from flowreveal.graph.spec import GraphSpec, Position
from flowreveal.graph.visibility import (
    EdgeOrigin,
    LiveEdge,
    Visibility,
    compute_visibility,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphState:
    """Read-only snapshot handed to the render adapter."""

    spec: GraphSpec
    cursor: int
    edges: Tuple[LiveEdge, ...]
    positions: Mapping[str, Position]

    def visibility(self) -> Visibility:
        return compute_visibility(
            self.cursor, self.spec.steps, self.edges, self.spec.notes
        )


def user_edge_id(
    source: str,
    target: str,
    source_handle: Optional[str] = None,
    target_handle: Optional[str] = None,
) -> str:
    return f"xy-edge__{source}{source_handle or ''}-{target}{target_handle or ''}"


class GraphStateController:
    """Owns the reveal cursor, the live edges and the position overlay.

    Every operation is synchronous. Invalid transitions (moving past either
    end, duplicate connections, unknown edge ids) leave the state untouched
    and return ``False`` or ``None``.
    """

    def __init__(self, spec: GraphSpec, cursor: int = 1) -> None:
        if not spec.steps:
            raise ValueError("Graph has no steps to reveal")
        self.spec = spec
        self.positions = PositionStore(spec)
        self._cursor = self._clamp(cursor)
        self._edges: List[LiveEdge] = self._spec_edges()

    # ===== Reveal cursor =====

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def step_count(self) -> int:
        return self.spec.step_count

    @property
    def can_advance(self) -> bool:
        return self._cursor < self.step_count

    @property
    def can_retreat(self) -> bool:
        return self._cursor > 1

    def advance(self) -> bool:
        if not self.can_advance:
            logger.debug("advance ignored: already at step %d", self._cursor)
            return False
        self._cursor += 1
        logger.debug("Revealed step %d/%d", self._cursor, self.step_count)
        return True

    def retreat(self) -> bool:
        if not self.can_retreat:
            logger.debug("retreat ignored: already at the first step")
            return False
        self._cursor -= 1
        logger.debug("Stepped back to %d/%d", self._cursor, self.step_count)
        return True

    def go_to(self, cursor: int) -> bool:
        target = self._clamp(cursor)
        if target == self._cursor:
            return False
        self._cursor = target
        logger.debug("Jumped to step %d/%d", self._cursor, self.step_count)
        return True

    def reset(self) -> None:
        """Back to the first step, the default layout and the declared edges."""
        edges = self._spec_edges()
        self._cursor = 1
        self.positions.reset_all()
        self._edges = edges
        logger.debug("Reset to step 1 with %d declared edges", len(edges))

    # ===== Live edges =====

    @property
    def edges(self) -> Tuple[LiveEdge, ...]:
        return tuple(self._edges)

    def find_edge(self, edge_id: str) -> Optional[LiveEdge]:
        for edge in self._edges:
            if edge.id == edge_id:
                return edge
        return None

    def add_edge(
        self,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> Optional[LiveEdge]:
        if not (self.spec.has_step(source) and self.spec.has_step(target)):
            logger.debug("Connection %s -> %s ignored: not between steps", source, target)
            return None
        routing = (source, target, source_handle, target_handle)
        if any(edge.routing == routing for edge in self._edges):
            logger.debug("Connection %s -> %s ignored: duplicate", source, target)
            return None

        edge = LiveEdge(
            id=self._fresh_edge_id(
                user_edge_id(source, target, source_handle, target_handle)
            ),
            source=source,
            target=target,
            source_handle=source_handle,
            target_handle=target_handle,
            origin=EdgeOrigin.USER,
        )
        self._edges.append(edge)
        logger.debug("Added edge %s", edge.id)
        return edge

    def reconnect_edge(
        self,
        edge_id: str,
        source: str,
        target: str,
        source_handle: Optional[str] = None,
        target_handle: Optional[str] = None,
    ) -> Optional[LiveEdge]:
        if not (self.spec.has_step(source) and self.spec.has_step(target)):
            logger.debug(
                "Reconnect of %s to %s -> %s ignored: not between steps", edge_id, source, target
            )
            return None
        for index, edge in enumerate(self._edges):
            if edge.id != edge_id:
                continue
            origin = EdgeOrigin.RECONNECTED if edge.origin is EdgeOrigin.SPEC else edge.origin
            updated = replace(
                edge,
                source=source,
                target=target,
                source_handle=source_handle,
                target_handle=target_handle,
                origin=origin,
            )
            self._edges[index] = updated
            logger.debug("Reconnected edge %s to %s -> %s", edge_id, source, target)
            return updated
        logger.debug("Reconnect ignored: no edge %s", edge_id)
        return None

    def remove_edge(self, edge_id: str) -> bool:
        remaining = [edge for edge in self._edges if edge.id != edge_id]
        if len(remaining) == len(self._edges):
            logger.debug("Remove ignored: no edge %s", edge_id)
            return False
        self._edges = remaining
        logger.debug("Removed edge %s", edge_id)
        return True

    # ===== Positions =====

    def move_position(self, node_id: str, position: Position) -> None:
        self.positions.set(node_id, position)

    # ===== Derived state =====

    def visibility(self) -> Visibility:
        return compute_visibility(
            self._cursor, self.spec.steps, self._edges, self.spec.notes
        )

    def snapshot(self) -> GraphState:
        return GraphState(
            spec=self.spec,
            cursor=self._cursor,
            edges=tuple(self._edges),
            positions=MappingProxyType(self.positions.resolve_all()),
        )

    def _spec_edges(self) -> List[LiveEdge]:
        return [LiveEdge.from_spec(edge) for edge in self.spec.edges]

    def _clamp(self, cursor: int) -> int:
        return max(1, min(int(cursor), self.step_count))

    def _fresh_edge_id(self, base: str) -> str:
        taken = {edge.id for edge in self._edges}
        candidate = base
        suffix = 1
        while candidate in taken:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate
