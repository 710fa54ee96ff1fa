"""A reveal session: one controller, one adapter, and the user-facing actions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from flowreveal.graph.controller import GraphStateController
from flowreveal.graph.spec import GraphSpec, Position, UnknownNodeError
from flowreveal.render.adapter import (
    Connection,
    EdgeChange,
    Frame,
    NodeChange,
    RenderAdapter,
)

logger = logging.getLogger(__name__)


class ReplayError(ValueError):
    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


@dataclass
class FlowSession:
    controller: GraphStateController
    adapter: RenderAdapter

    @classmethod
    def from_spec(cls, spec: GraphSpec, cursor: int = 1) -> "FlowSession":
        controller = GraphStateController(spec, cursor=cursor)
        return cls(controller=controller, adapter=RenderAdapter(controller))

    @property
    def spec(self) -> GraphSpec:
        return self.controller.spec

    def frame(self) -> Frame:
        return self.adapter.project()

    # ===== Buttons =====

    def next(self) -> bool:
        return self.controller.advance()

    def prev(self) -> bool:
        return self.controller.retreat()

    def reset(self) -> None:
        self.controller.reset()

    def go_to(self, cursor: int) -> bool:
        return self.controller.go_to(cursor)

    # ===== Gestures (routed through the renderer event channel) =====

    def drag(self, node_id: str, position: Position) -> None:
        self.adapter.apply_node_changes([NodeChange("position", node_id, position)])

    def connect(self, connection: Connection) -> bool:
        return self.adapter.on_connect(connection) is not None

    def reconnect(self, edge_id: str, connection: Connection) -> bool:
        return self.adapter.on_reconnect(edge_id, connection) is not None

    def remove_edge(self, edge_id: str) -> bool:
        return self.adapter.apply_edge_changes([EdgeChange("remove", edge_id)]) > 0

    def dispatch(self, event: Dict[str, Any]) -> bool:
        """Apply one event in the replay format. Returns whether state changed."""
        kind = event.get("type")
        if kind == "next":
            return self.next()
        if kind == "prev":
            return self.prev()
        if kind == "reset":
            self.reset()
            return True
        if kind == "goto":
            return self.go_to(_int_field(event, "cursor"))
        if kind == "position":
            node_id = _str_field(event, "id")
            try:
                self.drag(node_id, _position_field(event))
            except UnknownNodeError as exc:
                raise ReplayError(f"Unknown node id: {node_id!r}") from exc
            return True
        if kind == "connect":
            return self.connect(_connection(event))
        if kind == "reconnect":
            return self.reconnect(_str_field(event, "edgeId"), _connection(event))
        if kind == "remove":
            return self.remove_edge(_str_field(event, "edgeId"))
        raise ReplayError(f"Unknown event type: {kind!r}")


def replay(session: FlowSession, lines: Iterable[str]) -> int:
    """Apply JSON Lines events in order; blank lines are skipped."""
    applied = 0
    for line_number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            continue
        try:
            event = json.loads(line)
        except json.JSONDecodeError as exc:
            raise ReplayError(f"Invalid JSON: {exc.msg}", line_number) from exc
        if not isinstance(event, dict):
            raise ReplayError("Event must be a JSON object", line_number)
        try:
            changed = session.dispatch(event)
        except ReplayError as exc:
            raise ReplayError(str(exc), line_number) from exc
        logger.debug("Replayed %s (changed=%s)", event.get("type"), changed)
        applied += 1
    return applied


def _str_field(event: Dict[str, Any], key: str) -> str:
    value = event.get(key)
    if not isinstance(value, str) or not value:
        raise ReplayError(f"'{event.get('type')}' event needs a string '{key}'")
    return value


def _int_field(event: Dict[str, Any], key: str) -> int:
    value = event.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ReplayError(f"'{event.get('type')}' event needs an integer '{key}'")
    return value


def _position_field(event: Dict[str, Any]) -> Position:
    value = event.get("position")
    try:
        return Position(float(value["x"]), float(value["y"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise ReplayError("'position' event needs a position with x and y") from exc


def _connection(event: Dict[str, Any]) -> Connection:
    return Connection(
        source=_str_field(event, "source"),
        target=_str_field(event, "target"),
        source_handle=event.get("sourceHandle"),
        target_handle=event.get("targetHandle"),
    )
