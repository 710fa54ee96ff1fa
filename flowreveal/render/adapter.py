"""Project graph state into renderer nodes/edges and route renderer events back."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from flowreveal.graph.controller import GraphState, GraphStateController
from flowreveal.graph.spec import NoteSpec, Position, Step
from flowreveal.graph.theme import COLOR_SWATCHES, phase_icon, step_swatch
from flowreveal.graph.visibility import EdgeDisplay, LiveEdge, Visibility

logger = logging.getLogger(__name__)

NODE_WIDTH = 260
NODE_HEIGHT = 80
FADE_TRANSITION = "opacity 0.5s ease-in-out"
EDGE_COLOR = "#222"


@dataclass
class NodeStyle:
    opacity: float
    pointer_events: str
    background: str
    border: str
    width: Optional[int] = None
    height: Optional[int] = None
    transition: str = FADE_TRANSITION


@dataclass
class RenderNode:
    id: str
    type: str
    position: Position
    style: NodeStyle
    interactive: bool
    data: Dict[str, Any] = field(default_factory=dict)
    draggable: bool = True
    selectable: bool = True
    connectable: bool = True


@dataclass
class EdgeStyle:
    stroke: str
    stroke_width: int
    opacity: float
    transition: str = FADE_TRANSITION


@dataclass
class RenderEdge:
    id: str
    source: str
    target: str
    source_handle: Optional[str]
    target_handle: Optional[str]
    label: Optional[str]
    style: EdgeStyle
    animated: bool
    marker_end: str = "arrowclosed"


# ===== Renderer events =====


@dataclass
class NodeChange:
    """Node change reported by the renderer; only ``position`` is acted on."""

    type: str
    id: str
    position: Optional[Position] = None
    dragging: bool = False


@dataclass
class EdgeChange:
    type: str
    id: str


@dataclass
class Connection:
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


Frame = Tuple[List[RenderNode], List[RenderEdge]]


def project(state: GraphState) -> Frame:
    """Build render objects for every step, note and live edge.

    Hidden nodes are still emitted, fully transparent and without pointer
    events, so positions and fade transitions survive cursor changes.
    """
    visibility = state.visibility()
    nodes = [_step_node(step, state, visibility) for step in state.spec.steps]
    nodes.extend(_note_node(note, state, visibility) for note in state.spec.notes)
    edges = [_render_edge(edge, visibility.edge_display[edge.id]) for edge in state.edges]
    return nodes, edges


def _node_style(visible: bool, background: str, border: str, sized: bool) -> NodeStyle:
    return NodeStyle(
        opacity=1 if visible else 0,
        pointer_events="auto" if visible else "none",
        background=background,
        border=border,
        width=NODE_WIDTH if sized else None,
        height=NODE_HEIGHT if sized else None,
    )


def _step_node(step: Step, state: GraphState, visibility: Visibility) -> RenderNode:
    visible = step.id in visibility.visible_step_ids
    swatch = step_swatch(step.phase, step.color)
    return RenderNode(
        id=step.id,
        type="custom",
        position=state.positions[step.id],
        style=_node_style(visible, swatch.background, swatch.border, sized=True),
        interactive=visible,
        data={
            "title": step.label,
            "description": step.description,
            "phase": step.phase.value,
            "icon": phase_icon(step.phase),
            "agent": step.agent,
            "color": step.color.value if step.color else None,
        },
    )


def _note_node(note: NoteSpec, state: GraphState, visibility: Visibility) -> RenderNode:
    visible = note.id in visibility.visible_note_ids
    swatch = COLOR_SWATCHES[note.color]
    return RenderNode(
        id=note.id,
        type="note",
        position=state.positions[note.id],
        style=_node_style(visible, swatch.background, swatch.border, sized=False),
        interactive=visible,
        data={"content": note.content, "color": note.color.value},
        selectable=False,
        connectable=False,
    )


def _render_edge(edge: LiveEdge, display: EdgeDisplay) -> RenderEdge:
    return RenderEdge(
        id=edge.id,
        source=edge.source,
        target=edge.target,
        source_handle=edge.source_handle,
        target_handle=edge.target_handle,
        label=display.label,
        style=EdgeStyle(
            stroke=EDGE_COLOR,
            stroke_width=2,
            opacity=1 if display.visible else 0,
        ),
        animated=display.animated,
    )


class RenderAdapter:
    """Reads the controller for projection and forwards renderer events to it."""

    def __init__(self, controller: GraphStateController) -> None:
        self.controller = controller

    def project(self) -> Frame:
        return project(self.controller.snapshot())

    def apply_node_changes(self, changes: Iterable[NodeChange]) -> int:
        applied = 0
        for change in changes:
            if change.type != "position" or change.position is None:
                continue
            self.controller.move_position(change.id, change.position)
            applied += 1
        return applied

    def apply_edge_changes(self, changes: Iterable[EdgeChange]) -> int:
        removed = 0
        for change in changes:
            if change.type != "remove":
                logger.debug("Ignoring edge change %s on %s", change.type, change.id)
                continue
            if self.controller.remove_edge(change.id):
                removed += 1
        return removed

    def on_connect(self, connection: Connection) -> Optional[LiveEdge]:
        return self.controller.add_edge(
            connection.source,
            connection.target,
            connection.source_handle,
            connection.target_handle,
        )

    def on_reconnect(self, old_edge_id: str, connection: Connection) -> Optional[LiveEdge]:
        return self.controller.reconnect_edge(
            old_edge_id,
            connection.source,
            connection.target,
            connection.source_handle,
            connection.target_handle,
        )


def frame_to_dict(frame: Frame) -> Dict[str, List[Dict[str, Any]]]:
    """Serialise a frame with the camelCase keys a JS renderer expects."""
    nodes, edges = frame
    return {
        "nodes": [
            {
                "id": node.id,
                "type": node.type,
                "position": {"x": node.position.x, "y": node.position.y},
                "data": dict(node.data),
                "style": _style_dict(
                    {
                        "width": node.style.width,
                        "height": node.style.height,
                        "opacity": node.style.opacity,
                        "transition": node.style.transition,
                        "pointerEvents": node.style.pointer_events,
                        "backgroundColor": node.style.background,
                        "borderColor": node.style.border,
                    }
                ),
                "interactive": node.interactive,
                "draggable": node.draggable,
                "selectable": node.selectable,
                "connectable": node.connectable,
            }
            for node in nodes
        ],
        "edges": [
            _style_dict(
                {
                    "id": edge.id,
                    "source": edge.source,
                    "target": edge.target,
                    "sourceHandle": edge.source_handle,
                    "targetHandle": edge.target_handle,
                    "label": edge.label,
                    "animated": edge.animated,
                    "style": {
                        "stroke": edge.style.stroke,
                        "strokeWidth": edge.style.stroke_width,
                        "opacity": edge.style.opacity,
                        "transition": edge.style.transition,
                    },
                    "markerEnd": {"type": edge.marker_end, "color": edge.style.stroke},
                }
            )
            for edge in edges
        ],
    }


def _style_dict(values: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}
