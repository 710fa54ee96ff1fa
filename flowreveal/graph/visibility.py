"""Derive what is revealed from the reveal cursor.

Everything here is recomputed from scratch on each call. Edge visibility only
asks whether both endpoints are revealed, never which way the edge points, so
loop-back edges appear once the cursor has passed both of their ends.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from flowreveal.graph.spec import EdgeSpec, NoteSpec, Step


class EdgeOrigin(Enum):
    SPEC = "spec"
    USER = "user"
    RECONNECTED = "reconnected"


@dataclass(frozen=True)
class LiveEdge:
    """An edge as currently rendered: declared, user-drawn or reconnected."""

    id: str
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    label: Optional[str] = None
    origin: EdgeOrigin = EdgeOrigin.SPEC

    @classmethod
    def from_spec(cls, edge: EdgeSpec) -> "LiveEdge":
        return cls(
            id=edge.id,
            source=edge.source,
            target=edge.target,
            source_handle=edge.source_handle,
            target_handle=edge.target_handle,
            label=edge.label,
            origin=EdgeOrigin.SPEC,
        )

    @property
    def is_live(self) -> bool:
        """User edits are always shown, whatever the cursor."""
        return self.origin is not EdgeOrigin.SPEC

    @property
    def routing(self) -> Tuple[str, str, Optional[str], Optional[str]]:
        return (self.source, self.target, self.source_handle, self.target_handle)


@dataclass(frozen=True)
class EdgeDisplay:
    visible: bool
    animated: bool
    label: Optional[str] = None


@dataclass(frozen=True)
class Visibility:
    cursor: int
    visible_step_ids: FrozenSet[str]
    visible_edge_ids: FrozenSet[str]
    visible_note_ids: FrozenSet[str]
    edge_display: Dict[str, EdgeDisplay] = field(default_factory=dict)

    def is_visible(self, node_id: str) -> bool:
        return node_id in self.visible_step_ids or node_id in self.visible_note_ids


def compute_visibility(
    cursor: int,
    steps: Iterable[Step],
    edges: Iterable[LiveEdge],
    notes: Iterable[NoteSpec],
) -> Visibility:
    """Map a (clamped) reveal cursor to the visible subset of the graph."""
    visible_steps = frozenset(step.id for step in steps if step.order_index < cursor)
    visible_notes = frozenset(note.id for note in notes if cursor >= note.appears_at)

    edge_display: Dict[str, EdgeDisplay] = {}
    for edge in edges:
        if edge.is_live:
            visible = True
        else:
            visible = edge.source in visible_steps and edge.target in visible_steps
        edge_display[edge.id] = EdgeDisplay(
            visible=visible,
            animated=visible,
            label=edge.label if visible else None,
        )

    return Visibility(
        cursor=cursor,
        visible_step_ids=visible_steps,
        visible_edge_ids=frozenset(
            edge_id for edge_id, display in edge_display.items() if display.visible
        ),
        visible_note_ids=visible_notes,
        edge_display=edge_display,
    )
