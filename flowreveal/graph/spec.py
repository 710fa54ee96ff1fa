"""Static workflow graph: steps, edges and notes."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, Optional, Set, Tuple


class GraphSpecError(ValueError):
    """Raised when a graph definition is malformed or reuses an id."""


class UnknownNodeError(KeyError):
    """Raised when a node or note id is not part of the graph."""


class Phase(Enum):
    ENTRY = "entry"
    SETUP = "setup"
    COORDINATION = "coordination"
    AGENTS = "agents"
    LOOP = "loop"
    DECISION = "decision"
    DONE = "done"


class ColorTag(Enum):
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    RED = "red"
    AMBER = "amber"
    PINK = "pink"
    VIOLET = "violet"


@dataclass(frozen=True)
class Position:
    x: float
    y: float


@dataclass(frozen=True)
class Step:
    """A workflow step. ``order_index`` drives when it is revealed."""

    id: str
    label: str
    description: str
    phase: Phase
    position: Position
    agent: Optional[str] = None
    color: Optional[ColorTag] = None
    order_index: int = 0


@dataclass(frozen=True)
class EdgeSpec:
    """A dependency edge declared in the static graph."""

    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None
    label: Optional[str] = None

    @property
    def id(self) -> str:
        return spec_edge_id(self.source, self.target)


@dataclass(frozen=True)
class NoteSpec:
    """Explanatory note shown once the cursor reaches ``appears_at``."""

    id: str
    appears_at: int
    position: Position
    color: ColorTag
    content: str


def spec_edge_id(source: str, target: str) -> str:
    return f"e{source}-{target}"


@dataclass(frozen=True)
class GraphSpec:
    title: str
    steps: Tuple[Step, ...]
    edges: Tuple[EdgeSpec, ...]
    notes: Tuple[NoteSpec, ...] = ()
    subtitle: str = ""

    @classmethod
    def build(
        cls,
        title: str,
        steps: Iterable[Step],
        edges: Iterable[EdgeSpec],
        notes: Iterable[NoteSpec] = (),
        subtitle: str = "",
    ) -> "GraphSpec":
        """Assign order indexes from declaration order and check id uniqueness."""
        ordered = tuple(
            replace(step, order_index=index) for index, step in enumerate(steps)
        )
        edges = tuple(edges)
        notes = tuple(notes)
        _check_unique_ids(ordered, edges, notes)
        return cls(
            title=title,
            steps=ordered,
            edges=edges,
            notes=notes,
            subtitle=subtitle,
        )

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def step(self, step_id: str) -> Step:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise UnknownNodeError(step_id)

    def has_step(self, node_id: str) -> bool:
        return any(step.id == node_id for step in self.steps)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.default_positions()

    def default_positions(self) -> Dict[str, Position]:
        positions = {step.id: step.position for step in self.steps}
        positions.update({note.id: note.position for note in self.notes})
        return positions

    def default_position(self, node_id: str) -> Position:
        positions = self.default_positions()
        if node_id not in positions:
            raise UnknownNodeError(node_id)
        return positions[node_id]


def _check_unique_ids(
    steps: Tuple[Step, ...],
    edges: Tuple[EdgeSpec, ...],
    notes: Tuple[NoteSpec, ...],
) -> None:
    node_ids: Set[str] = set()
    for step in steps:
        if step.id in node_ids:
            raise GraphSpecError(f"Duplicate step id: {step.id}")
        node_ids.add(step.id)
    for note in notes:
        if note.id in node_ids:
            raise GraphSpecError(f"Duplicate node id: {note.id}")
        node_ids.add(note.id)

    edge_ids: Set[str] = set()
    for edge in edges:
        if edge.id in edge_ids:
            raise GraphSpecError(f"Duplicate edge id: {edge.id}")
        edge_ids.add(edge.id)
