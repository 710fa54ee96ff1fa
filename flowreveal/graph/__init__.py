"""Step-reveal engine and graph-state model."""

from .spec import (
    ColorTag,
    EdgeSpec,
    GraphSpec,
    GraphSpecError,
    NoteSpec,
    Phase,
    Position,
    Step,
    UnknownNodeError,
    spec_edge_id,
)
from .positions import PositionStore
from .visibility import EdgeDisplay, EdgeOrigin, LiveEdge, Visibility, compute_visibility
from .controller import GraphState, GraphStateController, user_edge_id
from .catalog import maven_flow
from .loader import graph_spec_from_dict, load_graph_spec

__all__ = [
    "ColorTag",
    "EdgeDisplay",
    "EdgeOrigin",
    "EdgeSpec",
    "GraphSpec",
    "GraphSpecError",
    "GraphState",
    "GraphStateController",
    "LiveEdge",
    "NoteSpec",
    "Phase",
    "Position",
    "PositionStore",
    "Step",
    "UnknownNodeError",
    "Visibility",
    "compute_visibility",
    "graph_spec_from_dict",
    "load_graph_spec",
    "maven_flow",
    "spec_edge_id",
    "user_edge_id",
]
