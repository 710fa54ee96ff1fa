"""Bridge between graph state and a diagram renderer."""

from .adapter import (
    Connection,
    EdgeChange,
    EdgeStyle,
    Frame,
    NodeChange,
    NodeStyle,
    RenderAdapter,
    RenderEdge,
    RenderNode,
    frame_to_dict,
    project,
)

__all__ = [
    "Connection",
    "EdgeChange",
    "EdgeStyle",
    "Frame",
    "NodeChange",
    "NodeStyle",
    "RenderAdapter",
    "RenderEdge",
    "RenderNode",
    "frame_to_dict",
    "project",
]
