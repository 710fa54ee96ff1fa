"""Mutable position overlay on top of the default layout."""

from __future__ import annotations

import logging
from typing import Dict

from flowreveal.graph.spec import GraphSpec, Position, UnknownNodeError

logger = logging.getLogger(__name__)


class PositionStore:
    """Per-id coordinate overrides, falling back to the default layout.

    Referencing an id that is neither a step nor a note is a caller bug and
    raises ``UnknownNodeError``.
    """

    def __init__(self, spec: GraphSpec) -> None:
        self._defaults: Dict[str, Position] = spec.default_positions()
        self._overlay: Dict[str, Position] = {}

    def get(self, node_id: str) -> Position:
        if node_id in self._overlay:
            return self._overlay[node_id]
        if node_id not in self._defaults:
            raise UnknownNodeError(node_id)
        return self._defaults[node_id]

    def set(self, node_id: str, position: Position) -> None:
        if node_id not in self._defaults:
            raise UnknownNodeError(node_id)
        self._overlay[node_id] = position

    def reset_all(self) -> None:
        if self._overlay:
            logger.debug("Clearing %d position overrides", len(self._overlay))
        self._overlay.clear()

    def is_overridden(self, node_id: str) -> bool:
        return node_id in self._overlay

    @property
    def overrides(self) -> Dict[str, Position]:
        return dict(self._overlay)

    def resolve_all(self) -> Dict[str, Position]:
        resolved = dict(self._defaults)
        resolved.update(self._overlay)
        return resolved
