"""Load a workflow graph from a JSON document."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from flowreveal.graph.spec import (
    ColorTag,
    EdgeSpec,
    GraphSpec,
    GraphSpecError,
    NoteSpec,
    Phase,
    Position,
    Step,
)

logger = logging.getLogger(__name__)


def load_graph_spec(path: Path) -> GraphSpec:
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise GraphSpecError(f"Cannot read graph file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise GraphSpecError(f"Invalid JSON in {path}: {exc}") from exc

    spec = graph_spec_from_dict(data)
    logger.info(
        "Loaded %s: %d steps, %d edges, %d notes",
        path.name,
        spec.step_count,
        len(spec.edges),
        len(spec.notes),
    )
    return spec


def graph_spec_from_dict(data: Any) -> GraphSpec:
    if not isinstance(data, dict):
        raise GraphSpecError("Graph document must be a JSON object")

    steps = [_parse_step(item) for item in _list_field(data, "steps")]
    edges = [_parse_edge(item) for item in _list_field(data, "edges")]
    notes = [_parse_note(item) for item in _list_field(data, "notes", required=False)]
    if not steps:
        raise GraphSpecError("Graph needs at least one step")

    return GraphSpec.build(
        title=str(data.get("title") or "Workflow"),
        subtitle=str(data.get("subtitle") or ""),
        steps=steps,
        edges=edges,
        notes=notes,
    )


def _list_field(data: Dict[str, Any], key: str, required: bool = True) -> List[Dict[str, Any]]:
    value = data.get(key)
    if value is None:
        if required:
            raise GraphSpecError(f"Missing '{key}' list")
        return []
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise GraphSpecError(f"'{key}' must be a list of objects")
    return value


def _require(item: Dict[str, Any], key: str, kind: str) -> Any:
    if key not in item:
        raise GraphSpecError(f"{kind} is missing '{key}': {item}")
    return item[key]


def _parse_position(value: Any, owner: str) -> Position:
    if not isinstance(value, dict):
        raise GraphSpecError(f"{owner} needs a position object")
    try:
        return Position(float(value["x"]), float(value["y"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise GraphSpecError(f"{owner} has an invalid position: {value}") from exc


def _parse_enum(enum_cls, value: Any, owner: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        choices = ", ".join(member.value for member in enum_cls)
        raise GraphSpecError(f"{owner}: '{value}' is not one of {choices}") from exc


def _optional_str(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _parse_step(item: Dict[str, Any]) -> Step:
    step_id = str(_require(item, "id", "Step"))
    owner = f"Step {step_id}"
    color = item.get("color")
    return Step(
        id=step_id,
        label=str(_require(item, "label", owner)),
        description=str(item.get("description", "")),
        phase=_parse_enum(Phase, _require(item, "phase", owner), owner),
        position=_parse_position(_require(item, "position", owner), owner),
        agent=_optional_str(item.get("agent")),
        color=_parse_enum(ColorTag, color, owner) if color is not None else None,
    )


def _parse_edge(item: Dict[str, Any]) -> EdgeSpec:
    return EdgeSpec(
        source=str(_require(item, "source", "Edge")),
        target=str(_require(item, "target", "Edge")),
        source_handle=_optional_str(item.get("sourceHandle")),
        target_handle=_optional_str(item.get("targetHandle")),
        label=_optional_str(item.get("label")),
    )


def _parse_note(item: Dict[str, Any]) -> NoteSpec:
    note_id = str(_require(item, "id", "Note"))
    owner = f"Note {note_id}"
    appears_at = _require(item, "appearsAt", owner)
    if isinstance(appears_at, bool) or not isinstance(appears_at, int):
        raise GraphSpecError(f"{owner}: 'appearsAt' must be an integer")
    return NoteSpec(
        id=note_id,
        appears_at=appears_at,
        position=_parse_position(_require(item, "position", owner), owner),
        color=_parse_enum(ColorTag, _require(item, "color", owner), owner),
        content=str(item.get("content", "")),
    )
