"""Colour and icon lookups for phases and colour tags."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from flowreveal.graph.spec import ColorTag, Phase


@dataclass(frozen=True)
class Swatch:
    background: str
    border: str


@dataclass(frozen=True)
class PhaseStyle:
    swatch: Swatch
    icon: str


PHASE_STYLES: Dict[Phase, PhaseStyle] = {
    Phase.ENTRY: PhaseStyle(Swatch("#f0f9ff", "#0ea5e9"), "🚀"),
    Phase.SETUP: PhaseStyle(Swatch("#fef3c7", "#f59e0b"), "⚙️"),
    Phase.COORDINATION: PhaseStyle(Swatch("#fef9c3", "#eab308"), "🟡"),
    Phase.AGENTS: PhaseStyle(Swatch("#f0fdf4", "#22c55e"), "🤖"),
    Phase.LOOP: PhaseStyle(Swatch("#f5f5f5", "#6b7280"), "🔄"),
    Phase.DECISION: PhaseStyle(Swatch("#fee2e2", "#ef4444"), "❓"),
    Phase.DONE: PhaseStyle(Swatch("#d1fae5", "#10b981"), "✅"),
}

COLOR_SWATCHES: Dict[ColorTag, Swatch] = {
    ColorTag.GREEN: Swatch("#f0fdf4", "#22c55e"),
    ColorTag.BLUE: Swatch("#eff6ff", "#3b82f6"),
    ColorTag.PURPLE: Swatch("#faf5ff", "#a855f7"),
    ColorTag.RED: Swatch("#fef2f2", "#ef4444"),
    ColorTag.AMBER: Swatch("#fef3c7", "#f59e0b"),
    ColorTag.PINK: Swatch("#fce7f3", "#db2777"),
    ColorTag.VIOLET: Swatch("#ede9fe", "#8b5cf6"),
}

# Terminal colour names used by the TUI for each phase.
PHASE_TERMINAL_COLORS: Dict[Phase, str] = {
    Phase.ENTRY: "deep_sky_blue1",
    Phase.SETUP: "orange1",
    Phase.COORDINATION: "yellow",
    Phase.AGENTS: "green",
    Phase.LOOP: "grey62",
    Phase.DECISION: "red",
    Phase.DONE: "spring_green2",
}


def step_swatch(phase: Phase, color: Optional[ColorTag] = None) -> Swatch:
    """A step's colour tag, when present, overrides its phase colours."""
    if color is not None:
        return COLOR_SWATCHES[color]
    return PHASE_STYLES[phase].swatch


def phase_icon(phase: Phase) -> str:
    return PHASE_STYLES[phase].icon
