from __future__ import annotations

from typing import List, Optional

import select
import sys
import termios
import tty

from rich.console import Console, Group
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .graph.spec import Phase, Position
from .graph.theme import PHASE_TERMINAL_COLORS
from .render.adapter import Connection, Frame, RenderEdge
from .session import FlowSession


def run_tui(session: FlowSession, nudge: float = 10, debug: bool = False) -> None:
    if not sys.stdin.isatty():
        raise RuntimeError("Interactive UI requires a TTY for input. Run from a terminal.")
    tui = FlowRevealTUI(session=session, nudge=nudge, debug=debug)
    tui.run()


class FlowRevealTUI:
    def __init__(
        self,
        session: FlowSession,
        console: Optional[Console] = None,
        nudge: float = 10,
        debug: bool = False,
    ):
        self.session = session
        self.console = console or Console()
        self.nudge = nudge
        self.debug = debug
        self.selected_node: Optional[str] = None
        self.selected_edge: Optional[str] = None
        self.pending_source: Optional[str] = None
        self.status_message = ""
        self.overlay_title: Optional[str] = None
        self.overlay_lines: List[str] = []
        self.last_key = ""
        self.frame: Frame = session.frame()
        self._sync_selection()

    def run(self) -> None:
        with Live(self.render(), console=self.console, refresh_per_second=10, screen=True) as live:
            while True:
                key = self._get_key()
                if not key:
                    continue
                if key == "\x03":
                    break
                if self._handle_key(key) == "quit":
                    break
                live.update(self.render())

    # ===== Rendering =====

    def render(self) -> Layout:
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="main", ratio=1),
            Layout(name="footer", size=3),
        )
        layout["header"].update(self._render_header())
        if self.overlay_title:
            layout["main"].update(self._render_overlay())
        else:
            layout["main"].split_row(
                Layout(name="steps", ratio=3),
                Layout(name="side", ratio=2),
            )
            layout["main"]["steps"].update(self._render_steps())
            layout["main"]["side"].split_column(
                Layout(name="edges", ratio=1),
                Layout(name="notes", ratio=1),
            )
            layout["main"]["side"]["edges"].update(self._render_edges())
            layout["main"]["side"]["notes"].update(self._render_notes())
        layout["footer"].update(self._render_footer())
        return layout

    def _render_header(self) -> Panel:
        controller = self.session.controller
        title = Text()
        title.append(self.session.spec.title, style="bold cyan")
        title.append("  |  ", style="dim")
        title.append(
            f"Step {controller.cursor} of {controller.step_count}",
            style="bold yellow",
        )
        if self.session.spec.subtitle:
            title.append("  |  ", style="dim")
            title.append(self.session.spec.subtitle, style="green")
        max_width = max(10, self.console.size.width - 4)
        title.truncate(max_width, overflow="ellipsis")
        return Panel(title, style="bold")

    def _render_steps(self) -> Panel:
        table = Table(box=None, padding=(0, 1), expand=True)
        table.add_column("", width=2)
        table.add_column("Step")
        table.add_column("Description", style="dim")
        table.add_column("Position", justify="right")

        nodes, _ = self.frame
        for node in nodes:
            if node.type != "custom" or not node.interactive:
                continue
            marker = ">" if node.id == self.selected_node else ""
            if node.id == self.pending_source:
                marker = "*"
            color = PHASE_TERMINAL_COLORS[Phase(node.data["phase"])]
            label = Text(f"{node.data['icon']} {node.data['title']}", style=color)
            if node.id == self.selected_node:
                label.stylize("reverse")
            table.add_row(
                marker,
                label,
                node.data["description"],
                _format_position(node.position),
            )
        return Panel(table, title="Steps", border_style="green")

    def _render_edges(self) -> Panel:
        _, edges = self.frame
        text = Text()
        shown = [edge for edge in edges if edge.style.opacity]
        if not shown:
            text.append("No edges revealed yet", style="dim")
        for idx, edge in enumerate(shown):
            if idx:
                text.append("\n")
            style = "reverse" if edge.id == self.selected_edge else ""
            text.append(_format_edge(edge), style=style)
        return Panel(text, title="Edges", border_style="blue")

    def _render_notes(self) -> Panel:
        nodes, _ = self.frame
        notes = [node for node in nodes if node.type == "note" and node.interactive]
        if not notes:
            return Panel(Text("No notes yet", style="dim"), title="Notes", border_style="magenta")
        parts = []
        for node in notes:
            marker = "> " if node.id == self.selected_node else ""
            parts.append(Text(f"{marker}{node.id} {_format_position(node.position)}", style="bold"))
            parts.append(Text(node.data["content"]))
        return Panel(Group(*parts), title="Notes", border_style="magenta")

    def _render_footer(self) -> Panel:
        controller = self.session.controller
        shortcuts = Text()
        prev_style = "bold" if controller.can_retreat else "dim strike"
        next_style = "bold" if controller.can_advance else "dim strike"
        shortcuts.append(" [<-] Prev  ", style=prev_style)
        shortcuts.append("[->] Next  ", style=next_style)
        shortcuts.append("[r] ", style="bold")
        shortcuts.append("Reset  ", style="dim")
        shortcuts.append("[wasd] ", style="bold")
        shortcuts.append("Move  ", style="dim")
        shortcuts.append("[c] ", style="bold")
        shortcuts.append("Connect  ", style="dim")
        shortcuts.append("[?] ", style="bold")
        shortcuts.append("Help  ", style="dim")
        shortcuts.append("[q] ", style="bold")
        shortcuts.append("Quit", style="dim")

        if self.status_message:
            shortcuts.append("  |  ", style="dim")
            shortcuts.append(self.status_message, style="yellow")
        if self.debug:
            shortcuts.append("  |  ", style="dim")
            shortcuts.append(
                f"node={self.selected_node} edge={self.selected_edge} key={self.last_key}",
                style="dim",
            )
        max_width = max(10, self.console.size.width - 4)
        shortcuts.truncate(max_width, overflow="ellipsis")
        return Panel(shortcuts, style="dim")

    def _render_overlay(self) -> Panel:
        return Panel(
            Text("\n".join(self.overlay_lines)),
            title=self.overlay_title or "Info",
            border_style="bright_cyan",
        )

    # ===== Input Handling =====

    def _handle_key(self, key: str) -> Optional[str]:
        key = self._normalize_key(key)
        self.last_key = key
        if self.overlay_title:
            if key in ("ESC", "q", "?"):
                self._clear_overlay()
            return None

        self.status_message = ""
        if key == "q":
            return "quit"
        if key in ("h", "LEFT"):
            self._apply(self.session.prev(), "Already at the first step")
        elif key in ("l", "RIGHT", " "):
            self._apply(self.session.next(), "All steps revealed")
        elif key == "r":
            self.session.reset()
            self.pending_source = None
            self._refresh()
            self.status_message = "Reset"
        elif key == "g":
            self._apply(self.session.go_to(1), "Already at the first step")
        elif key == "G":
            self._apply(
                self.session.go_to(self.session.controller.step_count),
                "All steps revealed",
            )
        elif key in ("k", "UP"):
            self._cycle_node(-1)
        elif key in ("j", "DOWN"):
            self._cycle_node(1)
        elif key in ("w", "a", "s", "d"):
            self._nudge_selected(key)
        elif key == "c":
            self._connect_selected()
        elif key == "]":
            self._cycle_edge(1)
        elif key == "[":
            self._cycle_edge(-1)
        elif key == "t":
            self._retarget_selected_edge()
        elif key == "x":
            self._delete_selected_edge()
        elif key == "ESC":
            self.pending_source = None
        elif key == "?":
            self._show_help()
        return None

    # ===== Actions =====

    def _apply(self, changed: bool, unchanged_message: str) -> None:
        if not changed:
            self.status_message = unchanged_message
        self._refresh()

    def _refresh(self) -> None:
        self.frame = self.session.frame()
        self._sync_selection()

    def _interactive_node_ids(self) -> List[str]:
        nodes, _ = self.frame
        return [node.id for node in nodes if node.interactive]

    def _visible_edge_ids(self) -> List[str]:
        _, edges = self.frame
        return [edge.id for edge in edges if edge.style.opacity]

    def _sync_selection(self) -> None:
        node_ids = self._interactive_node_ids()
        if self.selected_node not in node_ids:
            self.selected_node = node_ids[0] if node_ids else None
        if self.pending_source not in node_ids:
            self.pending_source = None
        edge_ids = self._visible_edge_ids()
        if self.selected_edge not in edge_ids:
            self.selected_edge = edge_ids[0] if edge_ids else None

    def _cycle_node(self, delta: int) -> None:
        node_ids = self._interactive_node_ids()
        if not node_ids:
            return
        index = node_ids.index(self.selected_node) if self.selected_node in node_ids else 0
        self.selected_node = node_ids[(index + delta) % len(node_ids)]

    def _cycle_edge(self, delta: int) -> None:
        edge_ids = self._visible_edge_ids()
        if not edge_ids:
            self.status_message = "No edges to select"
            return
        index = edge_ids.index(self.selected_edge) if self.selected_edge in edge_ids else 0
        self.selected_edge = edge_ids[(index + delta) % len(edge_ids)]

    def _nudge_selected(self, key: str) -> None:
        if not self.selected_node:
            return
        dx, dy = {"w": (0, -1), "a": (-1, 0), "s": (0, 1), "d": (1, 0)}[key]
        current = self.session.controller.positions.get(self.selected_node)
        self.session.drag(
            self.selected_node,
            Position(current.x + dx * self.nudge, current.y + dy * self.nudge),
        )
        self._refresh()

    def _connect_selected(self) -> None:
        if not self.selected_node:
            return
        if self.pending_source is None:
            self.pending_source = self.selected_node
            self.status_message = f"Connecting from {self.selected_node}: select target, press c"
            return
        source, self.pending_source = self.pending_source, None
        if self.session.connect(Connection(source=source, target=self.selected_node)):
            self.status_message = f"Connected {source} -> {self.selected_node}"
        else:
            self.status_message = "Connection ignored"
        self._refresh()

    def _retarget_selected_edge(self) -> None:
        edge = self.session.controller.find_edge(self.selected_edge or "")
        if edge is None or not self.selected_node:
            self.status_message = "Select an edge and a target node first"
            return
        connection = Connection(
            source=edge.source,
            target=self.selected_node,
            source_handle=edge.source_handle,
            target_handle=edge.target_handle,
        )
        if self.session.reconnect(edge.id, connection):
            self.status_message = f"Reconnected {edge.id} to {self.selected_node}"
        else:
            self.status_message = "Reconnect ignored"
        self._refresh()

    def _delete_selected_edge(self) -> None:
        if self.selected_edge and self.session.remove_edge(self.selected_edge):
            self.status_message = f"Removed {self.selected_edge}"
        self._refresh()

    def _show_help(self) -> None:
        lines = [
            "Reveal:",
            "  Left/Right or h/l  - Previous/Next step",
            "  g/G                - First/Last step",
            "  r                  - Reset steps, layout and edges",
            "",
            "Edit:",
            "  Up/Down or k/j     - Select node",
            "  w/a/s/d            - Move selected node",
            "  c                  - Connect (press on source, then target)",
            "  [ / ]              - Select edge",
            "  t                  - Reconnect selected edge to selected node",
            "  x                  - Delete selected edge",
            "",
            "General:",
            "  q                  - Quit",
            "  Esc                - Cancel connect / close overlays",
        ]
        self.overlay_title = "Help"
        self.overlay_lines = lines

    def _clear_overlay(self) -> None:
        self.overlay_title = None
        self.overlay_lines = []

    # ===== Helpers =====

    def _get_key(self) -> str:
        fd = sys.stdin.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            ch = sys.stdin.read(1)
            if ch == "\x1b":
                seq = ch
                while True:
                    ready, _, _ = select.select([sys.stdin], [], [], 0.02)
                    if not ready:
                        break
                    nxt = sys.stdin.read(1)
                    seq += nxt
                    if nxt.isalpha() or nxt == "~":
                        break
                    if len(seq) >= 12:
                        break
                return seq
            return ch
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    def _normalize_key(self, key: str) -> str:
        if key.startswith("\x1b[") or key.startswith("\x1bO"):
            last = key[-1]
            if last == "A":
                return "UP"
            if last == "B":
                return "DOWN"
            if last == "C":
                return "RIGHT"
            if last == "D":
                return "LEFT"
            return "ESC"
        if key.startswith("\x1b"):
            return "ESC"
        return key


def _format_position(position: Position) -> str:
    return f"({position.x:g}, {position.y:g})"


def _format_edge(edge: RenderEdge) -> str:
    text = f"{edge.source} -> {edge.target}"
    if edge.label:
        text += f"  [{edge.label}]"
    if edge.animated:
        text += "  ~"
    return text

