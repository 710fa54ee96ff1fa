from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from .graph.catalog import maven_flow
from .graph.loader import load_graph_spec
from .render.adapter import frame_to_dict
from .session import FlowSession, replay


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="flowreveal",
        description="Reveal a workflow graph one step at a time",
    )
    parser.add_argument(
        "--graph",
        default=None,
        help="Path to a JSON graph definition (default: built-in Maven Flow)",
    )
    parser.add_argument(
        "--cursor",
        type=int,
        default=1,
        help="Initial reveal cursor, clamped to the step range",
    )
    parser.add_argument(
        "--replay",
        default=None,
        help="JSON Lines file of events to apply before output",
    )
    parser.add_argument(
        "--format",
        choices=["table", "json"],
        default="table",
        help="Output format when not running the terminal UI",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Run the interactive terminal UI",
    )
    parser.add_argument(
        "--nudge",
        type=float,
        default=10,
        help="Distance a node moves per key press in the terminal UI",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging",
    )

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        spec = load_graph_spec(Path(args.graph)) if args.graph else maven_flow()
        session = FlowSession.from_spec(spec, cursor=args.cursor)
        if args.replay:
            with open(args.replay, encoding="utf-8") as handle:
                replay(session, handle)
        if args.tui:
            from .tui import run_tui

            run_tui(session, nudge=args.nudge, debug=args.verbose)
        elif args.format == "json":
            print(json.dumps(frame_to_dict(session.frame()), indent=2, ensure_ascii=False))
        else:
            print_frame(session, Console())
        return 0
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 1
    except Exception as exc:
        print(f"\nError: {exc}")
        return 1


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def print_frame(session: FlowSession, console: Console) -> None:
    controller = session.controller
    nodes, edges = session.frame()
    console.print(f"[bold cyan]{session.spec.title}[/]")
    if session.spec.subtitle:
        console.print(session.spec.subtitle, style="dim")
    console.print(f"Step {controller.cursor} of {controller.step_count}", style="bold yellow")

    node_table = Table(title="Nodes")
    node_table.add_column("Id")
    node_table.add_column("Title")
    node_table.add_column("Position", justify="right")
    node_table.add_column("Visible")
    for node in nodes:
        title = node.data.get("title") or node.data.get("content", "").partition("\n")[0]
        node_table.add_row(
            node.id,
            title,
            f"{node.position.x:g}, {node.position.y:g}",
            "yes" if node.interactive else "",
            style=None if node.interactive else "dim",
        )
    console.print(node_table)

    edge_table = Table(title="Edges")
    edge_table.add_column("Id")
    edge_table.add_column("Route")
    edge_table.add_column("Label")
    edge_table.add_column("Animated")
    for edge in edges:
        edge_table.add_row(
            edge.id,
            f"{edge.source} -> {edge.target}",
            edge.label or "",
            "yes" if edge.animated else "",
            style=None if edge.style.opacity else "dim",
        )
    console.print(edge_table)


if __name__ == "__main__":
    raise SystemExit(main())
