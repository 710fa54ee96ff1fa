import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from flowreveal.graph.catalog import maven_flow
from flowreveal.graph.spec import (
    ColorTag,
    EdgeSpec,
    GraphSpec,
    GraphSpecError,
    NoteSpec,
    Phase,
    Position,
    Step,
    UnknownNodeError,
)
from flowreveal.graph.theme import COLOR_SWATCHES, PHASE_STYLES, step_swatch


def _step(step_id, x=0, y=0):
    return Step(step_id, f"Step {step_id}", "", Phase.LOOP, Position(x, y))


class TestGraphSpec(unittest.TestCase):
    def test_build_assigns_declaration_order(self):
        spec = GraphSpec.build(
            title="Demo",
            steps=[_step("b"), _step("a"), _step("c")],
            edges=[EdgeSpec("c", "b")],
        )

        self.assertEqual([s.order_index for s in spec.steps], [0, 1, 2])
        self.assertEqual(spec.step("a").order_index, 1)
        self.assertEqual(spec.step_count, 3)

    def test_edge_id_is_derived_from_endpoints(self):
        self.assertEqual(EdgeSpec("12", "4", "top", "bottom").id, "e12-4")

    def test_duplicate_ids_are_rejected(self):
        with self.assertRaises(GraphSpecError):
            GraphSpec.build("Demo", [_step("a"), _step("a")], [])
        with self.assertRaises(GraphSpecError):
            GraphSpec.build(
                "Demo",
                [_step("a"), _step("b")],
                [EdgeSpec("a", "b", "right"), EdgeSpec("a", "b", "bottom")],
            )
        with self.assertRaises(GraphSpecError):
            GraphSpec.build(
                "Demo",
                [_step("a")],
                [],
                [NoteSpec("a", 1, Position(0, 0), ColorTag.PINK, "clash")],
            )

    def test_default_positions_cover_steps_and_notes(self):
        spec = GraphSpec.build(
            "Demo",
            [_step("a", 10, 20)],
            [],
            [NoteSpec("note", 1, Position(5, 6), ColorTag.AMBER, "hello")],
        )

        self.assertEqual(spec.default_position("a"), Position(10, 20))
        self.assertEqual(spec.default_position("note"), Position(5, 6))
        self.assertTrue(spec.has_node("note"))
        self.assertFalse(spec.has_step("note"))
        with self.assertRaises(UnknownNodeError):
            spec.default_position("missing")
        with self.assertRaises(UnknownNodeError):
            spec.step("missing")

    def test_builtin_catalog(self):
        spec = maven_flow()

        self.assertEqual(spec.step_count, 16)
        self.assertEqual(len(spec.edges), 19)
        self.assertEqual(len(spec.notes), 4)
        self.assertEqual(spec.step("12").order_index, 14)
        loop_back = [edge for edge in spec.edges if edge.id == "e12-4"][0]
        self.assertEqual(loop_back.label, "More stories")


class TestTheme(unittest.TestCase):
    def test_every_phase_and_color_has_a_style(self):
        for phase in Phase:
            self.assertIn(phase, PHASE_STYLES)
        for color in ColorTag:
            self.assertIn(color, COLOR_SWATCHES)

    def test_color_tag_overrides_phase(self):
        self.assertEqual(step_swatch(Phase.AGENTS).border, "#22c55e")
        self.assertEqual(step_swatch(Phase.AGENTS, ColorTag.BLUE).border, "#3b82f6")


if __name__ == "__main__":
    unittest.main()
