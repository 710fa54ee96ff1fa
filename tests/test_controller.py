import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from flowreveal.graph.catalog import maven_flow
from flowreveal.graph.controller import GraphStateController
from flowreveal.graph.spec import GraphSpec, Position, UnknownNodeError
from flowreveal.graph.visibility import EdgeOrigin


class TestRevealCursor(unittest.TestCase):
    def setUp(self):
        self.spec = maven_flow()
        self.controller = GraphStateController(self.spec)

    def test_starts_at_first_step(self):
        self.assertEqual(self.controller.cursor, 1)
        self.assertFalse(self.controller.can_retreat)
        self.assertTrue(self.controller.can_advance)

    def test_advance_reaches_last_step_then_stops(self):
        n = self.spec.step_count
        for _ in range(n - 1):
            self.assertTrue(self.controller.advance())
        self.assertEqual(self.controller.cursor, n)

        self.assertFalse(self.controller.advance())
        self.assertEqual(self.controller.cursor, n)

    def test_retreat_at_first_step_is_noop(self):
        self.assertFalse(self.controller.retreat())
        self.assertEqual(self.controller.cursor, 1)

        self.controller.advance()
        self.assertTrue(self.controller.retreat())
        self.assertEqual(self.controller.cursor, 1)

    def test_initial_cursor_and_go_to_are_clamped(self):
        self.assertEqual(GraphStateController(self.spec, cursor=99).cursor, 16)
        self.assertEqual(GraphStateController(self.spec, cursor=-3).cursor, 1)

        self.assertTrue(self.controller.go_to(50))
        self.assertEqual(self.controller.cursor, 16)
        self.assertFalse(self.controller.go_to(16))
        self.assertTrue(self.controller.go_to(0))
        self.assertEqual(self.controller.cursor, 1)

    def test_graph_without_steps_is_rejected(self):
        with self.assertRaises(ValueError):
            GraphStateController(GraphSpec.build("Empty", [], []))


class TestLiveEdges(unittest.TestCase):
    def setUp(self):
        self.spec = maven_flow()
        self.controller = GraphStateController(self.spec)

    def test_new_connection_is_visible_at_any_cursor(self):
        edge = self.controller.add_edge("13", "1", "bottom", "top")

        self.assertIsNotNone(edge)
        self.assertEqual(edge.origin, EdgeOrigin.USER)
        display = self.controller.visibility().edge_display[edge.id]
        self.assertTrue(display.visible)
        self.assertTrue(display.animated)

    def test_duplicate_connection_is_ignored(self):
        first = self.controller.add_edge("13", "1", "bottom", "top")
        second = self.controller.add_edge("13", "1", "bottom", "top")

        self.assertIsNotNone(first)
        self.assertIsNone(second)
        self.assertEqual(len(self.controller.edges), len(self.spec.edges) + 1)

    def test_connection_matching_spec_routing_is_a_duplicate(self):
        self.assertIsNone(self.controller.add_edge("1", "2", "bottom", "top"))
        self.assertIsNotNone(self.controller.add_edge("1", "2", "right", "left"))

    def test_connection_to_a_note_is_ignored(self):
        self.assertIsNone(self.controller.add_edge("1", "note-prd"))

    def test_fresh_ids_never_collide(self):
        first = self.controller.add_edge("1", "3")
        self.controller.reconnect_edge(first.id, "1", "4")
        second = self.controller.add_edge("1", "3")

        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len({edge.id for edge in self.controller.edges}), len(self.controller.edges))

    def test_reconnect_keeps_identity_and_becomes_live(self):
        updated = self.controller.reconnect_edge("e1-2", "1", "3", "right", "left")

        self.assertEqual(updated.id, "e1-2")
        self.assertEqual((updated.source, updated.target), ("1", "3"))
        self.assertEqual(updated.origin, EdgeOrigin.RECONNECTED)
        index = [edge.id for edge in self.controller.edges].index("e1-2")
        self.assertEqual(index, 0)
        self.assertIn("e1-2", self.controller.visibility().visible_edge_ids)

    def test_reconnected_spec_edge_stays_visible_after_retreat(self):
        self.controller.go_to(16)
        self.controller.reconnect_edge("e12-4", "12", "3", "top", "bottom")
        self.controller.go_to(1)

        display = self.controller.visibility().edge_display["e12-4"]
        self.assertTrue(display.visible)
        self.assertEqual(display.label, "More stories")

    def test_reconnect_unknown_edge_is_noop(self):
        before = self.controller.edges
        self.assertIsNone(self.controller.reconnect_edge("missing", "1", "2"))
        self.assertEqual(self.controller.edges, before)

    def test_reconnect_onto_a_note_is_ignored(self):
        before = self.controller.edges

        self.assertIsNone(self.controller.reconnect_edge("e1-2", "1", "note-prd"))
        self.assertEqual(self.controller.edges, before)
        self.assertEqual(self.controller.find_edge("e1-2").origin, EdgeOrigin.SPEC)

    def test_reconnect_onto_unknown_node_is_ignored(self):
        before = self.controller.edges

        self.assertIsNone(self.controller.reconnect_edge("e1-2", "ghost", "2"))
        self.assertIsNone(self.controller.reconnect_edge("e1-2", "1", "ghost"))
        self.assertEqual(self.controller.edges, before)
        self.assertNotIn("e1-2", self.controller.visibility().visible_edge_ids)

    def test_remove_edge(self):
        self.assertTrue(self.controller.remove_edge("e1-2"))
        self.assertIsNone(self.controller.find_edge("e1-2"))
        self.assertFalse(self.controller.remove_edge("e1-2"))


class TestResetAndPositions(unittest.TestCase):
    def setUp(self):
        self.spec = maven_flow()
        self.controller = GraphStateController(self.spec)

    def test_position_survives_cursor_changes(self):
        self.controller.move_position("1", Position(300, 300))
        self.controller.advance()
        self.controller.retreat()

        self.assertEqual(self.controller.positions.get("1"), Position(300, 300))

    def test_move_unknown_node_is_a_precondition_violation(self):
        with self.assertRaises(UnknownNodeError):
            self.controller.move_position("ghost", Position(0, 0))

    def test_reset_restores_everything(self):
        self.controller.go_to(9)
        self.controller.move_position("5a", Position(1, 1))
        self.controller.add_edge("13", "1")
        self.controller.reconnect_edge("e1-2", "1", "13")
        self.controller.remove_edge("e2-3")

        self.controller.reset()

        self.assertEqual(self.controller.cursor, 1)
        self.assertEqual(self.controller.positions.overrides, {})
        self.assertEqual(
            [(e.id, e.source, e.target, e.origin) for e in self.controller.edges],
            [(e.id, e.source, e.target, EdgeOrigin.SPEC) for e in self.spec.edges],
        )

    def test_snapshot_is_detached_from_later_edits(self):
        snapshot = self.controller.snapshot()
        self.controller.move_position("1", Position(9, 9))
        self.controller.add_edge("13", "1")

        self.assertEqual(snapshot.positions["1"], Position(50, 20))
        self.assertEqual(len(snapshot.edges), len(self.spec.edges))
        self.assertEqual(snapshot.cursor, 1)

    def test_snapshot_positions_are_read_only(self):
        snapshot = self.controller.snapshot()

        with self.assertRaises(TypeError):
            snapshot.positions["1"] = Position(0, 0)
        self.assertEqual(self.controller.positions.get("1"), Position(50, 20))


if __name__ == "__main__":
    unittest.main()
