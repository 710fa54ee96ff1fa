import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from flowreveal.graph.catalog import maven_flow
from flowreveal.graph.spec import Position
from flowreveal.graph.visibility import EdgeOrigin
from flowreveal.render.adapter import Connection
from flowreveal.session import FlowSession, ReplayError, replay


class TestFlowSession(unittest.TestCase):
    def setUp(self):
        self.session = FlowSession.from_spec(maven_flow())

    def test_buttons(self):
        self.assertTrue(self.session.next())
        self.assertTrue(self.session.next())
        self.assertTrue(self.session.prev())
        self.assertEqual(self.session.controller.cursor, 2)
        self.session.reset()
        self.assertEqual(self.session.controller.cursor, 1)
        self.assertFalse(self.session.prev())

    def test_gestures_go_through_the_adapter(self):
        self.session.drag("2", Position(70, 140))
        self.assertTrue(self.session.connect(Connection("1", "13")))
        self.assertFalse(self.session.connect(Connection("1", "13")))
        self.assertTrue(self.session.reconnect("e1-2", Connection("1", "3")))
        self.assertFalse(self.session.reconnect("missing", Connection("1", "3")))
        self.assertTrue(self.session.remove_edge("e2-3"))

        nodes, edges = self.session.frame()
        self.assertEqual({n.id: n.position for n in nodes}["2"], Position(70, 140))
        self.assertNotIn("e2-3", {e.id for e in edges})
        self.assertEqual(self.session.controller.find_edge("e1-2").origin, EdgeOrigin.RECONNECTED)


class TestReplay(unittest.TestCase):
    def setUp(self):
        self.session = FlowSession.from_spec(maven_flow())

    def test_replay_applies_events_in_order(self):
        lines = [
            '{"type": "next"}',
            "",
            '{"type": "next"}',
            '{"type": "prev"}',
            '{"type": "position", "id": "1", "position": {"x": 5, "y": 6}}',
            '{"type": "connect", "source": "13", "target": "1", "sourceHandle": "bottom"}',
            '{"type": "reconnect", "edgeId": "e1-2", "source": "1", "target": "4"}',
            '{"type": "remove", "edgeId": "e3-4"}',
            '{"type": "goto", "cursor": 5}',
        ]

        applied = replay(self.session, lines)

        controller = self.session.controller
        self.assertEqual(applied, 8)
        self.assertEqual(controller.cursor, 5)
        self.assertEqual(controller.positions.get("1"), Position(5.0, 6.0))
        self.assertIsNotNone(controller.find_edge("xy-edge__13bottom-1"))
        self.assertEqual(controller.find_edge("e1-2").target, "4")
        self.assertIsNone(controller.find_edge("e3-4"))

    def test_reconnect_event_onto_unknown_node_changes_nothing(self):
        replay(
            self.session,
            ['{"type": "reconnect", "edgeId": "e1-2", "source": "1", "target": "ghost"}'],
        )

        _, edges = self.session.frame()
        edge = {e.id: e for e in edges}["e1-2"]
        self.assertEqual((edge.source, edge.target), ("1", "2"))
        self.assertFalse(edge.animated)
        self.assertEqual(edge.style.opacity, 0)

    def test_reset_event(self):
        replay(self.session, ['{"type": "goto", "cursor": 7}', '{"type": "reset"}'])
        self.assertEqual(self.session.controller.cursor, 1)

    def test_errors_carry_line_numbers(self):
        cases = [
            ['{"type": "next"}', "not json"],
            ['{"type": "next"}', "[1, 2]"],
            ['{"type": "next"}', '{"type": "teleport"}'],
            ['{"type": "next"}', '{"type": "goto", "cursor": "3"}'],
            ['{"type": "next"}', '{"type": "position", "id": "1"}'],
            ['{"type": "next"}', '{"type": "connect", "source": "1"}'],
            ['{"type": "next"}', '{"type": "position", "id": "ghost", "position": {"x": 1, "y": 2}}'],
        ]
        for lines in cases:
            with self.subTest(lines=lines):
                with self.assertRaises(ReplayError) as ctx:
                    replay(FlowSession.from_spec(maven_flow()), lines)
                self.assertEqual(ctx.exception.line_number, 2)
                self.assertIn("line 2", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
