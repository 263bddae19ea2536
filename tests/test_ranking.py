"""
Ranking tests.

Tests ordering of STATE nodes, tie-breaking by declaration order and that
each query returns an independent list.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest

import numpy as np


class TestRankStates(unittest.TestCase):

    def test_only_states_descending(self):
        from context_graph import ContextEngine
        from context_graph.default_graph import STATE_IDS
        from tests.fixtures.sensor_frames import make_frame, run_frames
        engine = ContextEngine()
        run_frames(engine, make_frame(IN_SMILE=1.0, IN_SCISSORS=0.3), 4)
        ranked = engine.ranked_states()
        self.assertEqual(sorted(s.id for s in ranked), sorted(STATE_IDS))
        values = [s.value for s in ranked]
        self.assertEqual(values, sorted(values, reverse=True))
        self.assertEqual(ranked[0].id, "ST_SMILE")

    def test_ties_keep_declaration_order(self):
        """With every state at 0.0 the ranking is exactly the declaration order."""
        from context_graph import ContextEngine
        from context_graph.default_graph import STATE_IDS
        ranked = ContextEngine().ranked_states()
        self.assertEqual([s.id for s in ranked], STATE_IDS)

    def test_partial_tie_order(self):
        from context_graph import rank_states
        from tests.fixtures.sensor_frames import make_competing_pair
        model = make_competing_pair()
        ranked = rank_states(model, np.array([0.0, 0.0, 0.4, 0.4]))
        self.assertEqual([s.id for s in ranked], ["A", "B"])
        ranked = rank_states(model, np.array([0.0, 0.0, 0.4, 0.5]))
        self.assertEqual([s.id for s in ranked], ["B", "A"])

    def test_repeated_queries_identical(self):
        from context_graph import ContextEngine
        from tests.fixtures.sensor_frames import make_frame, run_frames
        engine = ContextEngine()
        run_frames(engine, make_frame(IN_FIST=1.0, IN_THUMB_UP=0.4), 3)
        first = engine.ranked_states()
        second = engine.ranked_states()
        self.assertEqual(first, second)
        self.assertIsNot(first, second)

    def test_entry_carries_label(self):
        from context_graph import ContextEngine
        ranked = ContextEngine().ranked_states()
        grasp = next(s for s in ranked if s.id == "ST_GRASP")
        self.assertEqual(grasp.label, "ACTION: GRASP")
        self.assertEqual(grasp.to_dict(), {"id": "ST_GRASP", "label": "ACTION: GRASP", "value": 0.0})

    def test_ranked_values_match_snapshot(self):
        from context_graph import ContextEngine
        engine = ContextEngine()
        engine.update({"IN_FIST": 1.0})
        engine.update({"IN_FIST": 1.0})
        snap = engine.snapshot()
        for entry in engine.ranked_states():
            self.assertEqual(entry.value, snap[entry.id])


if __name__ == "__main__":
    unittest.main()
