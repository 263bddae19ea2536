"""
End-to-end scenarios on the built-in graph.

Each test feeds a short sequence of full sensor frames (as the landmark
pipeline sends them) and checks the resulting activations and ranking.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
import json
import tempfile
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch


class TestFistScenario(unittest.TestCase):
    """Hold a fist for 5 frames, then release it for 10."""

    def setUp(self):
        from context_graph import ContextEngine
        from tests.fixtures.sensor_frames import make_frame, run_frames
        self.engine = ContextEngine(decay=0.5)
        self.hold = run_frames(self.engine, make_frame(IN_FIST=1.0), 5)
        self.release = run_frames(self.engine, make_frame(IN_FIST=0.0), 10)

    def test_holding_feature_rises(self):
        self.assertAlmostEqual(self.hold[0]["FT_HOLDING"], 0.9)
        self.assertEqual(self.hold[-1]["FT_HOLDING"], 1.0)

    def test_grasp_ranks_above_idle(self):
        self.assertEqual(self.hold[-1]["ST_GRASP"], 1.0)
        self.assertEqual(self.hold[-1]["ST_IDLE"], 0.0)

    def test_grasp_is_top_after_hold(self):
        from context_graph import ContextEngine
        from tests.fixtures.sensor_frames import make_frame, run_frames
        engine = ContextEngine(decay=0.5)
        run_frames(engine, make_frame(IN_FIST=1.0), 5)
        ranked = engine.ranked_states()
        self.assertEqual(ranked[0].id, "ST_GRASP")
        ids = [s.id for s in ranked]
        self.assertLess(ids.index("ST_GRASP"), ids.index("ST_IDLE"))

    def test_grasp_decays_after_release(self):
        expected = [1.0, 1.0, 0.75, 0.5, 0.3125, 0.1875, 0.109375, 0.0625, 0.03515625, 0.01953125]
        got = [snap["ST_GRASP"] for snap in self.release]
        for e, g in zip(expected, got):
            self.assertAlmostEqual(g, e)
        self.assertLess(got[-1], 0.05)

    def test_no_state_rises_after_release(self):
        from context_graph.default_graph import STATE_IDS
        previous = self.hold[-1]
        for snap in self.release:
            for state in STATE_IDS:
                self.assertLessEqual(snap[state], previous[state], state)
            previous = snap

    def test_unrelated_states_stay_silent(self):
        for snap in self.hold + self.release:
            for state in ("ST_IDLE", "ST_WASH", "ST_PAPER", "ST_SCISSORS", "ST_YES", "ST_NO", "ST_SMILE"):
                self.assertEqual(snap[state], 0.0, state)


class TestGestureScenarios(unittest.TestCase):

    def test_slow_fist_is_grasp(self):
        """Fist with little motion and no open hand settles on GRASP at full activation."""
        from context_graph import ContextEngine
        engine = ContextEngine(decay=0.5)
        for _ in range(5):
            engine.update({"IN_FIST": 1.0, "IN_VEL": 0.1, "IN_OPEN": 0.0})
        top = engine.ranked_states()[0]
        self.assertEqual(top.id, "ST_GRASP")
        self.assertEqual(top.value, 1.0)

    def test_thumb_up_inhibits_no(self):
        from context_graph import ContextEngine
        from tests.fixtures.sensor_frames import make_frame, run_frames
        engine = ContextEngine(decay=0.5)
        snaps = run_frames(engine, make_frame(IN_THUMB_UP=1.0), 5)
        self.assertGreater(snaps[-1]["ST_YES"], snaps[-1]["ST_NO"])
        self.assertEqual(snaps[-1]["ST_YES"], 1.0)
        # A raised thumb vetoes the ROCK pose
        self.assertEqual(snaps[-1]["ST_ROCK"], 0.0)

    def test_thumb_switch_flips_winner(self):
        """Switching from thumb up to thumb down hands the lead from YES to NO."""
        from context_graph import ContextEngine
        from tests.fixtures.sensor_frames import make_frame, run_frames
        engine = ContextEngine(decay=0.5)
        run_frames(engine, make_frame(IN_THUMB_UP=1.0), 5)
        snaps = run_frames(engine, make_frame(IN_THUMB_DOWN=1.0), 10)
        self.assertGreater(snaps[-1]["ST_NO"], snaps[-1]["ST_YES"])
        self.assertEqual(engine.ranked_states()[0].id, "ST_NO")


class TestReplayScript(unittest.TestCase):
    """replay.py drives a session from a JSON-lines trace."""

    def _write_trace(self, tmp, frames):
        path = os.path.join(tmp, "trace.jsonl")
        with open(path, "w", encoding="utf-8") as f:
            for frame in frames:
                f.write(json.dumps(frame) + "\n")
            f.write("\n")
        return path

    def test_read_trace_skips_blank_lines(self):
        import replay
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write_trace(tmp, [{"IN_FIST": 1.0}, {"IN_FIST": 0.5}])
            frames = list(replay.read_trace(path))
        self.assertEqual([lineno for lineno, _ in frames], [1, 2])
        self.assertEqual(frames[1][1], {"IN_FIST": 0.5})

    def test_replay_prints_one_line_per_frame(self):
        import replay
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write_trace(tmp, [{"IN_FIST": 1.0}] * 6)
            out = io.StringIO()
            with patch.object(sys, "argv", ["replay.py", path, "--no-smooth", "--top", "2"]):
                with redirect_stdout(out):
                    code = replay.main()
        self.assertEqual(code, 0)
        lines = out.getvalue().strip().splitlines()
        self.assertEqual(len(lines), 6)
        self.assertIn("ACTION: GRASP", lines[-1])

    def test_replay_rejects_non_object_line(self):
        import replay
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "bad.jsonl")
            with open(path, "w", encoding="utf-8") as f:
                f.write("[1, 2, 3]\n")
            with patch.object(sys, "argv", ["replay.py", path]):
                with redirect_stdout(io.StringIO()), patch("sys.stderr", new_callable=io.StringIO):
                    code = replay.main()
        self.assertEqual(code, 1)

    def test_replay_bad_decay_is_config_error(self):
        import replay
        with tempfile.TemporaryDirectory() as tmp:
            path = self._write_trace(tmp, [{"IN_FIST": 1.0}])
            with patch.object(sys, "argv", ["replay.py", path, "--decay", "1.5"]):
                with patch("sys.stderr", new_callable=io.StringIO) as err:
                    code = replay.main()
        self.assertEqual(code, 2)
        self.assertIn("Configuration error", err.getvalue())


class TestRunTestsScript(unittest.TestCase):
    """run_tests.py module selection."""

    def test_available_modules(self):
        import run_tests
        modules = run_tests.available_modules()
        for name in ("test_graph_model", "test_propagation", "test_ranking", "test_api_endpoints"):
            self.assertIn(name, modules)

    def test_resolve_short_names(self):
        import run_tests
        modules = run_tests.available_modules()
        self.assertEqual(run_tests.resolve_module("api", modules), "test_api_endpoints")
        self.assertEqual(run_tests.resolve_module("graph", modules), "test_graph_model")
        self.assertEqual(run_tests.resolve_module("Ranking", modules), "test_ranking")
        self.assertEqual(run_tests.resolve_module("test_services.py", modules), "test_services")
        self.assertIsNone(run_tests.resolve_module("nope", modules))

    def test_list_and_unknown_module(self):
        import run_tests
        out = io.StringIO()
        with patch.object(sys, "argv", ["run_tests.py", "--list"]), redirect_stdout(out):
            self.assertEqual(run_tests.main(), 0)
        self.assertIn("test_propagation", out.getvalue().split())
        with patch.object(sys, "argv", ["run_tests.py", "nope"]):
            with patch("sys.stderr", new_callable=io.StringIO) as err:
                self.assertEqual(run_tests.main(), 2)
        self.assertIn("Unknown test module", err.getvalue())


if __name__ == "__main__":
    unittest.main()
