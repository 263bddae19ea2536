#!/usr/bin/env python3
"""
Replay a recorded sensor trace through the engine.

Each line of the trace is one frame: a JSON object mapping sensor id to value,
e.g. {"IN_FIST": 1.0, "IN_VEL": 0.1}. Blank lines are skipped. Prints the top
states per frame, and the dominant state when one clears the threshold.

Usage: python replay.py TRACE.jsonl [--no-smooth] [--top N] [--graph PATH] [--decay D]
"""

import argparse
import json
import os
import sys

# Project root on path (script lives at project root)
PROJECT_ROOT = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, PROJECT_ROOT)

from context_graph import ConfigurationError, ContextEngine, load_graph_model
from services.activation_history import ActivationHistory
from services.engine_session import EngineSession


def read_trace(path):
    """Yield (line_number, frame dict) for every non-empty line."""
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            line = line.strip()
            if not line:
                continue
            frame = json.loads(line)
            if not isinstance(frame, dict):
                raise ValueError(f"line {lineno}: expected a JSON object, got {type(frame).__name__}")
            yield lineno, frame


def format_frame(result, top):
    states = "  ".join(f"{s.id}={s.value:.3f}" for s in result.ranked[:top])
    winner = result.dominant.label if result.dominant else "-"
    return f"[{result.frame:5d}] {winner:<18} {states}"


def main():
    parser = argparse.ArgumentParser(
        description="Replay a JSON-lines sensor trace through the context graph engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python replay.py traces/grasp.jsonl
  python replay.py traces/grasp.jsonl --no-smooth --top 5
  python replay.py traces/grasp.jsonl --graph my_graph.json --decay 0.6
        """,
    )
    parser.add_argument("trace", help="JSON-lines file, one sensor frame per line")
    parser.add_argument("--no-smooth", action="store_true", help="Inject raw values (skip moving average)")
    parser.add_argument("--top", type=int, default=3, help="States printed per frame (default 3)")
    parser.add_argument("--graph", default=None, help="Graph JSON file (default: config / built-in)")
    parser.add_argument("--decay", type=float, default=None, help="Leak constant in [0, 1)")
    args = parser.parse_args()

    try:
        model = load_graph_model(path=args.graph) if args.graph else load_graph_model()
        engine = ContextEngine(model, decay=args.decay)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    session = EngineSession(engine=engine, history=ActivationHistory(sample_rate=0.0))
    try:
        for _, frame in read_trace(args.trace):
            result = session.process_frame(frame, smooth=not args.no_smooth)
            print(format_frame(result, args.top))
    except (OSError, ValueError) as e:
        print(f"Cannot replay {args.trace}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
