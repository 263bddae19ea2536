#!/usr/bin/env python3
"""
Benchmark ContextEngine.step() on the built-in graph.

Usage: python bench.py [N]
  N = number of inject()+step() frames (default 10000).

Run from project root. Prints total time and per-frame time so you can check
the engine stays well inside a 30 fps frame budget (33 ms).
"""
import os
import random
import sys
import time

# Project root on path (script lives at project root)
_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, _root)

from context_graph import ContextEngine
from context_graph.default_graph import SENSOR_IDS


def main():
    n = 10000
    if len(sys.argv) > 1:
        try:
            n = int(sys.argv[1])
        except ValueError:
            pass
    rng = random.Random(0)
    frames = [{k: rng.random() for k in SENSOR_IDS} for _ in range(64)]
    engine = ContextEngine()
    # Warmup run
    for frame in frames:
        engine.inject(frame)
        engine.step()
    start = time.perf_counter()
    for i in range(n):
        engine.inject(frames[i % len(frames)])
        engine.step()
    elapsed = time.perf_counter() - start
    per_frame_ms = (elapsed / n) * 1000
    print(f"inject()+step() x{n}: {elapsed:.3f}s total, {per_frame_ms:.4f} ms/frame")
    top = engine.ranked_states()[:3]
    print("top states:", ", ".join(f"{s.id}={s.value:.3f}" for s in top))


if __name__ == "__main__":
    main()
