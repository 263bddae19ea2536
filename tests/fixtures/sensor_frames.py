"""
Synthetic sensor frames for engine tests.

Builds full sensor frames (every default sensor id present, as the real
pipeline sends them) with a few sensors raised, plus small hand-made graphs
used to check propagation properties in isolation.
"""

from typing import Dict, List

from context_graph.default_graph import SENSOR_IDS
from context_graph.graph_model import EdgeSpec, GraphModel, NodeLayer, NodeSpec


def make_frame(**raised: float) -> Dict[str, float]:
    """Full sensor frame: all default sensors 0.0 except the keyword overrides."""
    frame = {k: 0.0 for k in SENSOR_IDS}
    frame.update(raised)
    return frame


def run_frames(engine, frame: Dict[str, float], n: int) -> List[Dict[str, float]]:
    """Inject `frame` and step `n` times; return the snapshot after every step."""
    snapshots = []
    for _ in range(n):
        engine.inject(frame)
        engine.step()
        snapshots.append(engine.snapshot())
    return snapshots


def make_competing_pair(inhibition: float = -1.0, drive: float = 1.0) -> GraphModel:
    """
    Two sensors each exciting one STATE; the two states inhibit each other
    with the same weight:

        S_A -> A,  S_B -> B   (drive)
        A -> B,    B -> A     (inhibition)
    """
    nodes = [
        NodeSpec("S_A", NodeLayer.SENSOR, "Sensor A"),
        NodeSpec("S_B", NodeLayer.SENSOR, "Sensor B"),
        NodeSpec("A", NodeLayer.STATE, "State A"),
        NodeSpec("B", NodeLayer.STATE, "State B"),
    ]
    edges = [
        EdgeSpec("S_A", "A", drive),
        EdgeSpec("S_B", "B", drive),
        EdgeSpec("A", "B", inhibition),
        EdgeSpec("B", "A", inhibition),
    ]
    return GraphModel(nodes, edges)


def make_chain_config() -> dict:
    """Minimal SENSOR -> FEATURE -> STATE chain in configuration (JSON) form."""
    return {
        "nodes": [
            {"id": "IN_X", "layer": "SENSOR", "label": "X"},
            {"id": "FT_X", "layer": "FEATURE", "label": "Feature X"},
            {"id": "ST_X", "layer": "STATE", "label": "State X"},
            {"id": "ST_Y", "layer": "STATE", "label": "State Y"},
        ],
        "edges": [
            {"source": "IN_X", "target": "FT_X", "weight": 0.9},
            {"source": "FT_X", "target": "ST_X", "weight": 1.0},
            {"source": "ST_X", "target": "ST_Y", "weight": -0.8},
        ],
    }
