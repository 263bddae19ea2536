"""
Default Context Graph Topology

The built-in gesture/face graph: 16 sensors fed by the hand/face heuristics,
12 intermediate features, and 15 competing states.

Weight scale: feed-forward edges sit in 0.5-1.2; mutual-exclusion edges between
competing states are -0.8 to -2.0 so inhibition dominates once one state leads.
YES/NO use -2.0 because a thumbs-up and a thumbs-down must never coexist.

Groups:
  Physical  — velocity, fist/pinch, hands touching, occlusion -> GRASP / DRAG / WASH / PEEKABOO
  Game      — fist / scissors / open hand -> ROCK / SCISSORS / PAPER
  Semantic  — thumb up/down -> YES / NO (thumbs also veto the ROCK pose)
  Monkeys   — cover eyes / ears / mouth -> MIZARU / KIKAZARU / IWAZARU
  Face      — smile, mouth open, hand near face -> SMILE / SURPRISE
"""

from typing import Any, Dict, List, Tuple

from .graph_model import EdgeSpec, GraphModel, NodeLayer, NodeSpec

# (id, label) per layer, in declaration order (declaration order is the ranking tie-break)
_SENSORS: List[Tuple[str, str]] = [
    ("IN_VEL", "Velocity"),
    ("IN_REL_MOV", "Rel. Motion"),
    ("IN_FIST", "Fist"),
    ("IN_PINCH", "Pinch"),
    ("IN_OPEN", "Open Hand"),
    ("IN_SCISSORS", "Scissors Pose"),
    ("IN_HANDS_PROX", "Hands Touch"),
    ("IN_OCCLUSION", "Face Lost+Prox"),
    ("IN_THUMB_UP", "Thumb UP"),
    ("IN_THUMB_DOWN", "Thumb DOWN"),
    ("IN_EYES_ACT", "Cover Eyes"),
    ("IN_EARS_ACT", "Cover Ears"),
    ("IN_MOUTH_GUARD", "Cover Mouth"),
    ("IN_SMILE", "Smile"),
    ("IN_MOUTH", "Mouth Open"),
    ("IN_FACE_PROX", "Hand-Face Prox"),
]

_FEATURES: List[Tuple[str, str]] = [
    ("FT_ACTIVE", "High Kinetic"),
    ("FT_HOLDING", "Holding"),
    ("FT_FRICTION", "Friction"),
    ("FT_HIDING", "Concealment"),
    ("FT_RPS_ROCK", "Pose: ROCK"),
    ("FT_RPS_SCI", "Pose: SCISSORS"),
    ("FT_RPS_PAP", "Pose: PAPER"),
    ("FT_APPROVAL", "Semantics: YES"),
    ("FT_DISAPPROVAL", "Semantics: NO"),
    ("FT_HIDDEN_SENSE", "Blocking Senses"),
    ("FT_HAPPY", "Emo: Happy"),
    ("FT_SHOCK", "Emo: Shock"),
]

_STATES: List[Tuple[str, str]] = [
    ("ST_IDLE", "IDLE"),
    ("ST_GRASP", "ACTION: GRASP"),
    ("ST_DRAG", "ACTION: DRAG"),
    ("ST_WASH", "ACTION: WASH"),
    ("ST_PEEKABOO", "CTX: HIDDEN"),
    ("ST_ROCK", "GAME: ROCK"),
    ("ST_SCISSORS", "GAME: SCISSORS"),
    ("ST_PAPER", "GAME: PAPER"),
    ("ST_YES", "CTX: YES / OK"),
    ("ST_NO", "CTX: NO / BAD"),
    ("ST_MIZARU", "\U0001F648 MIZARU"),
    ("ST_KIKAZARU", "\U0001F649 KIKAZARU"),
    ("ST_IWAZARU", "\U0001F64A IWAZARU"),
    ("ST_SMILE", "FACE: SMILE"),
    ("ST_SURPRISE", "FACE: SURPRISE"),
]

DEFAULT_NODES: List[NodeSpec] = (
    [NodeSpec(i, NodeLayer.SENSOR, label) for i, label in _SENSORS]
    + [NodeSpec(i, NodeLayer.FEATURE, label) for i, label in _FEATURES]
    + [NodeSpec(i, NodeLayer.STATE, label) for i, label in _STATES]
)

DEFAULT_EDGES: List[EdgeSpec] = [EdgeSpec(s, t, w) for s, t, w in [
    # Physical actions
    ("IN_VEL", "FT_ACTIVE", 0.9),
    ("IN_FIST", "FT_HOLDING", 0.9),
    ("IN_PINCH", "FT_HOLDING", 0.8),
    ("IN_HANDS_PROX", "FT_FRICTION", 0.7),
    ("IN_REL_MOV", "FT_FRICTION", 0.9),
    ("IN_OCCLUSION", "FT_HIDING", 1.0),
    ("FT_HOLDING", "ST_GRASP", 1.0),
    ("FT_ACTIVE", "ST_GRASP", -0.3),
    ("FT_HOLDING", "ST_DRAG", 0.8),
    ("FT_ACTIVE", "ST_DRAG", 0.9),
    ("FT_FRICTION", "ST_WASH", 1.2),
    ("FT_HIDING", "ST_PEEKABOO", 1.2),

    # Rock / paper / scissors
    ("IN_FIST", "FT_RPS_ROCK", 0.8),
    ("IN_SCISSORS", "FT_RPS_SCI", 0.9),
    ("IN_OPEN", "FT_RPS_PAP", 0.9),
    ("FT_RPS_ROCK", "ST_ROCK", 0.9),
    ("FT_RPS_SCI", "ST_SCISSORS", 0.9),
    ("FT_RPS_PAP", "ST_PAPER", 0.9),

    # Yes / no; a raised or lowered thumb is not a ROCK fist
    ("IN_THUMB_UP", "FT_APPROVAL", 1.0),
    ("IN_THUMB_DOWN", "FT_DISAPPROVAL", 1.0),
    ("IN_THUMB_UP", "FT_RPS_ROCK", -0.5),
    ("IN_THUMB_DOWN", "FT_RPS_ROCK", -0.5),
    ("FT_APPROVAL", "ST_YES", 1.0),
    ("FT_DISAPPROVAL", "ST_NO", 1.0),

    # See / hear / speak no evil
    ("IN_EYES_ACT", "FT_HIDDEN_SENSE", 0.8),
    ("IN_EYES_ACT", "ST_MIZARU", 1.0),
    ("IN_HANDS_PROX", "ST_MIZARU", 0.5),
    ("IN_EARS_ACT", "FT_HIDDEN_SENSE", 0.8),
    ("IN_EARS_ACT", "ST_KIKAZARU", 1.0),
    ("IN_MOUTH_GUARD", "FT_HIDDEN_SENSE", 0.8),
    ("IN_MOUTH_GUARD", "ST_IWAZARU", 1.0),
    ("IN_HANDS_PROX", "ST_IWAZARU", 0.8),

    # Face
    ("IN_SMILE", "FT_HAPPY", 0.9),
    ("IN_MOUTH", "FT_SHOCK", 0.6),
    ("IN_FACE_PROX", "FT_SHOCK", 0.5),
    ("FT_HAPPY", "ST_SMILE", 0.9),
    ("FT_SHOCK", "ST_SURPRISE", 0.9),

    # Inhibition
    ("FT_ACTIVE", "ST_IDLE", -0.6),
    ("ST_ROCK", "ST_SCISSORS", -0.8),
    ("ST_ROCK", "ST_PAPER", -0.8),
    ("ST_SCISSORS", "ST_PAPER", -0.8),
    ("ST_YES", "ST_NO", -2.0),
    ("ST_NO", "ST_YES", -2.0),
    ("ST_MIZARU", "ST_KIKAZARU", -1.0),
    ("ST_MIZARU", "ST_IWAZARU", -1.0),
    ("ST_KIKAZARU", "ST_IWAZARU", -1.0),
    ("ST_GRASP", "ST_WASH", -0.8),
    ("ST_WASH", "ST_GRASP", -0.8),
    ("ST_DRAG", "ST_WASH", -0.8),
]]

SENSOR_IDS: List[str] = [i for i, _ in _SENSORS]
FEATURE_IDS: List[str] = [i for i, _ in _FEATURES]
STATE_IDS: List[str] = [i for i, _ in _STATES]


def default_graph_config() -> Dict[str, List[Dict[str, Any]]]:
    """The built-in topology in configuration (JSON) form."""
    return {
        "nodes": [n.to_dict() for n in DEFAULT_NODES],
        "edges": [e.to_dict() for e in DEFAULT_EDGES],
    }


def build_default_graph() -> GraphModel:
    return GraphModel(DEFAULT_NODES, DEFAULT_EDGES)
