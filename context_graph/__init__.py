"""
Context graph package.

Activation-propagation engine that fuses per-frame sensor scalars (hand pose,
face pose, proximity heuristics) into a ranked set of competing context states.
"""

from .graph_model import ConfigurationError, EdgeSpec, GraphModel, NodeLayer, NodeSpec
from .activation_store import ActivationStore
from .propagation import PropagationPlan, propagate
from .ranking import RankedState, rank_states
from .engine import ContextEngine
from .default_graph import build_default_graph, default_graph_config
from .graph_loader import load_graph_model

__all__ = [
    'ConfigurationError',
    'EdgeSpec',
    'GraphModel',
    'NodeLayer',
    'NodeSpec',
    'ActivationStore',
    'PropagationPlan',
    'propagate',
    'RankedState',
    'rank_states',
    'ContextEngine',
    'build_default_graph',
    'default_graph_config',
    'load_graph_model',
]
