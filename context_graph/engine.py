"""
Context Engine

Ties the graph model, activation store, propagation step and ranking together
into one explicit engine value owned by the caller. Per video frame the driver
calls, in strict sequence:

    engine.inject(sensors)      # sensor-id -> scalar in [0, 1]
    engine.step()               # one synchronous propagation
    engine.snapshot()           # every node id -> activation (copy)
    engine.ranked_states()      # STATE nodes, highest first

No locking, no I/O: every call is a bounded in-memory computation over a fixed
graph. Callers that share an engine across threads must serialize access
themselves (see services.engine_session).
"""

from typing import Any, Dict, List, Mapping, Optional

from .activation_store import ActivationStore
from .default_graph import build_default_graph
from .graph_model import GraphModel
from .propagation import PropagationPlan, propagate, validate_decay
from .ranking import RankedState, rank_states


class ContextEngine:
    """
    Activation-propagation engine over a fixed context graph.

    Usage:
        engine = ContextEngine()                 # built-in gesture/face graph
        engine.update({"IN_FIST": 1.0})          # inject + step
        top = engine.ranked_states()[0]
        print(f"{top.label}: {top.value:.2f}")
    """

    def __init__(self, model: Optional[GraphModel] = None, decay: Optional[float] = None):
        """
        Args:
            model: Graph topology (default: built-in graph)
            decay: Leak constant in [0, 1) (default: config.CONTEXT_GRAPH_DECAY)

        Raises:
            ConfigurationError: invalid decay (graph errors are raised by GraphModel)
        """
        if decay is None:
            import config
            decay = config.CONTEXT_GRAPH_DECAY
        self._decay = validate_decay(decay)
        self._model = model if model is not None else build_default_graph()
        self._plan = PropagationPlan.from_model(self._model)
        self._store = ActivationStore(self._model)
        self._frame_count = 0

    @property
    def model(self) -> GraphModel:
        return self._model

    @property
    def decay(self) -> float:
        return self._decay

    @property
    def frame_count(self) -> int:
        """Number of step() calls since construction or the last reset()."""
        return self._frame_count

    def inject(self, values: Mapping[str, Any]) -> int:
        """Overwrite sensor activations (clamped); returns the number of sensors written."""
        return self._store.inject(values)

    def step(self) -> None:
        """Run one propagation step over FEATURE and STATE nodes."""
        self._store.commit(propagate(self._store.values(), self._plan, self._decay))
        self._frame_count += 1

    def update(self, values: Mapping[str, Any]) -> List[RankedState]:
        """One frame: inject(values), step(), then return ranked_states()."""
        self.inject(values)
        self.step()
        return self.ranked_states()

    def snapshot(self) -> Dict[str, float]:
        """Every node id -> current activation. A fresh dict each call."""
        return self._store.as_dict()

    def ranked_states(self) -> List[RankedState]:
        """STATE nodes sorted by descending activation, ties in declaration order."""
        return rank_states(self._model, self._store.values())

    def activation(self, node_id: str) -> float:
        """Current activation of one node. Raises KeyError for unknown ids."""
        return self._store.get(node_id)

    def reset(self) -> None:
        """Set every activation back to 0.0 and the frame counter to 0."""
        self._store.reset()
        self._frame_count = 0

    def __repr__(self) -> str:
        return f"ContextEngine(nodes={self._model.size}, decay={self._decay}, frames={self._frame_count})"
