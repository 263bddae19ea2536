"""
Activation Store

The engine's only mutable state: one activation scalar in [0, 1] per node, kept
in a dense numpy vector indexed by GraphModel.index_of(). Initialized to 0.0.

Write paths:
  - inject(): sensor-layer overwrite from the external pipeline (clamped).
  - commit(): full-vector write used by the propagation step only.
"""

import logging
import math
import numbers
from typing import Any, Dict, Mapping

import numpy as np

from .graph_model import GraphModel, NodeLayer

logger = logging.getLogger(__name__)


def clamp01(value: float) -> float:
    """Clamp a scalar to [0.0, 1.0]."""
    return min(1.0, max(0.0, float(value)))


def _as_sensor_value(value: Any):
    """Return value as float, or None if it is not a usable number (bool, NaN, inf, str...)."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    value = float(value)
    if not math.isfinite(value):
        return None
    return value


class ActivationStore:
    """
    Holds the current activation of every node.

    Usage:
        store = ActivationStore(model)
        store.inject({"IN_FIST": 1.0, "IN_VEL": 0.2})
        store.get("IN_FIST")  # 1.0
    """

    def __init__(self, model: GraphModel):
        self._model = model
        self._values = np.zeros(model.size, dtype=np.float64)
        self._is_sensor = np.array(
            [n.layer is NodeLayer.SENSOR for n in model.nodes], dtype=bool
        )

    @property
    def model(self) -> GraphModel:
        return self._model

    def inject(self, values: Mapping[str, Any]) -> int:
        """
        Overwrite sensor activations with clamp(value, 0, 1).

        Keys naming unknown or non-sensor nodes are ignored, as are malformed
        values; sensors absent from `values` keep their previous activation.

        Returns:
            Number of sensor nodes written.
        """
        if not values:
            return 0
        written = 0
        for key, raw in values.items():
            idx = self._model.find_index(key)
            if idx is None or not self._is_sensor[idx]:
                logger.debug("inject: ignoring non-sensor key %r", key)
                continue
            value = _as_sensor_value(raw)
            if value is None:
                logger.debug("inject: ignoring malformed value %r for %s", raw, key)
                continue
            self._values[idx] = clamp01(value)
            written += 1
        return written

    def values(self) -> np.ndarray:
        """Copy of the activation vector."""
        return self._values.copy()

    def commit(self, next_values: np.ndarray) -> None:
        """Replace the whole vector (propagation write path). Values are clamped to [0, 1]."""
        next_values = np.asarray(next_values, dtype=np.float64)
        if next_values.shape != self._values.shape:
            raise ValueError(
                f"activation vector has shape {next_values.shape}, expected {self._values.shape}"
            )
        np.clip(next_values, 0.0, 1.0, out=self._values)

    def get(self, node_id: str) -> float:
        return float(self._values[self._model.index_of(node_id)])

    def as_dict(self) -> Dict[str, float]:
        return {node_id: float(v) for node_id, v in zip(self._model.node_ids, self._values)}

    def reset(self) -> None:
        self._values.fill(0.0)
