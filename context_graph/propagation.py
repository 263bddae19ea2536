"""
Propagation Step

One synchronous update of every FEATURE and STATE node from a single snapshot
of the previous activations:

    raw[n]  = decay * prev[n] + sum(weight_e * prev[source_e] for e incoming to n)
    next[n] = clip(raw[n], 0, 1)          (FEATURE / STATE)
    next[s] = prev[s]                     (SENSOR, already injected this frame)

Every right-hand term reads `prev`, never a partially updated vector. That keeps
the result independent of node order and lets two mutually inhibiting states
that start equal stay equal, while any asymmetry grows until one dominates.

`decay` is the leak of a leaky integrator in [0, 1): without excitation an
activation fades geometrically (decay ** k) instead of resetting.
"""

import math
import numbers
from dataclasses import dataclass

import numpy as np

from .graph_model import ConfigurationError, GraphModel, NodeLayer


def validate_decay(decay) -> float:
    """Return decay as float; ConfigurationError unless it is a finite number in [0, 1)."""
    if isinstance(decay, bool) or not isinstance(decay, numbers.Real) or not math.isfinite(float(decay)):
        raise ConfigurationError(f"decay must be a number in [0, 1), got {decay!r}")
    decay = float(decay)
    if not 0.0 <= decay < 1.0:
        raise ConfigurationError(f"decay must be in [0, 1), got {decay}")
    return decay


@dataclass(frozen=True)
class PropagationPlan:
    """Per-graph arrays for the step function, built once."""
    size: int
    sources: np.ndarray      # source index per edge
    targets: np.ndarray      # target index per edge
    weights: np.ndarray      # weight per edge
    sensor_mask: np.ndarray  # True where the node is a SENSOR

    @classmethod
    def from_model(cls, model: GraphModel) -> "PropagationPlan":
        sources, targets, weights = model.edge_arrays()
        mask = np.array([n.layer is NodeLayer.SENSOR for n in model.nodes], dtype=bool)
        mask.setflags(write=False)
        return cls(size=model.size, sources=sources, targets=targets, weights=weights, sensor_mask=mask)


def propagate(prev: np.ndarray, plan: PropagationPlan, decay: float) -> np.ndarray:
    """
    Compute next-frame activations from `prev`. Pure: `prev` is not modified.

    Args:
        prev: Current activation vector (sensors already injected for this frame)
        plan: PropagationPlan of the graph
        decay: Leak constant in [0, 1)

    Returns:
        New activation vector, every entry in [0, 1]
    """
    prev = np.asarray(prev, dtype=np.float64)
    if prev.shape != (plan.size,):
        raise ValueError(f"activation vector has shape {prev.shape}, expected ({plan.size},)")

    # Incoming edge sums for every target at once (O(edges)).
    drive = np.bincount(
        plan.targets,
        weights=plan.weights * prev[plan.sources],
        minlength=plan.size,
    )
    raw = decay * prev + drive
    return np.where(plan.sensor_mask, prev, np.clip(raw, 0.0, 1.0))
