"""
Ranking of STATE nodes.

States are sorted by descending activation. Ties keep configuration (declaration)
order, so repeated queries against the same activations return the same list.
The ranking is recomputed on every call; no caching, activations change every frame.
"""

from dataclasses import asdict, dataclass
from typing import Dict, List

import numpy as np

from .graph_model import GraphModel, NodeLayer


@dataclass(frozen=True)
class RankedState:
    """One entry of the ranked state list."""
    id: str
    label: str
    value: float

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def rank_states(model: GraphModel, values: np.ndarray) -> List[RankedState]:
    """
    Return STATE nodes of `model` ordered by descending value in `values`.

    Python's sort is stable, and the candidates are collected in declaration
    order, so equal values stay in declaration order.
    """
    states = [
        RankedState(id=node.id, label=node.label, value=float(values[i]))
        for i, node in enumerate(model.nodes)
        if node.layer is NodeLayer.STATE
    ]
    states.sort(key=lambda s: s.value, reverse=True)
    return states
