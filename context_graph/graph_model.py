"""
Graph Model

Immutable description of the context graph: typed nodes (SENSOR, FEATURE, STATE)
and directed, signed, weighted edges between them. Built once from configuration
and never mutated afterwards.

Every node gets a dense integer index (its position in declaration order). The
propagation step works on numpy vectors indexed by these integers, so incoming
edges are precomputed here once per graph instead of being scanned every frame.

Configuration format (also used by JSON files and the /engine/graph endpoint):
  {"nodes": [{"id": "IN_FIST", "layer": "SENSOR", "label": "Fist"}, ...],
   "edges": [{"source": "IN_FIST", "target": "FT_HOLDING", "weight": 0.9}, ...]}
"""

import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

import numpy as np


class ConfigurationError(ValueError):
    """Raised when a graph (or engine) configuration is inconsistent."""


class NodeLayer(Enum):
    """Semantic layer of a node."""
    SENSOR = "SENSOR"    # injected from the sensor-extraction stage
    FEATURE = "FEATURE"  # intermediate cue combining sensors
    STATE = "STATE"      # competing interpretation, ranked for consumers

    @classmethod
    def parse(cls, value: Union["NodeLayer", str]) -> "NodeLayer":
        """Accept a NodeLayer or a case-insensitive layer name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().upper())
            except ValueError:
                pass
        raise ConfigurationError(f"Unknown node layer: {value!r}")


@dataclass(frozen=True)
class NodeSpec:
    """One node descriptor: id, layer and display label (cosmetic)."""
    id: str
    layer: NodeLayer
    label: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NodeSpec":
        if not isinstance(data, dict):
            raise ConfigurationError(f"Node descriptor must be an object, got {data!r}")
        node_id = data.get("id")
        label = data.get("label")
        return cls(
            id=node_id,
            layer=NodeLayer.parse(data.get("layer")),
            label=str(label) if label is not None else str(node_id),
        )

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "layer": self.layer.value, "label": self.label}


@dataclass(frozen=True)
class EdgeSpec:
    """Directed influence source -> target. Positive weight excites, negative inhibits."""
    source: str
    target: str
    weight: float

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EdgeSpec":
        if not isinstance(data, dict):
            raise ConfigurationError(f"Edge descriptor must be an object, got {data!r}")
        return cls(source=data.get("source"), target=data.get("target"), weight=data.get("weight"))

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "weight": self.weight}


def _is_weight(value: Any) -> bool:
    return (
        isinstance(value, numbers.Real)
        and not isinstance(value, bool)
        and math.isfinite(float(value))
    )


class GraphModel:
    """
    Fixed node/edge lists with O(1) lookups and precomputed incoming edges.

    Construction fails with ConfigurationError if:
      - a node id is empty, not a string, or duplicated
      - an edge references an unknown node
      - an edge weight is not a finite number
      - an edge targets a SENSOR node (sensor activations come from injection only)
      - a FEATURE/STATE node has no incoming edge (it could never activate)

    Usage:
        model = GraphModel.from_config({"nodes": [...], "edges": [...]})
        model.index_of("ST_GRASP")
        model.incoming("ST_GRASP")  # [("FT_HOLDING", 1.0), ("FT_ACTIVE", -0.3), ...]
    """

    def __init__(self, nodes: Iterable[NodeSpec], edges: Iterable[EdgeSpec]):
        node_list: List[NodeSpec] = [n if isinstance(n, NodeSpec) else NodeSpec.from_dict(n) for n in nodes]
        edge_list: List[EdgeSpec] = [e if isinstance(e, EdgeSpec) else EdgeSpec.from_dict(e) for e in edges]

        index: Dict[str, int] = {}
        for i, node in enumerate(node_list):
            if not isinstance(node.id, str) or not node.id.strip():
                raise ConfigurationError(f"Node #{i} has an invalid id: {node.id!r}")
            if node.id in index:
                raise ConfigurationError(f"Duplicate node id: {node.id}")
            if not isinstance(node.layer, NodeLayer):
                raise ConfigurationError(f"Node {node.id} has an invalid layer: {node.layer!r}")
            index[node.id] = i

        incoming: List[List[Tuple[int, float]]] = [[] for _ in node_list]
        normalized: List[EdgeSpec] = []
        for edge in edge_list:
            if not isinstance(edge.source, str) or edge.source not in index:
                raise ConfigurationError(f"Edge {edge.source} -> {edge.target}: unknown source node {edge.source!r}")
            if not isinstance(edge.target, str) or edge.target not in index:
                raise ConfigurationError(f"Edge {edge.source} -> {edge.target}: unknown target node {edge.target!r}")
            if not _is_weight(edge.weight):
                raise ConfigurationError(f"Edge {edge.source} -> {edge.target}: weight must be a finite number, got {edge.weight!r}")
            target_idx = index[edge.target]
            if node_list[target_idx].layer is NodeLayer.SENSOR:
                raise ConfigurationError(f"Edge {edge.source} -> {edge.target}: SENSOR nodes cannot have incoming edges")
            weight = float(edge.weight)
            incoming[target_idx].append((index[edge.source], weight))
            normalized.append(EdgeSpec(edge.source, edge.target, weight))

        for i, node in enumerate(node_list):
            if node.layer is not NodeLayer.SENSOR and not incoming[i]:
                raise ConfigurationError(f"{node.layer.value} node {node.id} has no incoming edges and would never activate")

        self._nodes: Tuple[NodeSpec, ...] = tuple(node_list)
        self._edges: Tuple[EdgeSpec, ...] = tuple(normalized)
        self._index = index
        self._incoming: Tuple[Tuple[Tuple[int, float], ...], ...] = tuple(tuple(lst) for lst in incoming)

        self._sources = np.array([index[e.source] for e in normalized], dtype=np.intp)
        self._targets = np.array([index[e.target] for e in normalized], dtype=np.intp)
        self._weights = np.array([e.weight for e in normalized], dtype=np.float64)
        for arr in (self._sources, self._targets, self._weights):
            arr.setflags(write=False)

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @classmethod
    def from_config(cls, data: Dict[str, Any]) -> "GraphModel":
        """Build from {"nodes": [...], "edges": [...]}."""
        if not isinstance(data, dict):
            raise ConfigurationError("Graph configuration must be an object with 'nodes' and 'edges'")
        nodes = data.get("nodes")
        edges = data.get("edges", [])
        if not isinstance(nodes, list) or not nodes:
            raise ConfigurationError("Graph configuration needs a non-empty 'nodes' list")
        if not isinstance(edges, list):
            raise ConfigurationError("Graph configuration 'edges' must be a list")
        return cls([NodeSpec.from_dict(n) for n in nodes], [EdgeSpec.from_dict(e) for e in edges])

    def to_config(self) -> Dict[str, List[Dict[str, Any]]]:
        return {
            "nodes": [n.to_dict() for n in self._nodes],
            "edges": [e.to_dict() for e in self._edges],
        }

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    @property
    def size(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> Tuple[NodeSpec, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[EdgeSpec, ...]:
        return self._edges

    @property
    def node_ids(self) -> List[str]:
        return [n.id for n in self._nodes]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._index

    def index_of(self, node_id: str) -> int:
        """Dense integer index of node_id. Raises KeyError for unknown ids."""
        return self._index[node_id]

    def find_index(self, node_id: Any) -> Optional[int]:
        """Like index_of, but None for unknown (or unhashable) keys."""
        try:
            return self._index.get(node_id)
        except TypeError:
            return None

    def node(self, node_id: str) -> NodeSpec:
        return self._nodes[self._index[node_id]]

    def layer_of(self, node_id: str) -> NodeLayer:
        return self.node(node_id).layer

    def label_of(self, node_id: str) -> str:
        return self.node(node_id).label

    def ids_in_layer(self, layer: Union[NodeLayer, str]) -> List[str]:
        """Node ids of one layer, in declaration order."""
        layer = NodeLayer.parse(layer)
        return [n.id for n in self._nodes if n.layer is layer]

    def indices_in_layer(self, layer: Union[NodeLayer, str]) -> List[int]:
        layer = NodeLayer.parse(layer)
        return [i for i, n in enumerate(self._nodes) if n.layer is layer]

    def incoming(self, node_id: str) -> List[Tuple[str, float]]:
        """Incoming edges of node_id as (source_id, weight), in configuration order."""
        return [(self._nodes[src].id, w) for src, w in self._incoming[self._index[node_id]]]

    def edge_arrays(self) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Read-only (source_indices, target_indices, weights) arrays, one entry per edge."""
        return self._sources, self._targets, self._weights

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return self.find_index(node_id) is not None

    def __repr__(self) -> str:
        counts = {layer.value: len(self.indices_in_layer(layer)) for layer in NodeLayer}
        return f"GraphModel(nodes={self.size}, edges={len(self._edges)}, layers={counts})"
