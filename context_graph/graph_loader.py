"""
Graph Configuration Loader

Loads the context graph topology from a URL, a local JSON file, or uses the
built-in default graph.

Order:
  1) URL  (CONTEXT_GRAPH_CONFIG_URL)  — fetched with requests; unreachable -> warn, fall through
  2) File (CONTEXT_GRAPH_CONFIG_PATH) — JSON on disk
  3) Built-in topology (context_graph.default_graph)

A document that was obtained but does not describe a valid graph raises
ConfigurationError: the engine refuses to start with an inconsistent graph
rather than silently running a different one.

JSON format:
  {"nodes": [{"id": str, "layer": "SENSOR"|"FEATURE"|"STATE", "label": str}, ...],
   "edges": [{"source": str, "target": str, "weight": float}, ...]}
"""

import json
import logging
import os
from typing import Any, Dict, Optional

import requests

from .default_graph import build_default_graph
from .graph_model import ConfigurationError, GraphModel

logger = logging.getLogger(__name__)


def _parse_document(data: Any, origin: str) -> GraphModel:
    try:
        return GraphModel.from_config(data)
    except ConfigurationError as e:
        raise ConfigurationError(f"Invalid graph configuration from {origin}: {e}") from e


def fetch_graph_config(url: str, timeout: float = 5.0) -> Optional[Dict[str, Any]]:
    """
    GET the graph document at `url`.

    Returns:
        Parsed JSON, or None if the server could not be reached or answered non-2xx.

    Raises:
        ConfigurationError: the response body is not JSON
    """
    try:
        r = requests.get(url, timeout=timeout)
    except requests.RequestException as e:
        logger.warning("Graph config URL %s unreachable (%s); falling back", url, e)
        return None
    if not r.ok:
        logger.warning("Graph config URL %s returned HTTP %s; falling back", url, r.status_code)
        return None
    try:
        return r.json()
    except ValueError as e:
        raise ConfigurationError(f"Graph configuration at {url} is not valid JSON: {e}") from e


def load_graph_config_file(path: str) -> Dict[str, Any]:
    """Read a graph document from disk. Raises ConfigurationError if missing or not JSON."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Graph configuration file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Graph configuration file {path} is not valid JSON: {e}") from e


def save_graph_config(model: GraphModel, path: str) -> None:
    """Write `model` as a graph document (creates parent directories)."""
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(model.to_config(), f, indent=2, ensure_ascii=False)


def load_graph_model(path: Optional[str] = None, url: Optional[str] = None) -> GraphModel:
    """
    Resolve the topology: URL, else file, else built-in default.

    Args:
        path: JSON file (default: config.CONTEXT_GRAPH_CONFIG_PATH)
        url: HTTP(S) location (default: config.CONTEXT_GRAPH_CONFIG_URL)

    Returns:
        Validated GraphModel
    """
    import config
    if url is None:
        url = config.CONTEXT_GRAPH_CONFIG_URL
    if path is None:
        path = config.CONTEXT_GRAPH_CONFIG_PATH

    # 1) URL
    if url:
        data = fetch_graph_config(url, timeout=config.CONTEXT_GRAPH_CONFIG_TIMEOUT)
        if data is not None:
            model = _parse_document(data, url)
            logger.info("Loaded context graph from %s: %r", url, model)
            return model

    # 2) File
    if path:
        model = _parse_document(load_graph_config_file(path), path)
        logger.info("Loaded context graph from %s: %r", path, model)
        return model

    # 3) Built-in
    return build_default_graph()
