"""
Flask routes for the Context Graph Engine.

Handles health, graph topology, per-frame sensor input (full frame, inject only,
step only), state/ranking queries, history, reset and engine config.
Every handler uses the EngineSession stored on the app (app.extensions["engine_session"]).
"""

from typing import Any, Dict, Optional, Tuple

from flask import Blueprint, Flask, current_app, jsonify, request

import config
from services.engine_session import EngineSession


# Create a blueprint for better organization
api = Blueprint('api', __name__)


def _get_session() -> EngineSession:
    """Return the engine session owned by the running app."""
    return current_app.extensions["engine_session"]


def _read_sensors() -> Tuple[Optional[Dict[str, Any]], Optional[Any]]:
    """
    Parse {"sensors": {...}} from the request body.

    Returns:
        (sensors, None) on success, (None, error_response) on a bad request
    """
    if not request.is_json:
        return None, (jsonify({"error": "Request must be JSON"}), 400)
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return None, (jsonify({"error": "Request body must be a JSON object"}), 400)
    sensors = data.get("sensors")
    if not isinstance(sensors, dict):
        return None, (jsonify({"error": "Missing 'sensors' object (sensor id -> value)"}), 400)
    return sensors, None


@api.route("/health", methods=["GET"])
def health():
    """Liveness check; also reports the graph size and frame counter."""
    engine = _get_session().engine
    return jsonify({
        "status": "ok",
        "nodes": engine.model.size,
        "edges": len(engine.model.edges),
        "frame": engine.frame_count,
    })


@api.route("/engine/graph", methods=["GET"])
def get_graph():
    """
    Get the graph topology (for drawing nodes and edges).

    Returns:
        JSON: {"nodes": [{id, layer, label}], "edges": [{source, target, weight}]}
    """
    return jsonify(_get_session().engine.model.to_config())


@api.route("/engine/frame", methods=["POST"])
def process_frame():
    """
    Process one frame: smooth (optional), inject, step, query.

    Request Body:
        {
            "sensors": {"IN_FIST": 1.0, "IN_VEL": 0.1, ...},
            "smooth": true   (optional, default true)
        }

    Returns:
        JSON: {frame, timestamp, activations, rankedStates, dominant, sensors}
    """
    sensors, error = _read_sensors()
    if error:
        return error
    smooth = request.get_json(silent=True).get("smooth", True)
    if not isinstance(smooth, bool):
        return jsonify({"error": "'smooth' must be true or false"}), 400
    result = _get_session().process_frame(sensors, smooth=smooth)
    return jsonify(result.to_dict())


@api.route("/engine/inject", methods=["POST"])
def inject_sensors():
    """
    Inject sensor values without propagating.

    Request Body:
        {"sensors": {"IN_FIST": 1.0}}

    Returns:
        JSON: {"injected": <number of sensors written>, "activations": {...}}
    """
    sensors, error = _read_sensors()
    if error:
        return error
    session = _get_session()
    written = session.inject_only(sensors)
    return jsonify({"injected": written, "activations": session.get_state().activations})


@api.route("/engine/step", methods=["POST"])
def step_engine():
    """Run one propagation step with the sensors already injected."""
    return jsonify(_get_session().step_only().to_dict())


@api.route("/engine/state", methods=["GET"])
def get_engine_state():
    """
    Get current activations, ranked states and dominant state.

    Returns:
        JSON: {frame, timestamp, activations, rankedStates, dominant, sensors}
    """
    return jsonify(_get_session().get_state().to_dict())


@api.route("/engine/ranked", methods=["GET"])
def get_ranked_states():
    """
    Get ranked STATE nodes.

    Query:
        limit: optional max number of entries

    Returns:
        JSON: {"rankedStates": [{id, label, value}, ...]}
    """
    ranked = _get_session().get_state().ranked
    limit = request.args.get("limit", type=int)
    if limit is not None:
        if limit < 0:
            return jsonify({"error": "limit must be >= 0"}), 400
        ranked = ranked[:limit]
    return jsonify({"rankedStates": [s.to_dict() for s in ranked]})


@api.route("/engine/history", methods=["GET"])
def get_history():
    """Get the sampled activation history (oldest first)."""
    samples = _get_session().get_history()
    return jsonify({"samples": samples, "count": len(samples)})


@api.route("/engine/reset", methods=["POST"])
def reset_engine():
    """Zero all activations, smoothing windows and history."""
    _get_session().reset()
    return jsonify({"success": True, "message": "Engine reset"})


@api.route("/config/engine", methods=["GET"])
def get_engine_config():
    """Effective engine configuration (decay actually in use, graph source, pipeline settings)."""
    cfg = config.get_engine_config()
    cfg["decay"] = _get_session().engine.decay
    return jsonify(cfg)


def register_routes(app: Flask) -> None:
    """Attach the API blueprint to `app`."""
    app.register_blueprint(api)
