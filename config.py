"""
=============================================================================
CONFIGURATION FOR CONTEXT GRAPH ENGINE (config.py)
=============================================================================

WHAT THIS FILE DOES (in plain language):
----------------------------------------
This file holds ALL configurable settings for the project in one place. Other
files read from it. Values come from the environment (e.g. your .env file or
system variables), so you can tune the engine without changing code.

MAIN GROUPS OF SETTINGS:
------------------------
  1. Engine          — Decay (leak) constant and where the graph topology comes from.
  2. Frame pipeline  — Sensor smoothing window, dominant-state threshold, history sampling.
  3. Diagnostics     — Optional periodic logging of the top states; log level.
  4. Server          — Host, port, and debug mode for the web server.

HOW VALUES ARE CHOSEN:
---------------------
  - Environment variables (e.g. CONTEXT_GRAPH_DECAY) override everything.
  - If an env var is not set, we use the default shown below.
  - Out-of-range values are reported by warn_invalid_config(); the engine itself
    refuses to start with an invalid decay (ConfigurationError).
=============================================================================
"""

import os
from typing import Optional


# ============================================================================
# ENGINE (activation propagation)
# ============================================================================
# Leak constant of the leaky integrator, in [0, 1). Each frame a FEATURE/STATE
# node keeps decay * previous activation before adding its weighted inputs.
# 0.5 lets a state fall below 0.05 within ~10 frames once its input stops.
# ----------------------------------------------------------------------------
CONTEXT_GRAPH_DECAY: float = float(os.getenv("CONTEXT_GRAPH_DECAY", "0.5"))

# Topology source. URL is tried first, then the JSON file, then the built-in graph.
# JSON format: {"nodes": [{id, layer, label}], "edges": [{source, target, weight}]}
CONTEXT_GRAPH_CONFIG_PATH: str = (os.getenv("CONTEXT_GRAPH_CONFIG_PATH") or "").strip()
CONTEXT_GRAPH_CONFIG_URL: str = (os.getenv("CONTEXT_GRAPH_CONFIG_URL") or "").strip()
# Seconds to wait for CONTEXT_GRAPH_CONFIG_URL before falling back.
CONTEXT_GRAPH_CONFIG_TIMEOUT: float = float(os.getenv("CONTEXT_GRAPH_CONFIG_TIMEOUT", "5"))

# ============================================================================
# FRAME PIPELINE (consumer side of the engine)
# ============================================================================
# Simple moving average over the last N frames for every sensor before injection.
SENSOR_SMOOTHING_WINDOW: int = max(1, int(os.getenv("SENSOR_SMOOTHING_WINDOW", "5")))

# The top-ranked state is reported as "dominant" only above this activation.
DOMINANT_STATE_THRESHOLD: float = float(os.getenv("DOMINANT_STATE_THRESHOLD", "0.55"))

# Rolling history of activation snapshots for charts: keep the last N samples,
# sampling each frame with this probability (reduced, randomized rate).
HISTORY_MAX_SAMPLES: int = max(1, int(os.getenv("HISTORY_MAX_SAMPLES", "50")))
HISTORY_SAMPLE_RATE: float = float(os.getenv("HISTORY_SAMPLE_RATE", "0.15"))

# ============================================================================
# DIAGNOSTICS (off by default)
# ============================================================================
# When True, log the top-ranked states every N frames to aid weight tuning.
ENGINE_DIAGNOSTIC_LOGGING: bool = os.getenv("ENGINE_DIAGNOSTIC_LOGGING", "false").lower() == "true"
# Log every N frames (e.g. 30 = once per second at 30 fps). Ignored when logging is disabled.
ENGINE_DIAGNOSTIC_LOG_INTERVAL: int = max(1, int(os.getenv("ENGINE_DIAGNOSTIC_LOG_INTERVAL", "30")))
# Number of states included in each diagnostic line.
ENGINE_DIAGNOSTIC_TOP_N: int = max(1, int(os.getenv("ENGINE_DIAGNOSTIC_TOP_N", "3")))

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()

# ============================================================================
# Application Configuration
# ============================================================================
FLASK_PORT: int = int(os.getenv("FLASK_PORT", "5000"))
FLASK_DEBUG: bool = os.getenv("FLASK_DEBUG", "false").lower() == "true"
FLASK_HOST: str = os.getenv("FLASK_HOST", "0.0.0.0")
# Worker threads for waitress when FLASK_DEBUG is off.
SERVER_THREADS: int = max(1, int(os.getenv("SERVER_THREADS", "6")))

# ============================================================================
# Helper Functions
# ============================================================================

def warn_invalid_config() -> None:
    """
    Print warnings for settings that are out of range or point nowhere.
    Call from app startup (e.g. app.py) to help operators. Does not raise.
    """
    import sys
    problems = []
    if not 0.0 <= CONTEXT_GRAPH_DECAY < 1.0:
        problems.append(f"CONTEXT_GRAPH_DECAY={CONTEXT_GRAPH_DECAY} (must be in [0, 1))")
    if CONTEXT_GRAPH_CONFIG_PATH and not os.path.isfile(CONTEXT_GRAPH_CONFIG_PATH):
        problems.append(f"CONTEXT_GRAPH_CONFIG_PATH={CONTEXT_GRAPH_CONFIG_PATH} (file not found)")
    if not 0.0 <= DOMINANT_STATE_THRESHOLD <= 1.0:
        problems.append(f"DOMINANT_STATE_THRESHOLD={DOMINANT_STATE_THRESHOLD} (expected 0-1)")
    if not 0.0 <= HISTORY_SAMPLE_RATE <= 1.0:
        problems.append(f"HISTORY_SAMPLE_RATE={HISTORY_SAMPLE_RATE} (expected 0-1)")
    if problems:
        print("Config warning: the following settings look wrong:", ", ".join(problems), file=sys.stderr)


def get_graph_source() -> Optional[str]:
    """Describe where the topology will be loaded from: 'url', 'file', or None (built-in)."""
    if CONTEXT_GRAPH_CONFIG_URL:
        return "url"
    if CONTEXT_GRAPH_CONFIG_PATH:
        return "file"
    return None


def get_engine_config() -> dict:
    """
    Get the effective engine/pipeline configuration (served by GET /config/engine).

    Returns:
        dict: camelCase keys, no secrets
    """
    return {
        "decay": CONTEXT_GRAPH_DECAY,
        "graphSource": get_graph_source() or "builtin",
        "graphConfigPath": CONTEXT_GRAPH_CONFIG_PATH,
        "graphConfigUrl": CONTEXT_GRAPH_CONFIG_URL,
        "smoothingWindow": SENSOR_SMOOTHING_WINDOW,
        "dominantThreshold": DOMINANT_STATE_THRESHOLD,
        "historyMaxSamples": HISTORY_MAX_SAMPLES,
        "historySampleRate": HISTORY_SAMPLE_RATE,
        "diagnosticLogging": ENGINE_DIAGNOSTIC_LOGGING,
        "diagnosticLogInterval": ENGINE_DIAGNOSTIC_LOG_INTERVAL,
    }
