"""
=============================================================================
CONTEXT GRAPH ENGINE — APPLICATION ENTRY POINT (app.py)
=============================================================================

WHAT THIS FILE DOES (in plain language):
----------------------------------------
This is the "front door" of the server. When you run "python app.py", it starts
a web server that the frame pipeline and the dashboard talk to:

  1. The sensor-extraction stage POSTs one frame of sensor values
     (e.g. {"IN_FIST": 0.8, "IN_VEL": 0.1}) to /engine/frame.
  2. The engine propagates activations through the context graph.
  3. The dashboard reads activations, ranked states and history back
     (/engine/state, /engine/ranked, /engine/history) to draw the graph and charts.

The actual URL handlers live in routes.py; the engine lives in context_graph/.

HOW TO RUN:
-----------
  - From project root:  python app.py
  - By default the app is at:  http://localhost:5000

CONFIGURATION:
--------------
  - Settings come from the .env file and config.py (see config.py for every variable).
=============================================================================
"""

# ---------------------------------------------------------------------------
# Step 1: Load environment variables from .env (before anything else)
# ---------------------------------------------------------------------------
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent / ".env")

# ---------------------------------------------------------------------------
# Step 2: Import the web framework and our own modules
# ---------------------------------------------------------------------------
import logging

from flask import Flask
from flask_cors import CORS
from flask_compress import Compress

from routes import register_routes
from services.engine_session import EngineSession
import config

logging.basicConfig(
    level=getattr(logging, config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ---------------------------------------------------------------------------
# Step 3: Warn the user if settings look wrong
# ---------------------------------------------------------------------------
config.warn_invalid_config()


def create_app(session: Optional[EngineSession] = None) -> Flask:
    """
    Create and configure the Flask application (the web server).

    What it does:
      - Creates the Flask app and enables CORS so the dashboard can call the
        API from another origin (e.g. a dev server on a different port).
      - Enables compression; activation snapshots are sent every frame.
      - Builds the engine session (graph loaded from URL / file / built-in) unless
        one is passed in, and stores it in app.extensions["engine_session"].
        A bad graph configuration raises ConfigurationError here: the server
        refuses to start rather than run with an inconsistent graph.
      - Registers all URL routes (see routes.py).

    Args:
        session: Optional pre-built EngineSession (tests pass their own)

    Returns:
        The configured Flask application.
    """
    app = Flask(__name__)

    # In production you would restrict this to specific domains.
    CORS(app, resources={r"/*": {"origins": "*"}})
    Compress(app)

    app.extensions["engine_session"] = session if session is not None else EngineSession()

    register_routes(app)
    return app


# ---------------------------------------------------------------------------
# Run the server when this file is executed directly (e.g. "python app.py")
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    """
    - If FLASK_DEBUG is true: Flask's built-in development server (auto-reload, debugger).
    - Otherwise: Waitress, a production-style multi-threaded server.
    Host and port come from config (default: 0.0.0.0:5000).
    """
    app = create_app()
    if config.FLASK_DEBUG:
        app.run(
            host=config.FLASK_HOST,
            port=config.FLASK_PORT,
            debug=True
        )
    else:
        import waitress
        waitress.serve(app, host=config.FLASK_HOST, port=config.FLASK_PORT, threads=config.SERVER_THREADS)
