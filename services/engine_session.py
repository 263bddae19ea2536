"""
Engine Session (frame pipeline).

Drives one ContextEngine for a stream of frames:

    sensor scalars → smoothing (SensorBuffer) → inject → step → snapshot + ranking
                   → dominant-state readout → sampled history (ActivationHistory)

The engine itself has no locking; the web server handles requests on several
threads, so every engine call made here runs under the session lock. The Flask
app owns one session (app.extensions["engine_session"]); scripts and tests
create their own.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import config
from context_graph.engine import ContextEngine
from context_graph.graph_loader import load_graph_model
from context_graph.graph_model import NodeLayer
from context_graph.ranking import RankedState
from services.activation_history import ActivationHistory
from services.sensor_buffer import SensorBuffer

logger = logging.getLogger(__name__)


def dominant_state(ranked: List[RankedState], threshold: float) -> Optional[RankedState]:
    """Top state if its activation exceeds `threshold`, else None (no confident winner)."""
    if not ranked:
        return None
    top = ranked[0]
    return top if top.value > threshold else None


@dataclass
class FrameResult:
    """Outcome of one processed frame."""
    frame: int  # engine frame counter after this frame
    timestamp: float  # Unix timestamp of processing
    activations: Dict[str, float]  # every node id -> activation
    ranked: List[RankedState]  # STATE nodes, highest first
    dominant: Optional[RankedState] = None  # top state above threshold, if any
    sensors: Dict[str, Any] = field(default_factory=dict)  # values actually injected (after smoothing)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frame": self.frame,
            "timestamp": self.timestamp,
            "activations": dict(self.activations),
            "rankedStates": [s.to_dict() for s in self.ranked],
            "dominant": self.dominant.to_dict() if self.dominant else None,
            "sensors": dict(self.sensors),
        }


class EngineSession:
    """
    One engine plus its consumer-side helpers, safe to share between threads.

    Usage:
        session = EngineSession()
        result = session.process_frame({"IN_FIST": 1.0, "IN_VEL": 0.1})
        if result.dominant:
            print(result.dominant.label)
    """

    def __init__(
        self,
        engine: Optional[ContextEngine] = None,
        smoothing_window: Optional[int] = None,
        dominant_threshold: Optional[float] = None,
        history: Optional[ActivationHistory] = None,
        diagnostic_logging: Optional[bool] = None,
        diagnostic_interval: Optional[int] = None,
    ):
        """
        Args:
            engine: Engine to drive (default: graph from load_graph_model(), decay from config)
            smoothing_window: Moving-average window per sensor (default: config.SENSOR_SMOOTHING_WINDOW)
            dominant_threshold: Minimum top activation for a dominant state (default: config.DOMINANT_STATE_THRESHOLD)
            history: History buffer (default: config.HISTORY_MAX_SAMPLES / HISTORY_SAMPLE_RATE)
            diagnostic_logging: Log top states periodically (default: config.ENGINE_DIAGNOSTIC_LOGGING)
            diagnostic_interval: Frames between diagnostic lines (default: config.ENGINE_DIAGNOSTIC_LOG_INTERVAL)
        """
        self.engine = engine if engine is not None else ContextEngine(load_graph_model())
        self.sensor_buffer = SensorBuffer(
            smoothing_window or config.SENSOR_SMOOTHING_WINDOW,
            keys=self.engine.model.ids_in_layer(NodeLayer.SENSOR),
        )
        self.dominant_threshold = (
            config.DOMINANT_STATE_THRESHOLD if dominant_threshold is None else float(dominant_threshold)
        )
        self.history = history if history is not None else ActivationHistory(
            max_samples=config.HISTORY_MAX_SAMPLES,
            sample_rate=config.HISTORY_SAMPLE_RATE,
        )
        self.diagnostic_logging = (
            config.ENGINE_DIAGNOSTIC_LOGGING if diagnostic_logging is None else bool(diagnostic_logging)
        )
        self.diagnostic_interval = max(1, diagnostic_interval or config.ENGINE_DIAGNOSTIC_LOG_INTERVAL)
        self._lock = threading.Lock()
        self._last_timestamp: float = 0.0

    # ------------------------------------------------------------------
    # Frame processing
    # ------------------------------------------------------------------
    def process_frame(self, sensors: Mapping[str, Any], smooth: bool = True) -> FrameResult:
        """
        Run one full frame: optional smoothing, inject, step, query.

        Args:
            sensors: sensor-id -> scalar (unknown keys are ignored by the engine)
            smooth: Average each sensor over the last frames before injecting

        Returns:
            FrameResult for this frame
        """
        with self._lock:
            injected = self.sensor_buffer.smooth(sensors) if smooth else dict(sensors)
            self.engine.inject(injected)
            self.engine.step()
            result = self._build_result(injected)
        self.history.maybe_record(result.activations, result.timestamp)
        if self.diagnostic_logging and result.frame % self.diagnostic_interval == 0:
            self._log_diagnostic(result)
        return result

    def inject_only(self, sensors: Mapping[str, Any]) -> int:
        """Inject without stepping (no smoothing). Returns the number of sensors written."""
        with self._lock:
            return self.engine.inject(sensors)

    def step_only(self) -> FrameResult:
        """Propagate once without new sensor input."""
        with self._lock:
            self.engine.step()
            return self._build_result({})

    def get_state(self) -> FrameResult:
        """Current activations and ranking, without advancing the engine."""
        with self._lock:
            return self._build_result({}, timestamp=self._last_timestamp or time.time())

    def get_history(self) -> List[Dict[str, Any]]:
        return self.history.samples()

    def reset(self) -> None:
        """Zero the engine, drop smoothing windows and history."""
        with self._lock:
            self.engine.reset()
            self.sensor_buffer.clear()
            self._last_timestamp = 0.0
        self.history.clear()

    # ------------------------------------------------------------------
    # Internals (call with the lock held)
    # ------------------------------------------------------------------
    def _build_result(self, sensors: Mapping[str, Any], timestamp: Optional[float] = None) -> FrameResult:
        if timestamp is None:
            timestamp = time.time()
            self._last_timestamp = timestamp
        ranked = self.engine.ranked_states()
        return FrameResult(
            frame=self.engine.frame_count,
            timestamp=timestamp,
            activations=self.engine.snapshot(),
            ranked=ranked,
            dominant=dominant_state(ranked, self.dominant_threshold),
            sensors=dict(sensors),
        )

    def _log_diagnostic(self, result: FrameResult) -> None:
        top = ", ".join(f"{s.id}={s.value:.3f}" for s in result.ranked[:config.ENGINE_DIAGNOSTIC_TOP_N])
        logger.info(
            "engine_diagnostic frame=%d dominant=%s top=[%s]",
            result.frame,
            result.dominant.id if result.dominant else None,
            top,
        )
