"""Lifecycle wrapper owning the stabilizer state and its output sink."""

import logging
import threading
from enum import Enum
from typing import Iterable, Optional

from trust.decision_engine import DecisionEngine, DecisionResult, StabilizerState
from feedback.output_sink import OutputSink, LoggingSink

logger = logging.getLogger(__name__)


class StabilizerStatus(Enum):
    """Lifecycle state."""
    IDLE = "IDLE"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"


class Stabilizer:
    """
    Owns the single StabilizerState and forwards confirmations to a sink.

    Every start/pause/resume bumps an epoch. Results tagged with an older
    epoch (classifications admitted before a pause) are discarded without
    touching the state.
    """

    def __init__(self, sink: Optional[OutputSink] = None,
                 engine: Optional[DecisionEngine] = None,
                 state: Optional[StabilizerState] = None):
        self.sink = sink if sink is not None else LoggingSink()
        self.engine = engine if engine is not None else DecisionEngine()
        self.state = state if state is not None else StabilizerState()
        self.status = StabilizerStatus.IDLE
        self.epoch = 0
        self.last_result: Optional[DecisionResult] = None
        # Serializes lifecycle transitions against result application
        self._lock = threading.RLock()

    @property
    def is_active(self) -> bool:
        return self.status == StabilizerStatus.ACTIVE

    @property
    def confirmed_label(self) -> Optional[str]:
        return self.state.confirmed_label

    def start(self):
        """Idle -> Active."""
        with self._lock:
            if self.status != StabilizerStatus.IDLE:
                return False
            self.status = StabilizerStatus.ACTIVE
            self.epoch += 1
            logger.info("Stabilizer started")
            return True

    def pause(self, clear_history: bool = False) -> bool:
        """
        Active -> Paused.

        Counters and the confirmed label are reset; on_cleared fires if a
        label had been confirmed. Histories survive unless clear_history.
        """
        with self._lock:
            if self.status != StabilizerStatus.ACTIVE:
                return False
            self.status = StabilizerStatus.PAUSED
            self.epoch += 1
            self._reset(clear_history)
            logger.info("Stabilizer paused")
            return True

    def resume(self) -> bool:
        """Paused -> Active."""
        with self._lock:
            if self.status != StabilizerStatus.PAUSED:
                return False
            self.status = StabilizerStatus.ACTIVE
            self.epoch += 1
            logger.info("Stabilizer resumed")
            return True

    def stop(self, clear_history: bool = True):
        """Any state -> Idle."""
        with self._lock:
            if self.status == StabilizerStatus.IDLE:
                return False
            self.status = StabilizerStatus.IDLE
            self.epoch += 1
            self._reset(clear_history)
            logger.info("Stabilizer stopped")
            return True

    def _reset(self, clear_history: bool):
        had_confirmation = bool(self.state.confirmed_label)
        self.state.reset(clear_history=clear_history)
        self.last_result = None
        if had_confirmation:
            self.sink.on_cleared()

    def handle_candidates(self, candidates: Iterable, epoch: Optional[int] = None,
                          timestamp: Optional[float] = None) -> Optional[DecisionResult]:
        """
        Feed one frame's candidates through the decision engine.

        Args:
            candidates: Classifier output for the frame
            epoch: Epoch at admission time; stale epochs are discarded
            timestamp: Observation time

        Returns:
            DecisionResult, or None if the result was discarded
        """
        with self._lock:
            if self.status != StabilizerStatus.ACTIVE:
                logger.debug("Discarding result while %s", self.status.value)
                return None
            if epoch is not None and epoch != self.epoch:
                logger.debug("Discarding stale result (epoch %s, current %s)", epoch, self.epoch)
                return None

            result = self.engine.process(candidates, self.state, timestamp=timestamp)
            self.last_result = result
            if result.changed:
                self.sink.on_confirmed(result.confirmed_label, route=result.route)
            return result

    def snapshot(self) -> dict:
        """Plain-dict view of the current state."""
        with self._lock:
            return {
                "status": self.status.value,
                "epoch": self.epoch,
                "confirmed_label": self.state.confirmed_label,
                "last_label": self.state.last_label,
                "consecutive_count": self.state.consecutive_count,
                "label_history": self.state.label_history.to_list(),
                "confidence_history": [
                    {"label": lbl, "confidence": conf}
                    for lbl, conf in self.state.confidence_history.to_list()
                ],
            }
