"""Decision engine for confirming denominations from per-frame candidates."""

import logging
import time
from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Iterable

from domain.models import Observation
from trust.config import (
    HISTORY_APPEND_FLOOR, FAST_PATH_CONFIDENCE, FAST_PATH_REQUIRED,
    HIGHEST_VALUE, rule_for,
)
from trust.candidates import admit_candidates
from trust.history import LabelHistory, ConfidenceHistory
from trust.validators import (
    requires_history_gate, validate_denomination_history, validate_confidence_pattern,
)

logger = logging.getLogger(__name__)

ROUTE_FAST = "fast"
ROUTE_ENHANCED = "enhanced"
ROUTE_PATTERN = "pattern"


class DecisionPath(Enum):
    """Which procedure handled a frame."""
    SKIPPED = "SKIPPED"
    FAST = "FAST"
    ENHANCED = "ENHANCED"


@dataclass
class StabilizerState:
    """Mutable stabilizer state, owned by a single Stabilizer."""
    last_label: Optional[str] = None
    consecutive_count: int = 0
    confirmed_label: Optional[str] = None
    label_history: LabelHistory = field(default_factory=LabelHistory)
    confidence_history: ConfidenceHistory = field(default_factory=ConfidenceHistory)

    def observe(self, label: str) -> int:
        """Update the consecutive counter for a new top label."""
        if label == self.last_label:
            self.consecutive_count += 1
        else:
            self.consecutive_count = 1
            self.last_label = label
        return self.consecutive_count

    def reset(self, clear_history: bool = False):
        """
        Reset counters and the confirmed label.

        Histories are kept unless clear_history is set.
        """
        self.last_label = None
        self.consecutive_count = 0
        self.confirmed_label = None
        if clear_history:
            self.label_history.clear()
            self.confidence_history.clear()


@dataclass
class DecisionResult:
    """Outcome of one frame."""
    path: DecisionPath
    confirmed_label: Optional[str] = None  # Set only when this frame confirmed a new label
    route: Optional[str] = None
    observation: Optional[Observation] = None
    consecutive_count: int = 0
    required_consecutive: int = 0
    history_ratio: float = 0.0
    reason: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.confirmed_label is not None

    def to_dict(self) -> dict:
        obs = self.observation
        return {
            "path": self.path.value,
            "confirmed_label": self.confirmed_label,
            "route": self.route,
            "label": obs.label if obs else None,
            "confidence": obs.confidence if obs else None,
            "consecutive_count": self.consecutive_count,
            "required_consecutive": self.required_consecutive,
            "history_ratio": self.history_ratio,
            "meets_threshold": bool(obs and obs.confidence >= rule_for(obs.label).confidence_threshold),
            "reason": self.reason,
        }


class DecisionEngine:
    """
    Turns ranked candidates into at most one confirmation per frame.

    Two independent routes can confirm a label: consecutive counting (fast
    and enhanced paths) and the high-value confidence-pattern validator.
    The pattern validator only sees frames the enhanced path handled.
    Either route can be switched off to exercise the other on its own.
    """

    def __init__(self, counting_route: bool = True, pattern_route: bool = True):
        self.counting_route = counting_route
        self.pattern_route = pattern_route

    def process(self, candidates: Iterable, state: StabilizerState,
                timestamp: Optional[float] = None) -> DecisionResult:
        """
        Process the candidates of one frame.

        Args:
            candidates: Ranked or unranked (label, confidence) candidates
            state: Stabilizer state, mutated in place
            timestamp: Observation time (defaults to now)

        Returns:
            DecisionResult describing the path taken and any confirmation
        """
        admitted = admit_candidates(candidates)
        if not admitted:
            logger.debug("No candidates above admission floor")
            return DecisionResult(path=DecisionPath.SKIPPED, reason="no_candidates")

        top = admitted[0]
        label, confidence = top.label, top.confidence
        observation = Observation(
            label=label,
            confidence=confidence,
            timestamp=time.time() if timestamp is None else timestamp,
        )

        self._update_history(state, label, confidence)

        if confidence > FAST_PATH_CONFIDENCE and label != HIGHEST_VALUE:
            result = self._handle_fast(state, label)
        else:
            result = self._handle_enhanced(state, label)
        result.observation = observation

        # Fast-path frames are decided by counting alone
        if (result.path == DecisionPath.ENHANCED and result.route is None
                and self.pattern_route and label != state.confirmed_label):
            if validate_confidence_pattern(label, confidence, state.confidence_history):
                result.route = ROUTE_PATTERN
                result.reason = "pattern"

        if result.route is not None:
            state.confirmed_label = label
            result.confirmed_label = label
            logger.info("Confirmed %s with confidence %.4f via %s route",
                        label, confidence, result.route)

        return result

    def _update_history(self, state: StabilizerState, label: str, confidence: float):
        if confidence > HISTORY_APPEND_FLOOR:
            state.label_history.append(label)
            logger.debug("Updated history - current counts: %s", state.label_history.counts())
        state.confidence_history.append(label, confidence)

    def _handle_fast(self, state: StabilizerState, label: str) -> DecisionResult:
        count = state.observe(label)
        result = DecisionResult(
            path=DecisionPath.FAST,
            consecutive_count=count,
            required_consecutive=FAST_PATH_REQUIRED,
            history_ratio=state.label_history.ratio(label),
        )
        if label == state.confirmed_label:
            result.reason = "already_confirmed"
        elif count < FAST_PATH_REQUIRED:
            result.reason = "counting"
        elif self.counting_route:
            result.route = ROUTE_FAST
            result.reason = "consecutive"
        else:
            result.reason = "counting_disabled"
        return result

    def _handle_enhanced(self, state: StabilizerState, label: str) -> DecisionResult:
        count = state.observe(label)
        required = rule_for(label).required_consecutive
        result = DecisionResult(
            path=DecisionPath.ENHANCED,
            consecutive_count=count,
            required_consecutive=required,
            history_ratio=state.label_history.ratio(label),
        )

        if requires_history_gate(label) and not validate_denomination_history(label, state.label_history):
            logger.debug("High-value note %s requires more stable history", label)
            result.reason = "unstable_history"
            return result

        if label == state.confirmed_label:
            result.reason = "already_confirmed"
        elif count < required:
            result.reason = "counting"
        elif self.counting_route:
            result.route = ROUTE_ENHANCED
            result.reason = "consecutive"
        else:
            result.reason = "counting_disabled"
        return result
