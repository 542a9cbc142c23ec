"""Temporal detection stabilizer for MoneyLens."""

from trust.history import LabelHistory, ConfidenceHistory
from trust.candidates import admit_candidates
from trust.decision_engine import DecisionPath, DecisionResult, DecisionEngine, StabilizerState
from trust.stabilizer import Stabilizer, StabilizerStatus

__all__ = [
    "LabelHistory",
    "ConfidenceHistory",
    "admit_candidates",
    "DecisionPath",
    "DecisionResult",
    "DecisionEngine",
    "StabilizerState",
    "Stabilizer",
    "StabilizerStatus",
]
