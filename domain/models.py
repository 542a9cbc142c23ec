"""
Domain models for classifier candidates and stabilizer events.
"""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Candidate:
    """One ranked classifier output for a frame."""
    label: str
    confidence: float


@dataclass(frozen=True)
class Observation:
    """Top candidate of an admitted frame."""
    label: str
    confidence: float
    timestamp: float


@dataclass(frozen=True)
class ConfirmationEvent:
    """Event delivered to an output sink."""
    kind: str  # "confirmed" or "cleared"
    label: Optional[str] = None
    route: Optional[str] = None  # "fast", "enhanced" or "pattern"
    timestamp: float = 0.0

    @property
    def is_cleared(self) -> bool:
        """Check if this event cleared the confirmed label."""
        return self.kind == "cleared"

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "label": self.label,
            "route": self.route,
            "timestamp": self.timestamp,
        }
