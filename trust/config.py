"""Configuration constants for the detection stabilizer."""

from dataclasses import dataclass

from ml.config import CLASSES

# Frame gate
MIN_CLASSIFICATION_INTERVAL = 0.4  # Seconds between admitted frames

# Candidate admission
ADMISSION_FLOOR = 0.3  # Candidates below this are discarded
HISTORY_APPEND_FLOOR = 0.8  # Top label must exceed this to enter label history

# History windows
LABEL_HISTORY_SIZE = 10
CONFIDENCE_HISTORY_SIZE = 5
PATTERN_WINDOW = 3  # Most recent confidence entries inspected for high-value notes

# Fast path
FAST_PATH_CONFIDENCE = 0.95  # Strictly greater than
FAST_PATH_REQUIRED = 2

# High-value pattern validator
ULTRA_HIGH_CONFIDENCE = 0.999
PATTERN_HIGH_CONFIDENCE = 0.95
PATTERN_HIGH_COUNT = 2
PATTERN_MEDIUM_CONFIDENCE = 0.85
PATTERN_MEDIUM_COUNT = 3
SECOND_TIER_CONFIDENCE = 0.90

# Ordered lowest to highest value
HIGHEST_VALUE = CLASSES[-1]
SECOND_HIGHEST_VALUE = CLASSES[-2]
HISTORY_GATED = (HIGHEST_VALUE, SECOND_HIGHEST_VALUE)


@dataclass(frozen=True)
class DenominationRule:
    """Static stability rule for one denomination."""
    required_consecutive: int
    confidence_threshold: float
    history_ratio_required: float


DENOMINATION_RULES = {
    "5-tl": DenominationRule(3, 0.90, 0.60),
    "10-tl": DenominationRule(3, 0.90, 0.60),
    "20-tl": DenominationRule(4, 0.92, 0.60),
    "50-tl": DenominationRule(4, 0.93, 0.65),
    "100-tl": DenominationRule(5, 0.94, 0.70),
    "200-tl": DenominationRule(7, 0.85, 0.75),
}

DEFAULT_RULE = DenominationRule(3, 0.85, 0.60)


def rule_for(label: str) -> DenominationRule:
    """Look up the stability rule for a label, falling back to the default."""
    return DENOMINATION_RULES.get(label, DEFAULT_RULE)
