"""Extra validation for high-value denominations."""

import logging

from trust.config import (
    HIGHEST_VALUE, SECOND_HIGHEST_VALUE, HISTORY_GATED,
    PATTERN_WINDOW, ULTRA_HIGH_CONFIDENCE,
    PATTERN_HIGH_CONFIDENCE, PATTERN_HIGH_COUNT,
    PATTERN_MEDIUM_CONFIDENCE, PATTERN_MEDIUM_COUNT,
    SECOND_TIER_CONFIDENCE, rule_for,
)
from trust.history import LabelHistory, ConfidenceHistory

logger = logging.getLogger(__name__)


def requires_history_gate(label: str) -> bool:
    """Only the two highest denominations are history-gated."""
    return label in HISTORY_GATED


def validate_denomination_history(label: str, history: LabelHistory) -> bool:
    """
    History-ratio gate.

    Args:
        label: Denomination being confirmed
        history: Label history of accepted top labels

    Returns:
        True if the label occupies enough of the window
    """
    ratio = history.ratio(label)
    required = rule_for(label).history_ratio_required
    passed = ratio >= required
    logger.debug("History ratio for %s: %.2f (required %.2f) -> %s",
                 label, ratio, required, passed)
    return passed


def validate_highest_value(confidence: float, history: ConfidenceHistory) -> bool:
    """
    Multi-tier check for the highest denomination.

    Any of: a single ultra-high confidence observation, enough high
    confidence entries among the last few, or a full window of medium-high
    confidence entries.
    """
    if confidence >= ULTRA_HIGH_CONFIDENCE:
        logger.debug("Ultra-high confidence detection (%.4f)", confidence)
        return True

    high = history.count_at_least(HIGHEST_VALUE, PATTERN_HIGH_CONFIDENCE, PATTERN_WINDOW)
    if high >= PATTERN_HIGH_COUNT:
        logger.debug("Multiple high confidence detections in window: %d", high)
        return True

    medium = history.count_at_least(HIGHEST_VALUE, PATTERN_MEDIUM_CONFIDENCE, PATTERN_WINDOW)
    if medium >= PATTERN_MEDIUM_COUNT:
        logger.debug("Consistent medium-high confidence pattern")
        return True

    logger.debug("Validation pending - building confidence history")
    return False


def validate_confidence_pattern(label: str, confidence: float,
                                history: ConfidenceHistory) -> bool:
    """
    Confidence-pattern validator for high-value denominations.

    Independent of consecutive counting. Lower denominations never pass.
    """
    if label == HIGHEST_VALUE:
        return validate_highest_value(confidence, history)
    if label == SECOND_HIGHEST_VALUE:
        return confidence >= SECOND_TIER_CONFIDENCE
    return False
