"""Sanitizing and ranking of raw classifier candidates."""

import logging
import math
from typing import Iterable, List

from domain.models import Candidate
from trust.config import ADMISSION_FLOOR

logger = logging.getLogger(__name__)


def coerce_candidate(raw):
    """
    Convert one raw classifier output into a Candidate.

    Accepts a Candidate, a (label, confidence) pair or a mapping with
    "label" and "confidence" keys.

    Returns:
        Candidate, or None if the data is malformed
    """
    if isinstance(raw, Candidate):
        label, conf = raw.label, raw.confidence
    elif isinstance(raw, dict):
        label, conf = raw.get("label"), raw.get("confidence")
    else:
        try:
            label, conf = raw
        except (TypeError, ValueError):
            return None

    if not isinstance(label, str) or not label:
        return None
    if isinstance(conf, bool):
        return None
    try:
        conf = float(conf)
    except (TypeError, ValueError):
        return None
    if math.isnan(conf) or conf < 0.0 or conf > 1.0:
        return None

    return Candidate(label=label, confidence=conf)


def admit_candidates(raw_candidates: Iterable, floor: float = ADMISSION_FLOOR) -> List[Candidate]:
    """
    Drop malformed candidates and those below the admission floor.

    Args:
        raw_candidates: Classifier output for one frame (may be None or empty)
        floor: Minimum confidence to keep a candidate

    Returns:
        Valid candidates sorted by confidence, highest first
    """
    if raw_candidates is None:
        return []

    admitted = []
    for raw in raw_candidates:
        cand = coerce_candidate(raw)
        if cand is None:
            logger.debug("Dropping malformed candidate: %r", raw)
            continue
        if cand.confidence < floor:
            continue
        admitted.append(cand)

    # Stable sort keeps classifier order among equal confidences
    admitted.sort(key=lambda c: c.confidence, reverse=True)
    return admitted
