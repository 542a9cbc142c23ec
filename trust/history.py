"""Bounded FIFO histories used for ratio and confidence-pattern checks."""

from collections import deque
from typing import List, Tuple

from trust.config import LABEL_HISTORY_SIZE, CONFIDENCE_HISTORY_SIZE


class LabelHistory:
    """Most recent accepted top labels, oldest evicted first."""

    def __init__(self, capacity: int = LABEL_HISTORY_SIZE):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._labels: deque = deque(maxlen=capacity)

    def append(self, label: str):
        self._labels.append(label)

    def count(self, label: str) -> int:
        """Number of entries equal to label."""
        return sum(1 for lbl in self._labels if lbl == label)

    def ratio(self, label: str) -> float:
        """
        Fraction of the window occupied by label.

        The denominator is the window capacity, not the current length, so a
        short history cannot satisfy a ratio on its own.
        """
        return self.count(label) / self.capacity

    def counts(self) -> dict:
        counts = {}
        for lbl in self._labels:
            counts[lbl] = counts.get(lbl, 0) + 1
        return counts

    def to_list(self) -> List[str]:
        return list(self._labels)

    def clear(self):
        self._labels.clear()

    def __len__(self):
        return len(self._labels)

    def __iter__(self):
        return iter(self._labels)


class ConfidenceHistory:
    """Most recent (label, confidence) pairs across all admitted frames."""

    def __init__(self, capacity: int = CONFIDENCE_HISTORY_SIZE):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._entries: deque = deque(maxlen=capacity)

    def append(self, label: str, confidence: float):
        self._entries.append((label, float(confidence)))

    def recent(self, n: int) -> List[Tuple[str, float]]:
        """Return the last n entries in arrival order."""
        if n <= 0:
            return []
        return list(self._entries)[-n:]

    def count_at_least(self, label: str, threshold: float, window: int) -> int:
        """Count entries for label with confidence >= threshold in the last window entries."""
        return sum(
            1 for lbl, conf in self.recent(window)
            if lbl == label and conf >= threshold
        )

    def to_list(self) -> List[Tuple[str, float]]:
        return list(self._entries)

    def clear(self):
        self._entries.clear()

    def __len__(self):
        return len(self._entries)
