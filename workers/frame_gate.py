"""
FrameGate: admits at most one classification in flight, throttled to a minimum interval.
"""
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from trust.config import MIN_CLASSIFICATION_INTERVAL

logger = logging.getLogger(__name__)


class FrameGate:
    """
    Drops frames that arrive too soon or while a classification is pending.

    The pending flag is set by test-and-set under a lock and cleared only
    after the result handler has returned, so result handling is never
    concurrent with another classification.
    """

    def __init__(self, classify, on_result, min_interval=MIN_CLASSIFICATION_INTERVAL,
                 executor=None, clock=time.monotonic):
        """
        Args:
            classify: callable(frame) -> candidates; may raise
            on_result: callable(candidates, token) run on the worker after classification;
                its return value becomes the future's result
            min_interval: Minimum time between admitted frames
            executor: concurrent.futures executor (a single worker thread if None)
            clock: Time source used when submit() is called without now
        """
        if min_interval < 0:
            raise ValueError(f"min_interval must be non-negative, got {min_interval}")
        self.classify = classify
        self.on_result = on_result
        self.min_interval = float(min_interval)
        self.clock = clock

        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="classifier"
        )
        self._lock = threading.Lock()
        self._pending = False
        self._open = True
        self.last_classification_time = None

        self.admitted_count = 0
        self.dropped_count = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._open

    def open(self):
        with self._lock:
            self._open = True

    def close(self):
        """Reject new frames; an in-flight classification still completes."""
        with self._lock:
            self._open = False

    def submit(self, frame, now=None, token=None):
        """
        Offer a frame for classification.

        Args:
            frame: Frame passed to classify
            now: Current time (clock() if None)
            token: Opaque value handed back to on_result (e.g. stabilizer epoch)

        Returns:
            Future for the scheduled job, or None if the frame was dropped
        """
        if now is None:
            now = self.clock()

        with self._lock:
            if not self._open or self._pending:
                self.dropped_count += 1
                return None
            if (self.last_classification_time is not None and
                    now - self.last_classification_time < self.min_interval):
                self.dropped_count += 1
                return None
            self._pending = True
            self.last_classification_time = now
            self.admitted_count += 1

        try:
            return self._executor.submit(self._run, frame, token)
        except RuntimeError:
            # Executor already shut down
            logger.warning("Classifier pool unavailable, dropping frame")
            with self._lock:
                self._pending = False
            return None

    def _run(self, frame, token):
        try:
            try:
                candidates = self.classify(frame)
            except Exception:
                logger.warning("Classification failed, skipping frame", exc_info=True)
                candidates = []

            try:
                return self.on_result(candidates, token)
            except Exception:
                logger.exception("Result handler failed")
                return None
        finally:
            with self._lock:
                self._pending = False

    def shutdown(self, wait=True):
        """Close the gate and stop the worker pool if the gate created it."""
        self.close()
        if self._owns_executor:
            self._executor.shutdown(wait=wait)
