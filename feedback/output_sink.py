"""Output sinks receiving confirmed-label changes from the stabilizer."""

import logging
import threading
import time
from typing import Callable, List, Optional

from domain.models import ConfirmationEvent

logger = logging.getLogger(__name__)


class OutputSink:
    """
    Receiver of stabilizer output.

    on_confirmed fires once per distinct new confirmation, on_cleared when a
    confirmed value is dropped on pause. The base class ignores both.
    """

    def on_confirmed(self, label: str, route: Optional[str] = None):
        pass

    def on_cleared(self):
        pass


class LoggingSink(OutputSink):
    """Writes events to the log."""

    def on_confirmed(self, label, route=None):
        logger.info("Detected %s (%s)", label, route or "unknown route")

    def on_cleared(self):
        logger.info("Detection cleared")


class CallbackSink(OutputSink):
    """Forwards events to plain callables (e.g. Qt signal emitters)."""

    def __init__(self, confirmed: Callable[[str], None],
                 cleared: Optional[Callable[[], None]] = None):
        self._confirmed = confirmed
        self._cleared = cleared

    def on_confirmed(self, label, route=None):
        self._confirmed(label)

    def on_cleared(self):
        if self._cleared is not None:
            self._cleared()


class EventRecorder(OutputSink):
    """Collects events in arrival order; thread-safe."""

    def __init__(self):
        self._events: List[ConfirmationEvent] = []
        self._lock = threading.Lock()

    def on_confirmed(self, label, route=None):
        self._record(ConfirmationEvent(kind="confirmed", label=label, route=route,
                                       timestamp=time.time()))

    def on_cleared(self):
        self._record(ConfirmationEvent(kind="cleared", timestamp=time.time()))

    def _record(self, event: ConfirmationEvent):
        with self._lock:
            self._events.append(event)

    @property
    def events(self) -> List[ConfirmationEvent]:
        with self._lock:
            return list(self._events)

    @property
    def confirmed_labels(self) -> List[str]:
        return [e.label for e in self.events if not e.is_cleared]

    def drain(self) -> List[ConfirmationEvent]:
        """Return and forget all recorded events."""
        with self._lock:
            events, self._events = self._events, []
        return events

    def __len__(self):
        with self._lock:
            return len(self._events)
