"""Output sinks, localization and speech for confirmed denominations."""

from feedback.output_sink import OutputSink, LoggingSink, CallbackSink, EventRecorder
from feedback.localization import Language, denomination_text, display_text

__all__ = [
    "OutputSink",
    "LoggingSink",
    "CallbackSink",
    "EventRecorder",
    "Language",
    "denomination_text",
    "display_text",
]
