"""
InferenceWorker: Qt front end for the detection pipeline.
"""
import logging

from PyQt5.QtCore import QObject, Qt, pyqtSignal, pyqtSlot

from feedback.output_sink import CallbackSink
from trust.stabilizer import Stabilizer
from workers.pipeline import DetectionPipeline

logger = logging.getLogger(__name__)


class InferenceWorker(QObject):
    """
    Feeds camera frames into the gated pipeline and re-emits stabilizer
    output as Qt signals.

    Confirmations are emitted on the classifier thread while pause emits
    cleared on the caller's thread; connect_outputs queues both so
    receivers see them in emission order.
    """

    confirmed = pyqtSignal(str)  # newly confirmed denomination label
    cleared = pyqtSignal()
    observed = pyqtSignal(dict)  # per-frame decision, for the debug readout

    def __init__(self, classifier, gate_kwargs=None):
        super().__init__()
        self.classifier = classifier
        sink = CallbackSink(self.confirmed.emit, self.cleared.emit)
        self.pipeline = DetectionPipeline(self._classify, Stabilizer(sink=sink),
                                          gate_kwargs=gate_kwargs)

    def _classify(self, frame):
        candidates = self.classifier.classify(frame)
        logger.debug("Candidates: %s", candidates)
        return candidates

    def connect_outputs(self, on_confirmed, on_cleared, on_observed=None):
        """Connect receivers through the event queue of their own thread."""
        self.confirmed.connect(on_confirmed, Qt.QueuedConnection)
        self.cleared.connect(on_cleared, Qt.QueuedConnection)
        if on_observed is not None:
            self.observed.connect(on_observed, Qt.QueuedConnection)

    @property
    def stabilizer(self):
        return self.pipeline.stabilizer

    @pyqtSlot(object, float)
    def on_frame_received(self, frame_bgr, timestamp):
        if frame_bgr is not None:
            self.submit_frame(frame_bgr, timestamp)

    def submit_frame(self, frame_bgr, timestamp=None):
        """Offer a frame; the gate drops it if a classification is pending or too recent."""
        future = self.pipeline.submit_frame(frame_bgr, now=timestamp)
        if future is not None:
            future.add_done_callback(self._emit_observed)
        return future

    def _emit_observed(self, future):
        if future.cancelled() or future.exception() is not None:
            return
        result = future.result()
        if result is not None:
            self.observed.emit(result.to_dict())

    @pyqtSlot()
    def start(self):
        self.pipeline.start()

    @pyqtSlot()
    def pause(self):
        self.pipeline.pause()

    @pyqtSlot()
    def resume(self):
        self.pipeline.resume()

    @pyqtSlot()
    def stop(self):
        self.pipeline.stop()
