"""
DetectionPipeline: frame gate + classifier + stabilizer, without any Qt dependency.
"""
import logging

from trust.stabilizer import Stabilizer
from workers.frame_gate import FrameGate

logger = logging.getLogger(__name__)


class DetectionPipeline:
    """Frame source -> FrameGate -> classifier -> Stabilizer -> output sink."""

    def __init__(self, classify, stabilizer: Stabilizer = None, gate_kwargs=None):
        """
        Args:
            classify: callable(frame) -> ranked (label, confidence) candidates
            stabilizer: Stabilizer owning the state and sink
            gate_kwargs: Extra FrameGate arguments (min_interval, executor, clock)
        """
        self.stabilizer = stabilizer if stabilizer is not None else Stabilizer()
        self.gate = FrameGate(classify, self._on_result, **(gate_kwargs or {}))
        self.gate.close()

    def _on_result(self, candidates, epoch):
        return self.stabilizer.handle_candidates(candidates, epoch=epoch)

    def submit_frame(self, frame, now=None):
        """
        Offer a frame.

        Returns:
            Future resolving to the frame's DecisionResult (None if the result
            was discarded), or None if the gate dropped the frame
        """
        return self.gate.submit(frame, now=now, token=self.stabilizer.epoch)

    def start(self):
        if self.stabilizer.start():
            self.gate.open()

    def pause(self, clear_history=False):
        self.gate.close()
        self.stabilizer.pause(clear_history=clear_history)

    def resume(self):
        if self.stabilizer.resume():
            self.gate.open()

    def stop(self):
        """Stop the stabilizer and release the classifier pool."""
        self.stabilizer.stop()
        self.gate.shutdown(wait=False)
