"""
CaptureWorker: Reads frames from the camera and emits each one (latest frame wins downstream).
"""
import logging
import time

import cv2
from PyQt5.QtCore import QThread, pyqtSignal

logger = logging.getLogger(__name__)


class CaptureWorker(QThread):
    """
    Worker thread for camera capture.
    Frames are emitted as fast as the camera delivers them; the frame gate
    downstream decides which ones get classified.
    """

    frameReady = pyqtSignal(object, float)  # frame_bgr (numpy array), monotonic timestamp
    fpsReady = pyqtSignal(float)
    errorOccurred = pyqtSignal(str)

    def __init__(self, camera_index=0, width=1280, height=720):
        super().__init__()
        self.camera_index = camera_index
        self.width = width
        self.height = height
        self.running = False
        self.cap = None

        self.fps_start_time = None
        self.fps_frame_count = 0
        self.fps = 0.0

    def run(self):
        """Main capture loop."""
        self.running = True
        self.cap = cv2.VideoCapture(self.camera_index)

        if not self.cap.isOpened():
            logger.error("Could not open camera %s", self.camera_index)
            self.errorOccurred.emit("Failed to setup camera input.")
            self.running = False
            return

        self.cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.width)
        self.cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.height)
        logger.info("Capture started on camera %s", self.camera_index)

        self.fps_start_time = time.monotonic()

        while self.running:
            ret, frame = self.cap.read()
            if not ret:
                logger.warning("Camera %s stopped delivering frames", self.camera_index)
                break

            now = time.monotonic()
            self.fps_frame_count += 1
            if now - self.fps_start_time >= 1.0:
                self.fps = self.fps_frame_count / (now - self.fps_start_time)
                self.fpsReady.emit(self.fps)
                self.fps_frame_count = 0
                self.fps_start_time = now

            self.frameReady.emit(frame, now)

        if self.cap:
            self.cap.release()
            self.cap = None

    def stop(self):
        """Stop camera capture."""
        self.running = False
        self.wait()
        if self.cap:
            self.cap.release()
            self.cap = None
