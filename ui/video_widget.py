"""
VideoWidget: Displays the camera feed with the confirmed denomination as a banner.
"""
import cv2
from PyQt5.QtWidgets import QWidget
from PyQt5.QtGui import QImage, QPainter, QPixmap, QColor
from PyQt5.QtCore import Qt, QRect


class VideoWidget(QWidget):
    """Widget for displaying video frames."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.latest_frame = None  # BGR numpy array
        self.latest_fps = 0.0
        self.banner_text = ""
        self.placeholder_text = "No camera feed"

    def setFrame(self, frame_bgr, fps=None):
        self.latest_frame = frame_bgr
        if fps is not None:
            self.latest_fps = fps
        self.update()

    def setBanner(self, text):
        """Text drawn over the bottom of the feed (empty to hide)."""
        self.banner_text = text or ""
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)

        widget_width = self.width()
        widget_height = self.height()
        painter.fillRect(0, 0, widget_width, widget_height, Qt.black)

        if self.latest_frame is None:
            painter.setPen(Qt.white)
            font = painter.font()
            font.setPointSize(14)
            painter.setFont(font)
            painter.drawText(QRect(0, 0, widget_width, widget_height),
                             Qt.AlignCenter, self.placeholder_text)
            return

        rgb_frame = cv2.cvtColor(self.latest_frame, cv2.COLOR_BGR2RGB)
        h, w, ch = rgb_frame.shape
        qt_image = QImage(rgb_frame.data, w, h, ch * w, QImage.Format_RGB888)
        scaled_pixmap = QPixmap.fromImage(qt_image.scaled(
            widget_width, widget_height, Qt.KeepAspectRatio, Qt.SmoothTransformation
        ))

        pixmap_x = (widget_width - scaled_pixmap.width()) // 2
        pixmap_y = (widget_height - scaled_pixmap.height()) // 2
        painter.drawPixmap(pixmap_x, pixmap_y, scaled_pixmap)

        painter.setPen(QColor(148, 163, 184))
        painter.drawText(10, 20, f"FPS: {self.latest_fps:.1f}")

        if self.banner_text:
            banner = QRect(0, widget_height - 90, widget_width, 90)
            painter.fillRect(banner, QColor(0, 0, 0, 160))
            painter.setPen(Qt.white)
            font = painter.font()
            font.setPointSize(36)
            font.setBold(True)
            painter.setFont(font)
            painter.drawText(banner, Qt.AlignCenter, self.banner_text)
