"""
Main window for the MoneyLens desktop application.
Left: confirmed denomination, controls and settings
Right: realtime video
"""
import logging

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QSpinBox, QComboBox, QGroupBox, QFrame
)
from PyQt5.QtCore import Qt, QThread

from feedback.localization import Language, display_text, tr
from feedback.speech import SpeechAnnouncer
from ui.settings import AppSettings
from ui.video_widget import VideoWidget
from workers.capture_worker import CaptureWorker
from workers.inference_worker import InferenceWorker

logger = logging.getLogger(__name__)

BUTTON_STYLE = """
    QPushButton {{
        background-color: {bg};
        color: white;
        padding: 12px;
        border-radius: 6px;
        font-weight: bold;
    }}
"""


class MainWindow(QMainWindow):
    """Main application window."""

    def __init__(self, classifier, settings: AppSettings = None, announcer: SpeechAnnouncer = None):
        super().__init__()
        self.classifier = classifier
        self.settings = settings if settings is not None else AppSettings()
        self.announcer = announcer if announcer is not None else SpeechAnnouncer()

        self.capture_worker = None
        self.inference_worker = None
        self.inference_thread = None

        # Idle -> running -> paused
        self.running = False
        self.paused = False

        self.setWindowTitle("MoneyLens")
        self.setMinimumSize(1200, 720)

        self.setup_ui()
        self.settings.languageChanged.connect(self.retranslate)
        self.retranslate(self.settings.language)

    def setup_ui(self):
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QHBoxLayout(central_widget)
        main_layout.setContentsMargins(10, 10, 10, 10)
        main_layout.setSpacing(10)

        main_layout.addWidget(self.create_left_panel(), 1)

        center_panel = QFrame()
        center_panel.setStyleSheet("QFrame { background-color: #0f172a; border-radius: 10px; }")
        center_layout = QVBoxLayout(center_panel)
        center_layout.setContentsMargins(5, 5, 5, 5)
        self.video_widget = VideoWidget()
        center_layout.addWidget(self.video_widget)
        main_layout.addWidget(center_panel, 3)

    def create_left_panel(self):
        panel = QFrame()
        panel.setFixedWidth(340)
        panel.setStyleSheet("QFrame { background-color: #1e293b; border-radius: 10px; }")

        layout = QVBoxLayout(panel)
        layout.setContentsMargins(15, 15, 15, 15)
        layout.setSpacing(15)

        title = QLabel("MoneyLens")
        title.setStyleSheet("color: #10b981; font-size: 24px; font-weight: 900; letter-spacing: 2px;")
        layout.addWidget(title)

        self.hint_label = QLabel()
        self.hint_label.setWordWrap(True)
        self.hint_label.setStyleSheet("color: #94a3b8; font-size: 12px;")
        layout.addWidget(self.hint_label)

        result_card = QFrame()
        result_card.setStyleSheet("background-color: rgba(15, 23, 42, 0.5); border-radius: 15px; padding: 15px;")
        result_inner = QVBoxLayout(result_card)

        self.result_label = QLabel()
        self.result_label.setStyleSheet("color: #f8fafc; font-size: 32px; font-weight: bold;")
        self.result_label.setAlignment(Qt.AlignCenter)
        result_inner.addWidget(self.result_label)

        self.detail_label = QLabel("")
        self.detail_label.setStyleSheet("color: #94a3b8; font-size: 11px;")
        self.detail_label.setAlignment(Qt.AlignRight)
        result_inner.addWidget(self.detail_label)

        layout.addWidget(result_card)

        self.start_btn = QPushButton()
        self.start_btn.clicked.connect(self.toggle_start_pause)
        layout.addWidget(self.start_btn)

        self.camera_group = QGroupBox()
        self.camera_group.setStyleSheet("QGroupBox { color: #94a3b8; border: 1px solid #334155; "
                                        "border-radius: 5px; margin-top: 10px; padding-top: 10px; }")
        camera_layout = QHBoxLayout(self.camera_group)
        camera_layout.addWidget(QLabel("Index:"))
        self.camera_idx_spin = QSpinBox()
        self.camera_idx_spin.setRange(0, 5)
        camera_layout.addWidget(self.camera_idx_spin)
        layout.addWidget(self.camera_group)

        self.language_group = QGroupBox()
        self.language_group.setStyleSheet(self.camera_group.styleSheet())
        language_layout = QHBoxLayout(self.language_group)
        self.language_combo = QComboBox()
        for lang in Language:
            self.language_combo.addItem(lang.display_name, lang)
        self.language_combo.setCurrentIndex(list(Language).index(self.settings.language))
        self.language_combo.currentIndexChanged.connect(
            lambda i: setattr(self.settings, "language", self.language_combo.itemData(i))
        )
        language_layout.addWidget(self.language_combo)
        layout.addWidget(self.language_group)

        layout.addStretch()
        return panel

    def retranslate(self, language):
        self.hint_label.setText(tr("hint", language))
        self.camera_group.setTitle(tr("camera", language))
        self.language_group.setTitle(tr("language", language))
        self._update_button()
        confirmed = self.inference_worker.stabilizer.confirmed_label if self.inference_worker else None
        if not confirmed:
            self.result_label.setText(tr("scanning", language))

    def _update_button(self):
        language = self.settings.language
        if not self.running:
            text, bg = tr("start", language), "#10b981"
        elif self.paused:
            text, bg = tr("resume", language), "#10b981"
        else:
            text, bg = tr("pause", language), "#ef4444"
        self.start_btn.setText(text)
        self.start_btn.setStyleSheet(BUTTON_STYLE.format(bg=bg))

    def toggle_start_pause(self):
        if not self.running:
            self.start()
        elif self.paused:
            self.resume()
        else:
            self.pause()

    def start(self):
        """Start camera capture and the detection pipeline."""
        if self.running:
            return

        self.inference_worker = InferenceWorker(self.classifier)
        self.inference_worker.connect_outputs(self.on_confirmed, self.on_cleared, self.on_observed)

        # Frame admission runs on its own thread; classification on the gate's pool
        self.inference_thread = QThread()
        self.inference_worker.moveToThread(self.inference_thread)
        self.inference_thread.start()
        self.inference_worker.start()

        self._start_capture()

        self.running = True
        self.paused = False
        self._update_button()

    def pause(self):
        """Stop capture and reset the stabilizer; label history is kept."""
        if not self.running or self.paused:
            return
        self._stop_capture()
        self.inference_worker.pause()
        self.paused = True
        self._update_button()

    def resume(self):
        if not self.running or not self.paused:
            return
        self.inference_worker.resume()
        self._start_capture()
        self.paused = False
        self._update_button()

    def stop(self):
        """Tear down capture and the pipeline."""
        if not self.running:
            return
        self._stop_capture()
        if self.inference_worker:
            self.inference_worker.stop()
        if self.inference_thread:
            self.inference_thread.quit()
            self.inference_thread.wait()
            self.inference_thread = None
        self.inference_worker = None
        self.running = False
        self.paused = False
        self._update_button()

    def _start_capture(self):
        self.capture_worker = CaptureWorker(self.camera_idx_spin.value())
        self.capture_worker.frameReady.connect(self.inference_worker.on_frame_received)
        self.capture_worker.frameReady.connect(self.on_frame_received)
        self.capture_worker.fpsReady.connect(self.on_fps_received)
        self.capture_worker.errorOccurred.connect(self.on_capture_error)
        self.capture_worker.start()

    def _stop_capture(self):
        if self.capture_worker:
            self.capture_worker.stop()
            self.capture_worker = None
        self.video_widget.setFrame(None, 0.0)

    def on_frame_received(self, frame, timestamp):
        self.video_widget.setFrame(frame)

    def on_fps_received(self, fps):
        self.video_widget.setFrame(self.video_widget.latest_frame, fps)

    def on_capture_error(self, message):
        self.video_widget.placeholder_text = message
        self.video_widget.update()

    def on_confirmed(self, label):
        text = display_text(label)
        self.result_label.setText(text)
        self.video_widget.setBanner(text)
        self.announcer.announce(label, self.settings.language)

    def on_cleared(self):
        self.result_label.setText(tr("scanning", self.settings.language))
        self.video_widget.setBanner("")
        self.detail_label.setText("")

    def on_observed(self, result):
        if result.get("label") is None:
            return
        color = "#10b981" if result["meets_threshold"] else "#94a3b8"
        self.detail_label.setStyleSheet(f"color: {color}; font-size: 11px;")
        self.detail_label.setText(
            f"{result['label']} {result['confidence'] * 100:.1f}% | "
            f"{result['consecutive_count']}/{result['required_consecutive']} | "
            f"history {result['history_ratio']:.0%}"
        )

    def closeEvent(self, event):
        self.stop()
        self.announcer.shutdown()
        event.accept()
