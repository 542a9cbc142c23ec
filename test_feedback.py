"""Tests for localization, speech, settings and candidate ranking."""

import numpy as np
import pytest
from PyQt5.QtCore import QSettings

from feedback.localization import Language, denomination_text, display_text, tr
from feedback.speech import SpeechAnnouncer
from ml.classifier import rank_candidates
from ui.settings import AppSettings


def test_denomination_text():
    assert denomination_text("200-tl", Language.ENGLISH) == "200 Turkish Lira"
    assert denomination_text("5-tl", Language.TURKISH) == "5 Türk Lirası"


def test_display_text():
    assert display_text("100-tl") == "100 TL"
    assert display_text("") == ""


def test_language_from_code_falls_back_to_english():
    assert Language.from_code("tr") == Language.TURKISH
    assert Language.from_code("de") == Language.ENGLISH
    assert Language.TURKISH.display_name == "Türkçe"


def test_ui_strings():
    assert tr("settings", Language.TURKISH) == "Ayarlar"
    assert tr("missing-key", Language.TURKISH) == "missing-key"


class FakeEngine:
    def __init__(self):
        self.spoken = []
        self.props = {}

    def setProperty(self, name, value):
        self.props[name] = value

    def getProperty(self, name):
        return []

    def say(self, text):
        self.spoken.append(text)

    def runAndWait(self):
        pass


def test_speech_announcer_uses_given_language():
    engine = FakeEngine()
    announcer = SpeechAnnouncer(engine=engine)

    text = announcer.announce("50-tl", Language.TURKISH)
    announcer.shutdown()
    announcer._thread.join(timeout=5)

    assert text == "50 Türk Lirası"
    assert engine.spoken == ["50 Türk Lirası"]


def test_settings_persist_language(tmp_path):
    path = str(tmp_path / "settings.ini")
    settings = AppSettings(QSettings(path, QSettings.IniFormat))
    assert settings.language == Language.ENGLISH

    settings.language = Language.TURKISH

    reloaded = AppSettings(QSettings(path, QSettings.IniFormat))
    assert reloaded.language == Language.TURKISH


def test_rank_candidates_orders_by_confidence():
    probs = np.array([0.05, 0.6, 0.1, 0.05, 0.15, 0.05])
    ranked = rank_candidates(probs, top_k=3)

    assert [label for label, _ in ranked] == ["10-tl", "100-tl", "20-tl"]
    assert ranked[0][1] == pytest.approx(0.6)


def test_rank_candidates_checks_length():
    with pytest.raises(ValueError):
        rank_candidates([0.5, 0.5])
