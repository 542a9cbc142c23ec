"""Persistent user settings."""

from PyQt5.QtCore import QObject, QSettings, pyqtSignal

from feedback.localization import Language

LANGUAGE_KEY = "AppLanguage"


class AppSettings(QObject):
    """Selected language, stored in QSettings under AppLanguage."""

    languageChanged = pyqtSignal(object)  # Language

    def __init__(self, settings: QSettings = None, parent=None):
        super().__init__(parent)
        self.settings = settings if settings is not None else QSettings("MoneyLens", "App")
        saved = self.settings.value(LANGUAGE_KEY, Language.ENGLISH.value)
        self._language = Language.from_code(saved)

    @property
    def language(self) -> Language:
        return self._language

    @language.setter
    def language(self, value: Language):
        if value == self._language:
            return
        self._language = value
        self.settings.setValue(LANGUAGE_KEY, value.value)
        self.settings.sync()
        self.languageChanged.emit(value)
