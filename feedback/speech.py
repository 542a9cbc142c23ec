"""Spoken announcement of confirmed denominations."""

import logging
import queue
import threading

import pyttsx3

from feedback.localization import Language, VOICE_LOCALES, denomination_text

logger = logging.getLogger(__name__)

SPEECH_RATE = 150  # Words per minute


class SpeechAnnouncer:
    """
    Speaks denomination text on a background thread.

    pyttsx3's runAndWait blocks, so utterances are queued and spoken one
    after another by a single daemon thread in the order they were announced.
    """

    def __init__(self, engine=None, rate: int = SPEECH_RATE):
        self._engine = engine
        self.rate = rate
        self._queue: "queue.Queue" = queue.Queue()
        self._thread = None
        self._lock = threading.Lock()

    def announce(self, label: str, language: Language) -> str:
        """
        Queue the spoken text for label in the given language.

        Returns:
            The text that will be spoken
        """
        text = denomination_text(label, language)
        self._ensure_thread()
        self._queue.put((text, language))
        return text

    def _ensure_thread(self):
        with self._lock:
            if self._thread is None or not self._thread.is_alive():
                self._thread = threading.Thread(target=self._run, daemon=True)
                self._thread.start()

    def _run(self):
        if self._engine is None:
            self._engine = pyttsx3.init()
            self._engine.setProperty("rate", self.rate)
        while True:
            item = self._queue.get()
            if item is None:
                break
            text, language = item
            try:
                self._select_voice(language)
                self._engine.say(text)
                self._engine.runAndWait()
            except Exception:
                logger.warning("Speech failed for %r", text, exc_info=True)

    def _select_voice(self, language: Language):
        locale = VOICE_LOCALES[language]
        code = locale.split("-")[0].lower()
        for voice in self._engine.getProperty("voices") or []:
            langs = [str(lang).lower() for lang in (getattr(voice, "languages", None) or [])]
            if any(code in lang for lang in langs) or code in str(voice.id).lower():
                self._engine.setProperty("voice", voice.id)
                return

    def shutdown(self):
        """Stop the speech thread after pending utterances."""
        self._queue.put(None)
