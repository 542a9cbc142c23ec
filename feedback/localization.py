"""Display and speech text for denominations in the supported languages."""

from enum import Enum


class Language(Enum):
    """Supported UI/speech languages (values are locale codes)."""
    ENGLISH = "en"
    TURKISH = "tr"

    @property
    def display_name(self) -> str:
        return _DISPLAY_NAMES[self]

    @classmethod
    def from_code(cls, code, default=None):
        """Parse a locale code, returning default (English) when unknown."""
        for lang in cls:
            if lang.value == code:
                return lang
        return default if default is not None else cls.ENGLISH


_DISPLAY_NAMES = {
    Language.ENGLISH: "English",
    Language.TURKISH: "Türkçe",
}

# Voice identifiers passed to the speech engine
VOICE_LOCALES = {
    Language.ENGLISH: "en-US",
    Language.TURKISH: "tr-TR",
}

STRINGS = {
    "settings": {Language.ENGLISH: "Settings", Language.TURKISH: "Ayarlar"},
    "language": {Language.ENGLISH: "Language", Language.TURKISH: "Dil"},
    "camera": {Language.ENGLISH: "Camera", Language.TURKISH: "Kamera"},
    "start": {Language.ENGLISH: "Start", Language.TURKISH: "Başlat"},
    "pause": {Language.ENGLISH: "Pause", Language.TURKISH: "Duraklat"},
    "resume": {Language.ENGLISH: "Resume", Language.TURKISH: "Devam"},
    "scanning": {Language.ENGLISH: "Scanning...", Language.TURKISH: "Taranıyor..."},
    "hint": {
        Language.ENGLISH: "Point the camera at Turkish Lira bills to detect their value",
        Language.TURKISH: "Değerini tespit etmek için kamerayı Türk Lirası banknotlarına doğrultun",
    },
}


def amount_of(label: str) -> str:
    """'200-tl' -> '200'."""
    return label.split("-")[0]


def denomination_text(label: str, language: Language) -> str:
    """Spoken text for a denomination label."""
    number = amount_of(label)
    if language == Language.TURKISH:
        return f"{number} Türk Lirası"
    return f"{number} Turkish Lira"


def display_text(label: str) -> str:
    """Short on-screen text for a denomination label."""
    if not label:
        return ""
    return f"{amount_of(label)} TL"


def tr(key: str, language: Language) -> str:
    """Look up a UI string, falling back to English and then to the key."""
    entry = STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(language, entry[Language.ENGLISH])
