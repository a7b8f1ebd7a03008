"""
Voice Selection

Chooses a synthesis voice for the page language from the engine's voice
list.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


FALLBACK_LOCALE = "en-US"


@dataclass(frozen=True)
class Voice:
    """A voice as reported by the speech engine."""
    name: str
    lang: str
    default: bool = False
    gender: Optional[str] = None
    voice_uri: Optional[str] = None

    @property
    def is_female(self) -> bool:
        if self.gender and self.gender.lower() == "female":
            return True
        return "female" in self.name.lower()

    def matches_language(self, lang_code: str) -> bool:
        return self.lang.lower().startswith(lang_code.lower())


def language_code(
    page_lang: Optional[str] = None,
    browser_locale: Optional[str] = None,
    fallback: str = FALLBACK_LOCALE,
) -> str:
    """
    Primary two-letter language subtag of the first available locale.

    The page's declared language wins over the browser locale.
    """
    locale = (page_lang or "").strip() or (browser_locale or "").strip() or fallback
    return locale.replace("_", "-").split("-", 1)[0][:2].lower()


def select_voice(voices: Sequence[Voice], lang_code: str) -> Optional[Voice]:
    """
    Pick a voice for `lang_code`.

    Preference order:
    1. female voice in the language
    2. any voice in the language
    3. the engine's default voice
    4. the first voice listed

    Returns None only for an empty list.
    """
    if not voices:
        return None

    in_language = [v for v in voices if v.matches_language(lang_code)]

    for voice in in_language:
        if voice.is_female:
            return voice

    if in_language:
        return in_language[0]

    for voice in voices:
        if voice.default:
            return voice

    return voices[0]
