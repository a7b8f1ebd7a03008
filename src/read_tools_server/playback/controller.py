"""
Speech Session Controller

Owns the page-wide speech session and performs the effects computed by
`machine.transition` against the speech engine, the triggers and the
notifier.

The engine is anything implementing `SpeechEngine`. It reports utterance
start/end/error and voice-list changes back through `on_start`, `on_end`,
`on_error` and `on_voices_changed`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from bs4 import BeautifulSoup, Tag

from .errors import EmptyContentError, EngineError, EngineUnsupported, PlaybackError
from .extraction import Document, FrontendExtractor
from .fetcher import TranscriptFetcher
from .machine import (
    IDLE_STATE,
    Activate,
    Affordance,
    CancelEngine,
    Effect,
    Event,
    FetchFailed,
    FetchSucceeded,
    PauseEngine,
    PlaybackEnded,
    PlaybackErrored,
    PlaybackStarted,
    RestoreTrigger,
    ResumeEngine,
    SessionState,
    SetAffordance,
    Speak,
    StartFetch,
    SurfaceError,
    Unload,
    VoicesChanged,
    transition,
)
from .voices import Voice, language_code, select_voice
from ..api.models import ClientSettings
from ..content.resolver import FRONTEND_EXTRACTION_SENTINEL

logger = logging.getLogger("readtools.playback")


TRIGGER_CLASS = "read-aloud-trigger"

Notifier = Callable[["Trigger", PlaybackError], None]
PageProvider = Callable[[], Document]


# ---------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------

class Trigger:
    """
    A control that starts and steers playback of one item.

    Identity matters: the session compares triggers with `is`.
    """

    def __init__(self, item_id: int, label: str) -> None:
        self.item_id = item_id
        self.original_label = label
        self.label = label
        self.affordance = Affordance.IDLE
        self.error: Optional[str] = None

    @property
    def busy(self) -> bool:
        return self.affordance is Affordance.BUSY

    def set_affordance(self, affordance: Affordance, label: Optional[str] = None) -> None:
        self.affordance = affordance
        self.label = label if label is not None else self.original_label
        if affordance is Affordance.BUSY:
            self.error = None

    def reset(self) -> None:
        """Restore the exact label and icon supplied at render time."""
        self.affordance = Affordance.IDLE
        self.label = self.original_label

    @classmethod
    def from_element(cls, element: Tag) -> "Trigger":
        return cls(int(element["data-post-id"]), element.get_text(" ", strip=True))

    def __repr__(self) -> str:
        return f"Trigger(item_id={self.item_id}, affordance={self.affordance.value})"


def find_triggers(document: Document) -> List[Trigger]:
    """Build a trigger for every read-aloud anchor in the rendered page."""
    soup = document if isinstance(document, BeautifulSoup) else BeautifulSoup(document, "html.parser")
    triggers = []
    for element in soup.select(f"a.{TRIGGER_CLASS}[data-post-id]"):
        try:
            triggers.append(Trigger.from_element(element))
        except ValueError:
            logger.warning("Ignoring trigger with invalid item id: %r", element.get("data-post-id"))
    return triggers


# ---------------------------------------------------------------------
# Engine protocol
# ---------------------------------------------------------------------

@dataclass(eq=False)
class Utterance:
    text: str
    lang: str
    voice: Optional[Voice] = None


class SpeechEngine(Protocol):
    speaking: bool
    pending: bool

    def get_voices(self) -> Sequence[Voice]: ...

    def speak(self, utterance: Utterance) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def cancel(self) -> None: ...


# ---------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------

class SpeechSessionController:
    """
    One controller per page view; it holds the only speech session.

    Parameters
    ----------
    engine : SpeechEngine | None
        None when the client has no speech synthesis.
    fetcher : TranscriptFetcher
        Client for the content endpoint.
    config : ClientSettings
        Labels and endpoint settings injected by the page.
    page : callable, optional
        Returns the rendered page, used by the extraction fallback.
    notifier : callable, optional
        Receives `(trigger, error)` for every surfaced error.
    """

    def __init__(
        self,
        engine: Optional[SpeechEngine],
        fetcher: TranscriptFetcher,
        config: ClientSettings,
        page: Optional[PageProvider] = None,
        extractor: Optional[FrontendExtractor] = None,
        notifier: Optional[Notifier] = None,
        page_lang: Optional[str] = None,
        browser_locale: Optional[str] = None,
    ) -> None:
        self.engine = engine
        self.fetcher = fetcher
        self.config = config
        self.page = page
        self.extractor = extractor or FrontendExtractor(config.content_selector)
        self.notifier = notifier
        self.lang_code = language_code(page_lang, browser_locale)
        self.state: SessionState = IDLE_STATE

    # ------------------------------------------------------------------
    # Session access
    # ------------------------------------------------------------------

    @property
    def active(self) -> Optional[Trigger]:
        return self.state.active

    @property
    def utterance(self) -> Optional[Utterance]:
        return self.state.utterance

    @property
    def paused(self) -> bool:
        return self.state.paused

    # ------------------------------------------------------------------
    # Trigger and page events
    # ------------------------------------------------------------------

    async def activate(self, trigger: Trigger) -> None:
        """
        Handle a click on `trigger`.

        Starting playback awaits the transcript fetch. A response that
        arrives after another trigger took over is dropped.
        """
        if self.engine is None:
            trigger.reset()
            self._surface(trigger, EngineUnsupported(self.config.unsupported_text))
            return

        effects = self.dispatch(Activate(trigger))
        if any(isinstance(effect, StartFetch) for effect in effects):
            await self._load(trigger)

    def unload(self) -> None:
        self.dispatch(Unload())

    # ------------------------------------------------------------------
    # Engine callbacks
    # ------------------------------------------------------------------

    def on_voices_changed(self) -> None:
        self.dispatch(VoicesChanged())

    def on_start(self, utterance: Utterance) -> None:
        self.dispatch(PlaybackStarted(utterance))

    def on_end(self, utterance: Utterance) -> None:
        self.dispatch(PlaybackEnded(utterance))

    def on_error(self, utterance: Utterance, message: Optional[str] = None) -> None:
        logger.error("Speech engine error: %s", message or "unknown")
        self.dispatch(PlaybackErrored(utterance, EngineError()))

    # ------------------------------------------------------------------
    # State machine plumbing
    # ------------------------------------------------------------------

    def dispatch(self, event: Event) -> List[Effect]:
        """Advance the session and run the resulting effects in order."""
        self.state, effects = transition(self.state, event)
        for effect in effects:
            self._apply(effect)
        return effects

    def _apply(self, effect: Effect) -> None:
        engine = self.engine

        if isinstance(effect, CancelEngine):
            if engine is not None:
                engine.cancel()
        elif isinstance(effect, PauseEngine):
            engine.pause()
        elif isinstance(effect, ResumeEngine):
            engine.resume()
        elif isinstance(effect, SetAffordance):
            effect.trigger.set_affordance(effect.affordance, self._label_for(effect.affordance))
        elif isinstance(effect, RestoreTrigger):
            effect.trigger.reset()
        elif isinstance(effect, Speak):
            self._speak(effect.utterance)
        elif isinstance(effect, SurfaceError):
            self._surface(effect.trigger, effect.error)
        # StartFetch is awaited by activate()

    def _label_for(self, affordance: Affordance) -> Optional[str]:
        if affordance is Affordance.BUSY:
            return self.config.reading_text
        if affordance is Affordance.PAUSE:
            return self.config.pause_text
        if affordance is Affordance.RESUME:
            return self.config.resume_text
        return None

    # ------------------------------------------------------------------
    # Fetch and playback
    # ------------------------------------------------------------------

    async def _load(self, trigger: Trigger) -> None:
        try:
            content = await self.fetcher.fetch(trigger.item_id)
            if self.active is not trigger:
                logger.debug("Dropping superseded transcript for item %d", trigger.item_id)
                return
            text = self._playable_text(content)
            voices_ready = bool(self.engine.get_voices())
        except PlaybackError as exc:
            self.dispatch(FetchFailed(trigger, exc))
            return
        except Exception:
            # The trigger must never stay busy.
            logger.exception("Could not prepare playback for item %d", trigger.item_id)
            self.dispatch(FetchFailed(trigger, EngineError()))
            return

        utterance = Utterance(text=text, lang=self.lang_code)
        self.dispatch(FetchSucceeded(trigger, utterance, voices_ready))

    def _playable_text(self, content: str) -> str:
        if content.startswith(FRONTEND_EXTRACTION_SENTINEL):
            if self.page is None:
                raise EmptyContentError()
            try:
                content = self.extractor.extract(self.page())
            except Exception as exc:
                logger.exception("Frontend extraction failed")
                raise EmptyContentError() from exc

        text = content.strip()
        if not text:
            raise EmptyContentError()
        return text

    def _speak(self, utterance: Utterance) -> None:
        engine = self.engine

        try:
            utterance.voice = select_voice(engine.get_voices(), self.lang_code)
            if engine.speaking or engine.pending:
                engine.cancel()
            engine.speak(utterance)
        except Exception:
            logger.exception("Speech engine rejected the utterance")
            self.dispatch(PlaybackErrored(utterance, EngineError()))

    def _surface(self, trigger: Trigger, error: PlaybackError) -> None:
        logger.warning("Playback error for item %d: %s", trigger.item_id, error.message)
        trigger.error = error.message
        if self.notifier is not None:
            self.notifier(trigger, error)
