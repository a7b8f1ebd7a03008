"""
Speech Session State Machine

Pure transition function for the page-wide playback session. Given the
current state and a named event it returns the next state and the list of
side effects the controller must perform, in order. Nothing here touches a
speech engine, the network or the page, so every transition can be tested
deterministically.

States
------
IDLE      no active trigger
LOADING   transcript fetch in flight for the active trigger
SPEAKING  utterance handed to the engine (or waiting for voices)
PAUSED    engine paused on the active utterance

Invariant: at most one trigger is active. Activating another trigger emits
the cancel and restore effects for the previous one before the new one
starts loading.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, List, Optional, Tuple, Union


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SPEAKING = "speaking"
    PAUSED = "paused"


class Affordance(str, Enum):
    """Visual state of a trigger."""
    IDLE = "idle"        # original icon and label
    BUSY = "busy"        # spinner while loading
    PAUSE = "pause"      # offers to pause
    RESUME = "resume"    # offers to resume


@dataclass(frozen=True)
class SessionState:
    """
    The speech session: active trigger, current utterance, paused flag.

    `awaiting_voices` is set while the utterance waits for the engine to
    publish its voice list.
    """
    phase: Phase = Phase.IDLE
    active: Optional[Any] = None
    utterance: Optional[Any] = None
    paused: bool = False
    awaiting_voices: bool = False


IDLE_STATE = SessionState()


# ---------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class Activate:
    trigger: Any


@dataclass(frozen=True)
class FetchSucceeded:
    trigger: Any
    utterance: Any
    voices_ready: bool = True


@dataclass(frozen=True)
class FetchFailed:
    trigger: Any
    error: Exception


@dataclass(frozen=True)
class VoicesChanged:
    pass


@dataclass(frozen=True)
class PlaybackStarted:
    utterance: Any


@dataclass(frozen=True)
class PlaybackEnded:
    utterance: Any


@dataclass(frozen=True)
class PlaybackErrored:
    utterance: Any
    error: Exception


@dataclass(frozen=True)
class Unload:
    pass


Event = Union[
    Activate,
    FetchSucceeded,
    FetchFailed,
    VoicesChanged,
    PlaybackStarted,
    PlaybackEnded,
    PlaybackErrored,
    Unload,
]


# ---------------------------------------------------------------------
# Effects
# ---------------------------------------------------------------------

@dataclass(frozen=True)
class CancelEngine:
    pass


@dataclass(frozen=True)
class PauseEngine:
    pass


@dataclass(frozen=True)
class ResumeEngine:
    pass


@dataclass(frozen=True)
class SetAffordance:
    trigger: Any
    affordance: Affordance


@dataclass(frozen=True)
class RestoreTrigger:
    trigger: Any


@dataclass(frozen=True)
class StartFetch:
    trigger: Any


@dataclass(frozen=True)
class Speak:
    trigger: Any
    utterance: Any


@dataclass(frozen=True)
class SurfaceError:
    trigger: Any
    error: Exception


Effect = Union[
    CancelEngine,
    PauseEngine,
    ResumeEngine,
    SetAffordance,
    RestoreTrigger,
    StartFetch,
    Speak,
    SurfaceError,
]

Transition = Tuple[SessionState, List[Effect]]


# ---------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------

def _start_loading(trigger: Any) -> Transition:
    return (
        SessionState(phase=Phase.LOADING, active=trigger),
        [SetAffordance(trigger, Affordance.BUSY), StartFetch(trigger)],
    )


def _start_speaking(state: SessionState) -> List[Effect]:
    # Affordance first: if speak fails synchronously, the error path's
    # restore must be the last word on the trigger.
    return [
        SetAffordance(state.active, Affordance.PAUSE),
        Speak(state.active, state.utterance),
    ]


def _on_activate(state: SessionState, trigger: Any) -> Transition:
    if state.active is trigger:
        if state.phase is Phase.SPEAKING and not state.awaiting_voices:
            return (
                replace(state, phase=Phase.PAUSED, paused=True),
                [PauseEngine(), SetAffordance(trigger, Affordance.RESUME)],
            )
        if state.phase is Phase.PAUSED:
            return (
                replace(state, phase=Phase.SPEAKING, paused=False),
                [ResumeEngine(), SetAffordance(trigger, Affordance.PAUSE)],
            )
        # Still loading (or waiting for voices): the click is absorbed.
        return state, []

    effects: List[Effect] = []
    if state.active is not None:
        effects.extend([CancelEngine(), RestoreTrigger(state.active)])

    next_state, start_effects = _start_loading(trigger)
    return next_state, effects + start_effects


def _on_fetch_succeeded(state: SessionState, event: FetchSucceeded) -> Transition:
    if state.phase is not Phase.LOADING or state.active is not event.trigger:
        return state, []

    next_state = replace(
        state,
        phase=Phase.SPEAKING,
        utterance=event.utterance,
        awaiting_voices=not event.voices_ready,
    )
    if next_state.awaiting_voices:
        return next_state, []
    return next_state, _start_speaking(next_state)


def _on_fetch_failed(state: SessionState, event: FetchFailed) -> Transition:
    if state.phase is not Phase.LOADING or state.active is not event.trigger:
        return state, []
    return IDLE_STATE, [RestoreTrigger(event.trigger), SurfaceError(event.trigger, event.error)]


def _on_voices_changed(state: SessionState) -> Transition:
    if state.phase is not Phase.SPEAKING or not state.awaiting_voices:
        return state, []
    next_state = replace(state, awaiting_voices=False)
    return next_state, _start_speaking(next_state)


def _owns(state: SessionState, utterance: Any) -> bool:
    return (
        utterance is not None
        and state.utterance is utterance
        and state.phase in (Phase.SPEAKING, Phase.PAUSED)
    )


def transition(state: SessionState, event: Event) -> Transition:
    """
    Compute the next session state and the effects to perform.

    Events about a trigger or utterance that is no longer current are
    ignored, which is how superseded fetches and cancelled utterances are
    discarded.
    """
    if isinstance(event, Activate):
        return _on_activate(state, event.trigger)

    if isinstance(event, FetchSucceeded):
        return _on_fetch_succeeded(state, event)

    if isinstance(event, FetchFailed):
        return _on_fetch_failed(state, event)

    if isinstance(event, VoicesChanged):
        return _on_voices_changed(state)

    if isinstance(event, PlaybackStarted):
        if _owns(state, event.utterance) and state.phase is Phase.SPEAKING:
            return state, [SetAffordance(state.active, Affordance.PAUSE)]
        return state, []

    if isinstance(event, PlaybackEnded):
        if _owns(state, event.utterance):
            return IDLE_STATE, [RestoreTrigger(state.active)]
        return state, []

    if isinstance(event, PlaybackErrored):
        if _owns(state, event.utterance):
            return IDLE_STATE, [
                RestoreTrigger(state.active),
                SurfaceError(state.active, event.error),
            ]
        return state, []

    if isinstance(event, Unload):
        return state, [CancelEngine()]

    raise TypeError(f"Unknown session event: {event!r}")
