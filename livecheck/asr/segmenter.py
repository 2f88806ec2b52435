from __future__ import annotations

"""
Utterance segmentation over a live recognizer event stream.

Design intent:
- Treat finality of the last segment in a result burst as a hint, not a boundary.
- Close an utterance only after a silence debounce with no intervening result.
- Own every timer handle explicitly; arming always cancels the previous handle.
"""

import logging
from typing import Any, Callable, Literal, Optional, Protocol

from .events import Result, SpeechEnded, SpeechStarted

logger = logging.getLogger(__name__)

SegmenterState = Literal["idle", "accumulating", "pending_close"]


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TimerLoop(Protocol):
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


def build_live_transcript(event: Result, confidence_threshold: float) -> str:
    """Accepted final segments followed by interim segments, in batch order."""
    finals = []
    interims = []
    for segment in event.segments:
        if segment.is_final:
            if segment.confidence > confidence_threshold:
                finals.append(segment.text)
        else:
            interims.append(segment.text)
    return "".join(finals) + "".join(interims)


class UtteranceSegmenter:
    def __init__(
        self,
        loop: TimerLoop,
        *,
        confidence_threshold: float,
        close_delay_sec: float,
        fallback_delay_sec: float,
        on_transcript: Callable[[str], None],
        on_utterance: Callable[[str], None],
        on_restart_request: Callable[[], None],
    ) -> None:
        self._loop = loop
        self._confidence_threshold = confidence_threshold
        self._close_delay_sec = close_delay_sec
        self._fallback_delay_sec = fallback_delay_sec
        self._on_transcript = on_transcript
        self._on_utterance = on_utterance
        self._on_restart_request = on_restart_request

        self._state: SegmenterState = "idle"
        self._live_transcript = ""
        self._close_timer: Optional[TimerHandle] = None
        self._fallback_timer: Optional[TimerHandle] = None

    @property
    def state(self) -> SegmenterState:
        return self._state

    @property
    def live_transcript(self) -> str:
        return self._live_transcript

    @property
    def close_armed(self) -> bool:
        return self._close_timer is not None

    @property
    def fallback_armed(self) -> bool:
        return self._fallback_timer is not None

    def handle(self, event: Any) -> None:
        if isinstance(event, Result):
            self._on_result(event)
        elif isinstance(event, SpeechStarted):
            self._cancel_close_timer()
            self._cancel_fallback_timer()
            self._state = "accumulating"
        elif isinstance(event, SpeechEnded):
            if self._close_timer is None:
                self._arm_fallback_timer()

    def reset(self) -> None:
        """Drop any unclosed text and timers without emitting an utterance."""
        self._cancel_close_timer()
        self._cancel_fallback_timer()
        self._live_transcript = ""
        self._state = "idle"

    def _on_result(self, event: Result) -> None:
        self._cancel_close_timer()
        # A result means the audio was recognizable; the no-result fallback no longer applies.
        self._cancel_fallback_timer()

        self._live_transcript = build_live_transcript(event, self._confidence_threshold)
        if event.last_is_final:
            self._state = "pending_close"
            self._close_timer = self._loop.call_later(self._close_delay_sec, self._on_close_timer)
        else:
            self._state = "accumulating"
        self._on_transcript(self._live_transcript)

    def _on_close_timer(self) -> None:
        self._close_timer = None
        text = self._live_transcript.strip()
        self._live_transcript = ""
        self._state = "idle"
        self._on_transcript("")
        if text:
            self._on_utterance(text)
        else:
            logger.debug("utterance_dropped reason=empty_after_trim")
        # Restarting the recognition pass keeps its result index from growing across utterances.
        self._on_restart_request()

    def _on_fallback_timer(self) -> None:
        self._fallback_timer = None
        logger.debug("speech_end_fallback_fired transcript_chars=%s", len(self._live_transcript))
        self._on_restart_request()

    def _arm_fallback_timer(self) -> None:
        self._cancel_fallback_timer()
        self._fallback_timer = self._loop.call_later(self._fallback_delay_sec, self._on_fallback_timer)

    def _cancel_close_timer(self) -> None:
        if self._close_timer is not None:
            self._close_timer.cancel()
            self._close_timer = None

    def _cancel_fallback_timer(self) -> None:
        if self._fallback_timer is not None:
            self._fallback_timer.cancel()
            self._fallback_timer = None
