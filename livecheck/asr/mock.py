from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import RawEventSink, RecognizerBackend, RecognizerUnavailableError


class ScriptedRecognizerBackend(RecognizerBackend):
    """In-process backend that replays raw events on demand.

    Mirrors Web Speech lifecycle: `start()` reports a start event and `stop()`
    reports an end event.
    """

    def __init__(self, *, available: bool = True, emit_lifecycle: bool = True) -> None:
        self._available = available
        self._emit_lifecycle = emit_lifecycle
        self._sink: Optional[RawEventSink] = None
        self.language: Optional[str] = None
        self.commands: List[str] = []

    def configure(
        self,
        language: str,
        sink: RawEventSink,
        *,
        continuous: bool = True,
        interim_results: bool = True,
    ) -> None:
        self.language = language
        self._sink = sink
        self.commands.append(f"configure:{language}")

    def start(self) -> None:
        if not self._available:
            raise RecognizerUnavailableError("Scripted recognizer disabled.", self.name())
        self.commands.append("start")
        if self._emit_lifecycle:
            self.emit({"type": "start"})

    def stop(self) -> None:
        self.commands.append("stop")
        if self._emit_lifecycle:
            self.emit({"type": "end"})

    def emit(self, payload: Dict[str, Any]) -> None:
        if self._sink is not None:
            self._sink(payload)

    def emit_result(self, *segments: tuple[str, bool, float]) -> None:
        self.emit(
            {
                "type": "result",
                "results": [
                    {"isFinal": is_final, "alternatives": [{"transcript": text, "confidence": confidence}]}
                    for text, is_final, confidence in segments
                ],
            }
        )

    def name(self) -> str:
        return "scripted"
