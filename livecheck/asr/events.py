from __future__ import annotations

"""
Typed recognizer event contracts.

Design intent:
- Normalize Web Speech style payloads into one immutable tagged union.
- Classify error codes once so restart policy never inspects raw strings.
"""

from typing import Annotated, Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .base import RecognizerError

TRANSIENT_ERROR_CODES: frozenset[str] = frozenset({"no-speech", "aborted"})


def is_transient_error(code: str) -> bool:
    return (code or "").strip().lower() in TRANSIENT_ERROR_CODES


class _Event(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class Started(_Event):
    kind: Literal["started"] = "started"


class Ended(_Event):
    kind: Literal["ended"] = "ended"


class RecognitionError(_Event):
    kind: Literal["error"] = "error"
    code: str

    @property
    def transient(self) -> bool:
        return is_transient_error(self.code)


class SpeechStarted(_Event):
    kind: Literal["speech_started"] = "speech_started"


class SpeechEnded(_Event):
    kind: Literal["speech_ended"] = "speech_ended"


class ResultSegment(_Event):
    text: str
    is_final: bool
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class Result(_Event):
    kind: Literal["result"] = "result"
    segments: tuple[ResultSegment, ...] = Field(min_length=1)

    @property
    def last_is_final(self) -> bool:
        return self.segments[-1].is_final


RecognitionEvent = Annotated[
    Union[Started, Ended, RecognitionError, SpeechStarted, SpeechEnded, Result],
    Field(discriminator="kind"),
]

_EVENT_ADAPTER: TypeAdapter[Any] = TypeAdapter(RecognitionEvent)

_RAW_KIND_MAP = {
    "start": "started",
    "end": "ended",
    "error": "error",
    "speechstart": "speech_started",
    "speechend": "speech_ended",
    "result": "result",
}


def _segment_from_raw(item: Any) -> dict[str, Any]:
    if not isinstance(item, Mapping):
        raise ValueError("result entry must be an object")
    # Web Speech results carry alternatives; only the first one is consulted.
    alternatives = item.get("alternatives")
    best = alternatives[0] if isinstance(alternatives, list) and alternatives else item
    if not isinstance(best, Mapping):
        raise ValueError("result alternative must be an object")
    return {
        "text": str(best.get("transcript", best.get("text", "")) or ""),
        "is_final": bool(item.get("isFinal", item.get("is_final", False))),
        "confidence": float(best.get("confidence", 0.0) or 0.0),
    }


def parse_raw_event(payload: Mapping[str, Any], *, backend_name: str = "unknown") -> Any:
    """Convert a raw backend payload into a `RecognitionEvent`."""
    raw_type = str(payload.get("type", "")).strip().lower()
    kind = _RAW_KIND_MAP.get(raw_type)
    if kind is None:
        raise RecognizerError("invalid-event", f"Unknown recognizer event type: {raw_type!r}", backend_name)

    data: dict[str, Any] = {"kind": kind}
    try:
        if kind == "error":
            data["code"] = str(payload.get("error", payload.get("code", "")) or "unknown")
        elif kind == "result":
            results = payload.get("results")
            if not isinstance(results, list):
                raise ValueError("result event requires a 'results' list")
            data["segments"] = [_segment_from_raw(item) for item in results]
        return _EVENT_ADAPTER.validate_python(data)
    except (ValueError, TypeError, ValidationError) as exc:
        raise RecognizerError("invalid-event", f"Malformed {raw_type} event: {exc}", backend_name) from exc
