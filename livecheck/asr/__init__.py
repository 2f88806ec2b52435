"""
Recognizer boundary for livecheck.

Design intent:
- Centralize recognizer backends behind one typed event stream.
- Keep utterance segmentation independent from any concrete backend.
"""

from .adapter import RecognizerAdapter
from .base import RecognizerBackend, RecognizerError, RecognizerUnavailableError
from .bridge import BridgeRecognizerBackend, RecognizerBridge
from .events import (
    Ended,
    RecognitionError,
    Result,
    ResultSegment,
    SpeechEnded,
    SpeechStarted,
    Started,
    is_transient_error,
    parse_raw_event,
)
from .mock import ScriptedRecognizerBackend
from .segmenter import UtteranceSegmenter, build_live_transcript

__all__ = [
    "BridgeRecognizerBackend",
    "Ended",
    "RecognitionError",
    "RecognizerAdapter",
    "RecognizerBackend",
    "RecognizerBridge",
    "RecognizerError",
    "RecognizerUnavailableError",
    "Result",
    "ResultSegment",
    "ScriptedRecognizerBackend",
    "SpeechEnded",
    "SpeechStarted",
    "Started",
    "UtteranceSegmenter",
    "build_live_transcript",
    "is_transient_error",
    "parse_raw_event",
]
