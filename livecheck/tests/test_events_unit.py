import pytest

from livecheck.asr.base import RecognizerError
from livecheck.asr.events import (
    Ended,
    RecognitionError,
    Result,
    SpeechEnded,
    SpeechStarted,
    Started,
    is_transient_error,
    parse_raw_event,
)


def test_lifecycle_events_map_to_typed_events() -> None:
    assert isinstance(parse_raw_event({"type": "start"}), Started)
    assert isinstance(parse_raw_event({"type": "end"}), Ended)
    assert isinstance(parse_raw_event({"type": "speechstart"}), SpeechStarted)
    assert isinstance(parse_raw_event({"type": "speechend"}), SpeechEnded)


def test_error_event_classifies_transient_codes() -> None:
    no_speech = parse_raw_event({"type": "error", "error": "no-speech"})
    denied = parse_raw_event({"type": "error", "error": "not-allowed"})

    assert isinstance(no_speech, RecognitionError)
    assert no_speech.transient
    assert denied.code == "not-allowed"
    assert not denied.transient
    assert is_transient_error(" Aborted ")


def test_result_reads_first_alternative_only() -> None:
    event = parse_raw_event(
        {
            "type": "result",
            "results": [
                {
                    "isFinal": True,
                    "alternatives": [
                        {"transcript": "water boils", "confidence": 0.91},
                        {"transcript": "water bowls", "confidence": 0.40},
                    ],
                },
                {"isFinal": False, "alternatives": [{"transcript": " at"}]},
            ],
        }
    )

    assert isinstance(event, Result)
    assert [s.text for s in event.segments] == ["water boils", " at"]
    assert event.segments[0].confidence == pytest.approx(0.91)
    assert event.segments[1].confidence == 0.0
    assert not event.last_is_final


def test_unknown_event_type_is_rejected() -> None:
    with pytest.raises(RecognizerError) as exc_info:
        parse_raw_event({"type": "soundstart"}, backend_name="bridge")
    assert exc_info.value.code == "invalid-event"
    assert exc_info.value.backend_name == "bridge"


def test_result_without_segments_is_rejected() -> None:
    with pytest.raises(RecognizerError):
        parse_raw_event({"type": "result", "results": []})
    with pytest.raises(RecognizerError):
        parse_raw_event({"type": "result"})


def test_out_of_range_confidence_is_rejected() -> None:
    with pytest.raises(RecognizerError):
        parse_raw_event(
            {"type": "result", "results": [{"isFinal": True, "alternatives": [{"transcript": "x", "confidence": 1.7}]}]}
        )
