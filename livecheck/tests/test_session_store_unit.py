import pytest

from livecheck.internal_core.contracts import Citation
from livecheck.internal_core.session_store import SessionRegistry


class FrozenClock:
    def __init__(self, value: float) -> None:
        self.value = value

    def __call__(self) -> float:
        return self.value


def test_ids_strictly_increase_even_within_same_millisecond() -> None:
    registry = SessionRegistry(clock=FrozenClock(1700000000.0))
    first = registry.create_pending("one", "en-US")
    second = registry.create_pending("two", "en-US")
    third = registry.create_pending("three", "en-US")

    assert first == 1700000000000
    assert first < second < third


def test_list_is_newest_first() -> None:
    registry = SessionRegistry()
    older = registry.create_pending("older claim", "en-US")
    newer = registry.create_pending("newer claim", "fr-FR")

    sessions = registry.list_sessions()
    assert [s.id for s in sessions] == [newer, older]
    assert sessions[0].language == "fr-FR"
    assert sessions[0].state == "pending"
    assert sessions[0].verdict is None


def test_complete_sets_verdict_and_citations() -> None:
    registry = SessionRegistry()
    session_id = registry.create_pending("The sky is blue", "en-US")

    assert registry.complete(
        session_id,
        "True",
        "Rayleigh scattering.",
        [Citation(url="https://example.org/sky", title="Sky")],
    )
    session = registry.get(session_id)
    assert session.state == "completed"
    assert session.verdict == "True"
    assert session.explanation == "Rayleigh scattering."
    assert session.citations[0].url == "https://example.org/sky"
    assert registry.pending_count() == 0


def test_terminal_state_is_sticky() -> None:
    registry = SessionRegistry()
    session_id = registry.create_pending("claim", "en-US")

    assert registry.fail(session_id, "Failed to analyze transcript.")
    assert not registry.complete(session_id, "True", "late answer")
    assert not registry.fail(session_id, "second failure")

    session = registry.get(session_id)
    assert session.state == "failed"
    assert session.failure_reason == "Failed to analyze transcript."
    assert session.verdict is None


def test_resolving_unknown_session_is_noop() -> None:
    registry = SessionRegistry()
    registry.create_pending("claim", "en-US")

    assert not registry.complete(123, "False", "nope")
    assert not registry.fail(456, "nope")
    assert registry.pending_count() == 1
    with pytest.raises(KeyError):
        registry.get(123)


def test_clear_keeps_ids_increasing() -> None:
    registry = SessionRegistry(clock=FrozenClock(1.0))
    before = registry.create_pending("a", "en-US")
    registry.create_pending("b", "en-US")

    assert registry.clear() == 2
    assert registry.list_sessions() == []
    # A request resolving after the clear finds nothing to update.
    assert not registry.complete(before, "True", "late")

    after = registry.create_pending("c", "en-US")
    assert after > before
