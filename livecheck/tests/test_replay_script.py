import asyncio

from livecheck.scripts.replay_utterances import _read_statements, replay


def test_replay_produces_one_session_per_statement(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("LIVECHECK_CLOSE_DELAY_MS", "20")
    monkeypatch.delenv("LIVECHECK_CONFIDENCE_THRESHOLD", raising=False)
    source = tmp_path / "statements.txt"
    source.write_text("The Earth orbits the Sun.\n\n  Cats are reptiles.  \n", encoding="utf-8")

    statements = _read_statements(source)
    assert statements == ["The Earth orbits the Sun.", "Cats are reptiles."]

    sessions = asyncio.run(replay(statements, language="en-US", verifier_name="mock", confidence=0.9))

    assert [s["source_text"] for s in sessions] == ["Cats are reptiles.", "The Earth orbits the Sun."]
    assert all(s["state"] == "completed" for s in sessions)
    assert all(s["verdict"] == "Uncertain" for s in sessions)
    assert sessions[0]["id"] > sessions[1]["id"]
