from __future__ import annotations

"""
Replay statements through the full capture and verification loop offline.

Each non-empty line of the input file is fed to a scripted recognizer as one
final result; the resulting sessions are printed as JSON, newest first.
"""

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from livecheck.asr.mock import ScriptedRecognizerBackend
from livecheck.internal_core.config import load_config
from livecheck.internal_core.controller import SessionController, build_verifier


def _read_statements(path: Path) -> list[str]:
    lines = path.read_text(encoding="utf-8").splitlines()
    return [line.strip() for line in lines if line.strip()]


async def replay(statements: list[str], *, language: str, verifier_name: str, confidence: float) -> list[dict[str, Any]]:
    cfg = load_config().with_overrides(
        LIVECHECK_LANGUAGE=language,
        LIVECHECK_VERIFIER=verifier_name,
        LIVECHECK_RECOGNIZER="scripted",
        LIVECHECK_VERIFY_ENABLED=True,
    )
    backends: list[ScriptedRecognizerBackend] = []

    def factory() -> ScriptedRecognizerBackend:
        backend = ScriptedRecognizerBackend()
        backends.append(backend)
        return backend

    controller = SessionController(cfg, backend_factory=factory, verifier=build_verifier(cfg))
    controller.mount()
    await asyncio.sleep(0)
    # Wait past the close delay so each statement becomes its own utterance.
    gap = cfg.close_delay_sec() + 0.05
    for statement in statements:
        backends[-1].emit_result((statement, True, confidence))
        await asyncio.sleep(gap)
    controller.unmount()
    await controller.pipeline.drain()
    return [session.model_dump(mode="json") for session in controller.registry.list_sessions()]


def main() -> None:
    parser = argparse.ArgumentParser(description="Replay statements through the verification loop.")
    parser.add_argument("input", type=Path, help="Text file with one statement per line.")
    parser.add_argument("--language", default="en-US")
    parser.add_argument("--verifier", default="mock", choices=["mock", "gemini"])
    parser.add_argument("--confidence", type=float, default=0.9)
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())
    statements = _read_statements(args.input)
    sessions = asyncio.run(
        replay(statements, language=args.language, verifier_name=args.verifier, confidence=args.confidence)
    )
    print(json.dumps(sessions, ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
