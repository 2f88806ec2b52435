from __future__ import annotations

import logging
import time
from threading import RLock
from typing import List, Optional, Sequence

from .contracts import Citation, Verdict, VerificationSession

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Append-only verification history, newest first.

    Sessions move from pending to completed/failed exactly once. Ids are
    millisecond timestamps bumped to stay strictly increasing, so they are
    never reused, not even after `clear()`.
    """

    def __init__(self, clock=time.time):
        self._clock = clock
        self._lock = RLock()
        self._sessions: List[VerificationSession] = []
        self._last_id = 0

    def _next_id(self) -> int:
        candidate = int(self._clock() * 1000)
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return candidate

    def create_pending(self, text: str, language: str) -> int:
        with self._lock:
            session_id = self._next_id()
            session = VerificationSession(
                id=session_id,
                source_text=text,
                language=language,
                created_at=self._clock(),
            )
            self._sessions.insert(0, session)
        logger.info("session_created session_id=%s language=%s chars=%s", session_id, language, len(text))
        return session_id

    def _index_of(self, session_id: int) -> Optional[int]:
        for idx, session in enumerate(self._sessions):
            if session.id == session_id:
                return idx
        return None

    def _resolve(self, session_id: int, **changes: object) -> bool:
        with self._lock:
            idx = self._index_of(session_id)
            if idx is None:
                # History may have been cleared while the request was in flight.
                logger.info("session_resolve_skipped session_id=%s reason=not_found", session_id)
                return False
            current = self._sessions[idx]
            if current.is_terminal:
                logger.warning(
                    "session_resolve_rejected session_id=%s state=%s requested=%s",
                    session_id,
                    current.state,
                    changes.get("state"),
                )
                return False
            self._sessions[idx] = current.model_copy(update=changes)
        return True

    def complete(
        self,
        session_id: int,
        verdict: Verdict,
        explanation: str,
        citations: Sequence[Citation] = (),
    ) -> bool:
        return self._resolve(
            session_id,
            state="completed",
            verdict=verdict,
            explanation=explanation,
            citations=list(citations),
        )

    def fail(self, session_id: int, reason: str) -> bool:
        return self._resolve(session_id, state="failed", failure_reason=reason)

    def get(self, session_id: int) -> VerificationSession:
        with self._lock:
            idx = self._index_of(session_id)
            if idx is None:
                raise KeyError(f"Unknown session_id: {session_id}")
            return self._sessions[idx]

    def list_sessions(self) -> List[VerificationSession]:
        with self._lock:
            return list(self._sessions)

    def pending_count(self) -> int:
        with self._lock:
            return sum(1 for session in self._sessions if session.state == "pending")

    def clear(self) -> int:
        with self._lock:
            removed = len(self._sessions)
            self._sessions = []
        return removed
