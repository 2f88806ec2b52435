from __future__ import annotations

"""
Asynchronous verification of closed utterances.

Design intent:
- Exactly one request per utterance, keyed by its session id; no batching or dedupe.
- Fail open on parse misses: keep the full response as an Uncertain explanation.
- Contain every verifier failure inside its own session.
"""

import asyncio
import logging
import re
import time
from typing import Callable, Optional, Sequence, Set

from livecheck.internal_core.contracts import Citation, VerificationOutcome
from livecheck.internal_core.locales import VerdictKeywords, get_locale
from livecheck.internal_core.session_store import SessionRegistry

from .base import RawCitation, Verifier

logger = logging.getLogger(__name__)

# Fullwidth colon accepted too: ja/zh answers often use it.
_SEPARATOR = "[:：]"


def parse_verdict(text: str, keywords: VerdictKeywords) -> VerificationOutcome:
    by_keyword = {
        keywords.true.lower(): "True",
        keywords.false.lower(): "False",
        keywords.uncertain.lower(): "Uncertain",
    }
    alternatives = "|".join(
        re.escape(item) for item in (keywords.true, keywords.false, keywords.uncertain)
    )
    match = re.match(rf"^({alternatives}){_SEPARATOR}", text, flags=re.IGNORECASE)
    if match is None:
        return VerificationOutcome(verdict="Uncertain", explanation=text)
    verdict = by_keyword.get(match.group(1).lower(), "Uncertain")
    return VerificationOutcome(verdict=verdict, explanation=text[match.end():].strip())


def extract_citations(raw: Sequence[RawCitation]) -> list[Citation]:
    citations: list[Citation] = []
    for item in raw:
        url = (item.uri or "").strip()
        title = (item.title or "").strip()
        if not url or not title:
            continue
        citations.append(Citation(url=url, title=title))
    return citations


class VerificationPipeline:
    def __init__(
        self,
        registry: SessionRegistry,
        verifier: Verifier,
        *,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        on_settled: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._registry = registry
        self._verifier = verifier
        self._loop = loop
        self._on_settled = on_settled
        self._in_flight: Set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)

    def submit(self, session_id: int, text: str, language: str) -> asyncio.Task[None]:
        loop = self._loop or asyncio.get_running_loop()
        task = loop.create_task(self.run(session_id, text, language))
        self._in_flight.add(task)
        task.add_done_callback(self._in_flight.discard)
        return task

    async def run(self, session_id: int, text: str, language: str) -> None:
        locale = get_locale(language)
        prompt = locale.build_prompt(text)
        started = time.monotonic()
        try:
            response = await self._verifier.verify(prompt, grounded_search=True)
            outcome = parse_verdict(response.text, locale.keywords)
            citations = extract_citations(response.citations)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception(
                "verification_failed session_id=%s verifier=%s",
                session_id,
                self._verifier.name(),
            )
            self._registry.fail(session_id, locale.analysis_failed)
            self._settled(session_id)
            return

        self._registry.complete(session_id, outcome.verdict, outcome.explanation, citations)
        logger.info(
            "verification_done session_id=%s verdict=%s citations=%s duration_ms=%s",
            session_id,
            outcome.verdict,
            len(citations),
            int((time.monotonic() - started) * 1000),
        )
        self._settled(session_id)

    def _settled(self, session_id: int) -> None:
        if self._on_settled is None:
            return
        try:
            self._on_settled(session_id)
        except Exception:
            logger.exception("verification_settled_callback_failed session_id=%s", session_id)

    async def drain(self) -> None:
        while self._in_flight:
            await asyncio.gather(*list(self._in_flight), return_exceptions=True)
