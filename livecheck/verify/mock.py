from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Sequence

from .base import RawCitation, Verifier, VerifierError, VerifierResponse


class MockVerifier(Verifier):
    """Canned verifier for offline runs and tests.

    Responses are looked up by a substring of the prompt; unmatched prompts get
    `default_text`. A response of `None` raises `VerifierError`.
    """

    def __init__(
        self,
        responses: Optional[Dict[str, Optional[str]]] = None,
        *,
        default_text: str = "Uncertain: (mock) no verification backend configured.",
        citations: Sequence[RawCitation] = (),
        delays: Optional[Dict[str, float]] = None,
    ) -> None:
        self._responses = dict(responses or {})
        self._default_text = default_text
        self._citations = list(citations)
        self._delays = dict(delays or {})
        self.prompts: List[str] = []

    async def verify(self, prompt: str, *, grounded_search: bool = True) -> VerifierResponse:
        self.prompts.append(prompt)
        key = next((k for k in self._responses if k in prompt), None)
        delay = next((v for k, v in self._delays.items() if k in prompt), 0.0)
        if delay:
            await asyncio.sleep(delay)
        if key is None:
            return VerifierResponse(text=self._default_text, citations=list(self._citations))
        text = self._responses[key]
        if text is None:
            raise VerifierError("mock_failure", f"Injected failure for {key!r}", self.name())
        return VerifierResponse(text=text, citations=list(self._citations))

    def name(self) -> str:
        return "mock"
