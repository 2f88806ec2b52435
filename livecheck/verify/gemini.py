from __future__ import annotations

"""
Gemini `generateContent` verifier with Google Search grounding.

Design intent:
- One HTTP request per prompt; no retries (a failed request fails one session only).
- Surface every transport or schema problem as `VerifierError`, never as a fake success.
"""

import logging
from typing import Any, Optional

import httpx

from .base import RawCitation, Verifier, VerifierError, VerifierResponse

logger = logging.getLogger(__name__)


class GeminiVerifier(Verifier):
    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = "gemini-2.5-flash",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout_sec: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout_sec = timeout_sec
        self._transport = transport

    def name(self) -> str:
        return "gemini"

    def _endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def verify(self, prompt: str, *, grounded_search: bool = True) -> VerifierResponse:
        if not self._api_key:
            raise VerifierError("missing_api_key", "GEMINI_API_KEY is not set.", self.name())

        headers = {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }
        data: dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        }
        if grounded_search:
            data["tools"] = [{"google_search": {}}]

        try:
            async with httpx.AsyncClient(timeout=self._timeout_sec, transport=self._transport) as client:
                response = await client.post(self._endpoint(), headers=headers, json=data)
        except httpx.HTTPError as exc:
            raise VerifierError("transport_error", f"Gemini request failed: {exc}", self.name()) from exc

        if response.status_code != 200:
            logger.warning(
                "gemini_request_rejected status=%s body=%s",
                response.status_code,
                response.text[:200],
            )
            raise VerifierError(
                "http_status",
                f"Gemini returned HTTP {response.status_code}",
                self.name(),
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise VerifierError("invalid_json", "Gemini response is not valid JSON.", self.name()) from exc
        return parse_generate_content(payload, verifier_name=self.name())


def parse_generate_content(payload: Any, *, verifier_name: str = "gemini") -> VerifierResponse:
    if not isinstance(payload, dict):
        raise VerifierError("invalid_schema", "Gemini response must be a JSON object.", verifier_name)
    candidates = payload.get("candidates")
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        raise VerifierError("invalid_schema", "Gemini response has no candidates.", verifier_name)
    candidate = candidates[0]

    content = candidate.get("content") or {}
    parts = content.get("parts") if isinstance(content, dict) else None
    texts = [
        str(part.get("text"))
        for part in (parts or [])
        if isinstance(part, dict) and part.get("text")
    ]
    text = "".join(texts)
    if not text.strip():
        raise VerifierError("empty_response", "Gemini response contains no text.", verifier_name)

    citations: list[RawCitation] = []
    grounding = candidate.get("groundingMetadata") or {}
    chunks = grounding.get("groundingChunks") if isinstance(grounding, dict) else None
    for chunk in chunks or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        if not isinstance(web, dict):
            continue
        citations.append(RawCitation(uri=web.get("uri"), title=web.get("title")))
    return VerifierResponse(text=text, citations=citations)
