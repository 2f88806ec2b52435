"""
Verification boundary for livecheck.

Design intent:
- Keep remote reasoning services behind one small async interface.
- Parse free-text verdicts leniently and contain failures per session.
"""

from .base import RawCitation, Verifier, VerifierError, VerifierResponse
from .gemini import GeminiVerifier, parse_generate_content
from .mock import MockVerifier
from .pipeline import VerificationPipeline, extract_citations, parse_verdict

__all__ = [
    "GeminiVerifier",
    "MockVerifier",
    "RawCitation",
    "VerificationPipeline",
    "Verifier",
    "VerifierError",
    "VerifierResponse",
    "extract_citations",
    "parse_generate_content",
    "parse_verdict",
]
