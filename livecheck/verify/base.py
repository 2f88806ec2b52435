from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional


class VerifierError(RuntimeError):
    def __init__(self, code: str, message: str, verifier_name: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.verifier_name = verifier_name
        self.status_code = status_code


@dataclass(frozen=True)
class RawCitation:
    uri: Optional[str]
    title: Optional[str]


@dataclass(frozen=True)
class VerifierResponse:
    text: str
    citations: List[RawCitation] = field(default_factory=list)


class Verifier(ABC):
    @abstractmethod
    async def verify(self, prompt: str, *, grounded_search: bool = True) -> VerifierResponse: ...

    @abstractmethod
    def name(self) -> str: ...
