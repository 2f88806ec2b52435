from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

SessionState = Literal["pending", "completed", "failed"]

Verdict = Literal["True", "False", "Uncertain"]

ControllerStatus = Literal["initializing", "idle", "listening", "pending_end", "error"]


class Citation(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str
    title: str


class VerificationSession(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    source_text: str
    language: str
    created_at: float
    state: SessionState = "pending"
    verdict: Optional[Verdict] = None
    explanation: Optional[str] = None
    citations: List[Citation] = Field(default_factory=list)
    failure_reason: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.state != "pending"


class VerificationOutcome(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    verdict: Verdict
    explanation: str


class ControllerSnapshot(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: ControllerStatus
    status_label: str = ""
    language: str
    live_transcript: str = ""
    error: Optional[str] = None
    sessions: List[VerificationSession] = Field(default_factory=list)
    captured: List[str] = Field(default_factory=list)
