from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict

RawEventSink = Callable[[Dict[str, Any]], None]


class RecognizerError(RuntimeError):
    def __init__(self, code: str, message: str, backend_name: str):
        super().__init__(message)
        self.code = code
        self.message = message
        self.backend_name = backend_name


class RecognizerUnavailableError(RecognizerError):
    """Raised when the host exposes no usable speech-recognition capability."""

    def __init__(self, message: str, backend_name: str):
        super().__init__("not-supported", message, backend_name)


class RecognizerBackend(ABC):
    """Host streaming recognizer, driven by commands and reporting raw events.

    Raw events are Web Speech shaped dicts, e.g. ``{"type": "result", "results": [...]}``.
    """

    @abstractmethod
    def configure(
        self,
        language: str,
        sink: RawEventSink,
        *,
        continuous: bool = True,
        interim_results: bool = True,
    ) -> None: ...

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def name(self) -> str: ...
