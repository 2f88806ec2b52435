from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Mapping, Optional

from .base import RecognizerBackend, RecognizerError
from .events import parse_raw_event

logger = logging.getLogger(__name__)

EventListener = Callable[[Any], None]


class RecognizerAdapter:
    """Facade over one recognizer backend for a single language pass.

    Raw backend events are normalized and re-posted onto the owning event loop,
    so the listener always runs serialized on the loop thread. Restart decisions
    are left to the caller.
    """

    def __init__(
        self,
        backend: RecognizerBackend,
        language: str,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._backend = backend
        self._language = language
        self._loop = loop
        self._listener: Optional[EventListener] = None
        backend.configure(language, self._on_raw, continuous=True, interim_results=True)

    @property
    def language(self) -> str:
        return self._language

    @property
    def backend_name(self) -> str:
        return self._backend.name()

    def subscribe(self, listener: EventListener) -> None:
        self._listener = listener

    def detach(self) -> None:
        self._listener = None

    def start(self) -> None:
        self._backend.start()

    def stop(self) -> None:
        self._backend.stop()

    def _on_raw(self, payload: Mapping[str, Any]) -> None:
        try:
            event = parse_raw_event(payload, backend_name=self._backend.name())
        except RecognizerError as exc:
            logger.warning(
                "recognizer_event_dropped backend=%s code=%s detail=%s",
                self._backend.name(),
                exc.code,
                exc.message,
            )
            return
        if self._loop.is_closed():
            return
        self._loop.call_soon_threadsafe(self._deliver, event)

    def _deliver(self, event: Any) -> None:
        listener = self._listener
        if listener is None:
            return
        listener(event)
