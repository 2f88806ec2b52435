from __future__ import annotations

"""
Recognizer bridge to a remote host over WebSocket.

Design intent:
- Let a client that owns the microphone (e.g. a browser running Web Speech)
  act as the recognizer capability.
- Route inbound events only to the backend that was started last, so a torn
  down language pass can never interleave with the new one.
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional

from .base import RawEventSink, RecognizerBackend, RecognizerUnavailableError

logger = logging.getLogger(__name__)


class RecognizerBridge:
    def __init__(self) -> None:
        self._outbound: Optional[asyncio.Queue[Dict[str, Any]]] = None
        self._active: Optional["BridgeRecognizerBackend"] = None
        self._pass_counter = 0

    @property
    def connected(self) -> bool:
        return self._outbound is not None

    def connect(self) -> asyncio.Queue[Dict[str, Any]]:
        if self._outbound is not None:
            raise RuntimeError("A recognizer client is already connected.")
        self._outbound = asyncio.Queue()
        return self._outbound

    def disconnect(self) -> None:
        self._outbound = None
        self._active = None

    def activate(self, backend: "BridgeRecognizerBackend") -> int:
        self._pass_counter += 1
        self._active = backend
        return self._pass_counter

    def send(self, command: Dict[str, Any]) -> None:
        if self._outbound is None:
            raise RecognizerUnavailableError("No recognizer client connected.", "bridge")
        self._outbound.put_nowait(command)

    def dispatch(self, payload: Mapping[str, Any]) -> None:
        backend = self._active
        if backend is None:
            logger.debug("bridge_event_dropped type=%s reason=no_active_backend", payload.get("type"))
            return
        # Clients that echo the pass id let late events of a stopped pass be discarded.
        pass_id = payload.get("pass")
        if pass_id is not None and pass_id != backend.pass_id:
            logger.debug("bridge_event_dropped type=%s reason=stale_pass pass=%s", payload.get("type"), pass_id)
            return
        backend.deliver(payload)


class BridgeRecognizerBackend(RecognizerBackend):
    def __init__(self, bridge: RecognizerBridge) -> None:
        self._bridge = bridge
        self._sink: Optional[RawEventSink] = None
        self._language = ""
        self._continuous = True
        self._interim_results = True
        self.pass_id: Optional[int] = None

    def configure(
        self,
        language: str,
        sink: RawEventSink,
        *,
        continuous: bool = True,
        interim_results: bool = True,
    ) -> None:
        self._language = language
        self._sink = sink
        self._continuous = continuous
        self._interim_results = interim_results

    def start(self) -> None:
        if not self._bridge.connected:
            raise RecognizerUnavailableError("No recognizer client connected.", self.name())
        self.pass_id = self._bridge.activate(self)
        self._bridge.send(
            {
                "type": "start",
                "pass": self.pass_id,
                "lang": self._language,
                "continuous": self._continuous,
                "interimResults": self._interim_results,
            }
        )

    def stop(self) -> None:
        if not self._bridge.connected:
            return
        self._bridge.send({"type": "stop"})

    def deliver(self, payload: Mapping[str, Any]) -> None:
        if self._sink is not None:
            self._sink(payload)

    def name(self) -> str:
        return "bridge"
