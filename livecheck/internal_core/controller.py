from __future__ import annotations

"""
Session controller: recognizer lifecycle, segmentation wiring, status snapshots.

Design intent:
- Keep capture continuous by restarting the recognizer after every pass end,
  except when the last error was fatal.
- Treat a language change as a full teardown and remount, never a hot swap.
- Run every handler on one event loop so no state needs a lock.
"""

import asyncio
import logging
from typing import Any, Callable, List, Optional

from livecheck.asr.adapter import RecognizerAdapter
from livecheck.asr.base import RecognizerBackend, RecognizerError
from livecheck.asr.bridge import BridgeRecognizerBackend, RecognizerBridge
from livecheck.asr.events import Ended, RecognitionError, Result, SpeechEnded, SpeechStarted, Started
from livecheck.asr.mock import ScriptedRecognizerBackend
from livecheck.asr.segmenter import UtteranceSegmenter
from livecheck.verify.base import Verifier
from livecheck.verify.gemini import GeminiVerifier
from livecheck.verify.mock import MockVerifier
from livecheck.verify.pipeline import VerificationPipeline

from .config import AppConfig
from .contracts import ControllerSnapshot, ControllerStatus
from .locales import Locale, get_locale, is_supported
from .session_store import SessionRegistry

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[ControllerSnapshot], None]

_SEGMENTER_STATUS: dict[str, ControllerStatus] = {
    "idle": "idle",
    "accumulating": "listening",
    "pending_close": "pending_end",
}


def fatal_error_message(code: str, locale: Locale) -> str:
    if code == "not-supported":
        return locale.error_not_supported
    if code == "audio-capture":
        return locale.error_mic_not_available
    return locale.error_mic_access_denied


class SessionController:
    def __init__(
        self,
        cfg: AppConfig,
        *,
        backend_factory: Callable[[], RecognizerBackend],
        verifier: Verifier,
        registry: Optional[SessionRegistry] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        if not is_supported(cfg.LIVECHECK_LANGUAGE):
            raise ValueError(f"Unsupported language: {cfg.LIVECHECK_LANGUAGE}")
        self._cfg = cfg
        self._backend_factory = backend_factory
        self._registry = registry or SessionRegistry()
        self._loop = loop
        self._pipeline = VerificationPipeline(
            self._registry,
            verifier,
            loop=loop,
            on_settled=lambda _session_id: self._notify(),
        )
        self._language = cfg.LIVECHECK_LANGUAGE
        self._status: ControllerStatus = "initializing"
        self._error: Optional[str] = None
        self._fatal_code: Optional[str] = None
        self._mounted = False
        self._adapter: Optional[RecognizerAdapter] = None
        self._segmenter: Optional[UtteranceSegmenter] = None
        self._captured: List[str] = []
        self._listeners: List[SnapshotListener] = []
        self._dispatching = False

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    @property
    def pipeline(self) -> VerificationPipeline:
        return self._pipeline

    @property
    def language(self) -> str:
        return self._language

    @property
    def status(self) -> ControllerStatus:
        return self._status

    @property
    def mounted(self) -> bool:
        return self._mounted

    def add_listener(self, listener: SnapshotListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def snapshot(self) -> ControllerSnapshot:
        locale = get_locale(self._language)
        return ControllerSnapshot(
            status=self._status,
            status_label=self._status_label(locale),
            language=self._language,
            live_transcript=self._segmenter.live_transcript if self._segmenter else "",
            error=self._error,
            sessions=self._registry.list_sessions(),
            captured=list(self._captured),
        )

    def _status_label(self, locale: Locale) -> str:
        if self._status == "error":
            return self._error or ""
        return {
            "initializing": locale.status_initializing,
            "idle": locale.status_ready,
            "listening": locale.status_listening,
            "pending_end": locale.status_waiting,
        }[self._status]

    def mount(self) -> None:
        if self._mounted:
            return
        loop = self._loop or asyncio.get_running_loop()
        self._mounted = True
        self._status = "initializing"
        self._error = None
        self._fatal_code = None
        self._segmenter = UtteranceSegmenter(
            loop,
            confidence_threshold=self._cfg.LIVECHECK_CONFIDENCE_THRESHOLD,
            close_delay_sec=self._cfg.close_delay_sec(),
            fallback_delay_sec=self._cfg.fallback_delay_sec(),
            on_transcript=self._on_transcript,
            on_utterance=self._on_utterance,
            on_restart_request=self._on_restart_request,
        )
        adapter = RecognizerAdapter(self._backend_factory(), self._language, loop)
        adapter.subscribe(self._on_event)
        self._adapter = adapter
        logger.info("recognizer_mount language=%s backend=%s", self._language, adapter.backend_name)
        self._start_adapter()
        self._notify()

    def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        if self._segmenter is not None:
            self._segmenter.reset()
        adapter = self._adapter
        self._adapter = None
        if adapter is not None:
            # Detach first so the stop does not trigger the restart-on-end handler.
            adapter.detach()
            try:
                adapter.stop()
            except RecognizerError as exc:
                logger.warning("recognizer_stop_failed code=%s detail=%s", exc.code, exc.message)
        if self._status != "error":
            self._status = "initializing"
        logger.info(
            "recognizer_unmount language=%s pending_sessions=%s",
            self._language,
            self._registry.pending_count(),
        )
        self._notify()

    def set_language(self, code: str) -> ControllerSnapshot:
        if not is_supported(code):
            raise ValueError(f"Unsupported language: {code}")
        if code == self._language:
            return self.snapshot()
        was_mounted = self._mounted
        self.unmount()
        self._language = code
        self._segmenter = None
        self._error = None
        self._fatal_code = None
        self._status = "initializing"
        if was_mounted:
            self.mount()
        else:
            self._notify()
        return self.snapshot()

    def clear_history(self) -> int:
        removed = self._registry.clear()
        self._captured = []
        self._notify()
        return removed

    def _start_adapter(self) -> None:
        if self._adapter is None:
            return
        try:
            self._adapter.start()
        except RecognizerError as exc:
            logger.warning("recognizer_start_failed code=%s detail=%s", exc.code, exc.message)
            self._set_fatal(exc.code)

    def _set_fatal(self, code: str) -> None:
        self._fatal_code = code
        self._error = fatal_error_message(code, get_locale(self._language))
        self._status = "error"
        logger.error("recognizer_fatal code=%s language=%s", code, self._language)

    def _on_event(self, event: Any) -> None:
        if isinstance(event, Started):
            self._fatal_code = None
            self._error = None
            self._status = "idle"
            # A restart mid-utterance keeps the segmenter's state and timers.
            self._sync_status()
        elif isinstance(event, Ended):
            if self._fatal_code is not None:
                self._status = "error"
            else:
                self._start_adapter()
        elif isinstance(event, RecognitionError):
            if event.transient:
                logger.debug("recognizer_transient_error code=%s", event.code)
                return
            self._set_fatal(event.code)
        elif isinstance(event, (Result, SpeechStarted, SpeechEnded)):
            if self._segmenter is None:
                return
            self._dispatching = True
            try:
                self._segmenter.handle(event)
            finally:
                self._dispatching = False
            self._sync_status()
        self._notify()

    def _sync_status(self) -> None:
        if self._status == "error" or self._segmenter is None:
            return
        self._status = _SEGMENTER_STATUS[self._segmenter.state]

    def _on_transcript(self, _text: str) -> None:
        self._sync_status()
        # Event-driven updates notify once from _on_event; timer firings notify here.
        if not self._dispatching:
            self._notify()

    def _on_utterance(self, text: str) -> None:
        if not self._cfg.LIVECHECK_VERIFY_ENABLED:
            self._captured.append(text)
            logger.info("utterance_captured chars=%s", len(text))
        else:
            session_id = self._registry.create_pending(text, self._language)
            self._pipeline.submit(session_id, text, self._language)
        self._notify()

    def _on_restart_request(self) -> None:
        if self._adapter is None:
            return
        try:
            self._adapter.stop()
        except RecognizerError as exc:
            logger.warning("recognizer_stop_failed code=%s detail=%s", exc.code, exc.message)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                # Presentation listeners must never break capture.
                logger.exception("snapshot_listener_failed")


def build_verifier(cfg: AppConfig) -> Verifier:
    name = cfg.LIVECHECK_VERIFIER.strip().lower()
    if name == "mock":
        return MockVerifier()
    if name == "gemini":
        return GeminiVerifier(
            cfg.GEMINI_API_KEY,
            model=cfg.LIVECHECK_GEMINI_MODEL,
            base_url=cfg.LIVECHECK_GEMINI_BASE_URL,
            timeout_sec=cfg.LIVECHECK_VERIFY_TIMEOUT_SEC,
        )
    raise ValueError(f"Unknown verifier: {cfg.LIVECHECK_VERIFIER}")


def build_backend_factory(cfg: AppConfig, bridge: RecognizerBridge) -> Callable[[], RecognizerBackend]:
    name = cfg.LIVECHECK_RECOGNIZER.strip().lower()
    if name == "bridge":
        return lambda: BridgeRecognizerBackend(bridge)
    if name == "scripted":
        return ScriptedRecognizerBackend
    raise ValueError(f"Unknown recognizer backend: {cfg.LIVECHECK_RECOGNIZER}")
