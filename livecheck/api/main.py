from __future__ import annotations

"""
HTTP/WebSocket surface for the live verification loop.

Design intent:
- Expose the presentation boundary: one read-only snapshot and `setLanguage`.
- Host the recognizer bridge so a microphone-owning client can drive capture.
- Keep handlers async so all controller work stays on the server event loop.
"""

import asyncio
import contextlib
import json
import logging
from typing import Any

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from livecheck.asr.bridge import RecognizerBridge
from livecheck.internal_core.config import AppConfig, load_config
from livecheck.internal_core.contracts import ControllerSnapshot
from livecheck.internal_core.controller import SessionController, build_backend_factory, build_verifier
from livecheck.internal_core.locales import supported_languages
from livecheck.verify.base import Verifier


class LanguageRequest(BaseModel):
    code: str = Field(min_length=2, max_length=16)


class LanguageItem(BaseModel):
    code: str
    name: str


class LanguagesResponse(BaseModel):
    current: str
    languages: list[LanguageItem] = Field(default_factory=list)


class ClearHistoryResponse(BaseModel):
    removed: int


class TranscriptExportResponse(BaseModel):
    language: str
    text: str


app = FastAPI(title="livecheck service")
logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _get_config() -> AppConfig:
    existing = getattr(app.state, "livecheck_config", None)
    if isinstance(existing, AppConfig):
        return existing
    created = load_config()
    setattr(app.state, "livecheck_config", created)
    return created


def _get_bridge() -> RecognizerBridge:
    existing = getattr(app.state, "recognizer_bridge", None)
    if isinstance(existing, RecognizerBridge):
        return existing
    created = RecognizerBridge()
    setattr(app.state, "recognizer_bridge", created)
    return created


def _get_controller() -> SessionController:
    existing = getattr(app.state, "session_controller", None)
    if isinstance(existing, SessionController):
        return existing
    cfg = _get_config()
    logging.getLogger("livecheck").setLevel(cfg.LIVECHECK_LOG_LEVEL.upper())
    injected = getattr(app.state, "verifier", None)
    verifier = injected if isinstance(injected, Verifier) else build_verifier(cfg)
    created = SessionController(
        cfg,
        backend_factory=build_backend_factory(cfg, _get_bridge()),
        verifier=verifier,
    )
    setattr(app.state, "session_controller", created)
    return created


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/languages", response_model=LanguagesResponse)
async def languages() -> LanguagesResponse:
    controller = _get_controller()
    return LanguagesResponse(
        current=controller.language,
        languages=[LanguageItem(**item) for item in supported_languages()],
    )


@app.get("/state", response_model=ControllerSnapshot)
async def state() -> ControllerSnapshot:
    return _get_controller().snapshot()


@app.post("/language", response_model=ControllerSnapshot)
async def set_language(payload: LanguageRequest) -> ControllerSnapshot:
    controller = _get_controller()
    try:
        return controller.set_language(payload.code)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@app.delete("/sessions", response_model=ClearHistoryResponse)
async def clear_sessions() -> ClearHistoryResponse:
    return ClearHistoryResponse(removed=_get_controller().clear_history())


@app.get("/transcript", response_model=TranscriptExportResponse)
async def export_transcript() -> TranscriptExportResponse:
    snap = _get_controller().snapshot()
    return TranscriptExportResponse(language=snap.language, text=snap.live_transcript)


async def _pump_outbound(websocket: WebSocket, outbound: asyncio.Queue[dict[str, Any]]) -> None:
    while True:
        message = await outbound.get()
        await websocket.send_json(message)


@app.websocket("/ws/recognizer")
async def recognizer_ws(websocket: WebSocket) -> None:
    await websocket.accept()
    try:
        controller = _get_controller()
    except ValueError as exc:
        logger.error("controller_unavailable detail=%s", exc)
        await websocket.send_json({"type": "error", "detail": "controller_unavailable"})
        await websocket.close(code=1011)
        return

    bridge = _get_bridge()
    try:
        outbound = bridge.connect()
    except RuntimeError:
        await websocket.send_json({"type": "error", "detail": "recognizer_already_connected"})
        await websocket.close(code=1013)
        return

    sender = asyncio.create_task(_pump_outbound(websocket, outbound))
    try:
        controller.mount()
        while True:
            raw = await websocket.receive_text()
            try:
                payload = json.loads(raw)
            except json.JSONDecodeError:
                outbound.put_nowait({"type": "error", "detail": "invalid_json"})
                continue
            if not isinstance(payload, dict):
                outbound.put_nowait({"type": "error", "detail": "invalid_payload"})
                continue
            bridge.dispatch(payload)
    except WebSocketDisconnect:
        logger.info("recognizer_client_disconnected")
    finally:
        controller.unmount()
        bridge.disconnect()
        sender.cancel()
        with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
            await sender


async def _drain_incoming(websocket: WebSocket) -> None:
    # State clients only listen; reading detects their disconnect.
    while True:
        await websocket.receive_text()


async def _pump_snapshots(websocket: WebSocket, updates: asyncio.Queue[ControllerSnapshot]) -> None:
    while True:
        snap = await updates.get()
        await websocket.send_json(snap.model_dump(mode="json"))


@app.websocket("/ws/state")
async def state_ws(websocket: WebSocket) -> None:
    await websocket.accept()
    controller = _get_controller()
    updates: asyncio.Queue[ControllerSnapshot] = asyncio.Queue()
    remove_listener = controller.add_listener(updates.put_nowait)
    tasks: set[asyncio.Task[None]] = set()
    try:
        await websocket.send_json(controller.snapshot().model_dump(mode="json"))
        tasks = {
            asyncio.create_task(_drain_incoming(websocket)),
            asyncio.create_task(_pump_snapshots(websocket, updates)),
        }
        await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
    finally:
        remove_listener()
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
                await task
        logger.debug("state_client_disconnected")
