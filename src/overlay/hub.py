"""
실시간 허브 (Socket.IO 서버).

- 핸드셰이크 auth.token 을 CONNECTION_KEY 와 비교, 틀리면 연결 거부
- Referer(/rematch-*, /finals-*)로 채널 결정, 못 찾으면 연결 거부
- 입장 직후 현재 채널 문서를 해당 연결에만 'data-update' 로 전송
- 'update-data' 수신 시 문서 교체 → 저장 → 채널 전체에 'data-update' 방송(보낸 쪽 포함)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import socketio

from src.overlay.state import AppState, channel_for_referer
from src.store import Document

logger = logging.getLogger(__name__)

EVENT_DATA_UPDATE = "data-update"
EVENT_UPDATE_DATA = "update-data"


class RealtimeHub:
    """채널(room)별 팬아웃. sid → 채널 매핑을 직접 들고 있음."""

    def __init__(self, state: AppState, sio: Optional[socketio.AsyncServer] = None):
        self.state = state
        self.sio = sio or socketio.AsyncServer(
            async_mode="asgi",
            logger=False,
            engineio_logger=False,
        )
        self._channels: dict[str, str] = {}

        self.sio.on("connect", self.on_connect)
        self.sio.on(EVENT_UPDATE_DATA, self.on_update_data)
        self.sio.on("disconnect", self.on_disconnect)

    def channel_of(self, sid: str) -> Optional[str]:
        return self._channels.get(sid)

    async def on_connect(self, sid: str, environ: dict, auth: Any = None):
        token = auth.get("token") if isinstance(auth, dict) else None
        if not self.state.gate.authorize(token):
            logger.warning("Connection rejected (invalid key): %s", sid)
            raise socketio.exceptions.ConnectionRefusedError("Invalid connection key")

        referer = environ.get("HTTP_REFERER", "")
        channel = channel_for_referer(referer)
        if channel is None:
            logger.error("Could not determine channel from referer: %r", referer)
            return False

        await self.sio.enter_room(sid, channel)
        self._channels[sid] = channel
        logger.info("A user joined channel: %s (%s)", channel, sid)
        # CONNECT 패킷이 나간 뒤에 보내야 클라이언트가 받음
        self.sio.start_background_task(self.send_snapshot, sid, channel)
        return True

    async def send_snapshot(self, sid: str, channel: str) -> None:
        """현재 채널 문서를 해당 연결에만 전송."""
        await self.sio.emit(EVENT_DATA_UPDATE, self.state.get(channel), to=sid)

    async def on_update_data(self, sid: str, data: Document) -> None:
        channel = self._channels.get(sid)
        if channel is None:
            logger.warning("update-data from unjoined connection ignored: %s", sid)
            return
        # 저장소는 JSON 객체만 문서로 인정
        if not isinstance(data, dict):
            logger.warning("update-data ignored (object expected, got %s): %s", type(data).__name__, sid)
            return
        self.state.update(channel, data)
        await self.sio.emit(EVENT_DATA_UPDATE, data, to=channel)
        logger.info("Data updated for %s: %s", channel, data)

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        channel = self._channels.pop(sid, None)
        logger.info("A user disconnected: %s (channel=%s)", sid, channel)
