"""
오버레이 공유 상태. 채널(rematch / finals)마다 문서 하나를 메모리에 유지.
프로세스 시작 시 AppState.load() 로 저장소에서 채우고, 이후 update() 로만 교체.
"""

from __future__ import annotations

import logging
from typing import Optional

from src.overlay.auth import AccessGate
from src.store import ChannelStore, Document

logger = logging.getLogger(__name__)

CHANNELS = ("rematch", "finals")

# 페이지 경로 → 채널. 소켓 연결의 Referer 에 포함된 표식으로 판별 (순서대로 검사)
_REFERER_MARKERS = (
    ("/rematch-", "rematch"),
    ("/finals-", "finals"),
)


def channel_for_referer(referer: Optional[str]) -> Optional[str]:
    """Referer URL 로 채널 결정. 못 찾으면 None."""
    if not referer:
        return None
    for marker, channel in _REFERER_MARKERS:
        if marker in referer:
            return channel
    return None


class AppState:
    """채널 문서 + 접근 키. 페이지 서버와 허브에 같은 인스턴스를 넘긴다."""

    def __init__(self, store: ChannelStore, gate: AccessGate):
        self.store = store
        self.gate = gate
        self.documents: dict[str, Document] = {}

    def load(self) -> None:
        for channel in CHANNELS:
            self.documents[channel] = self.store.load(channel)
            logger.info("Channel loaded: %s", channel)

    def get(self, channel: str) -> Document:
        if channel not in self.documents:
            raise KeyError(f"unknown channel: {channel}")
        return self.documents[channel]

    def update(self, channel: str, document: Document) -> None:
        """문서 통째로 교체 후 저장. 저장 실패해도 메모리 값은 유지 (last write wins)."""
        if channel not in CHANNELS:
            raise KeyError(f"unknown channel: {channel}")
        self.documents[channel] = document
        self.store.save(channel, document)
