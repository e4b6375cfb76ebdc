"""
방송 오버레이: 컨트롤 패널이 점수/이름/국기 문서를 보내면 오버레이(OBS 브라우저 소스)가 실시간 반영.

- 채널 2개(rematch, finals), 채널마다 문서 하나.
- OBS에서 브라우저 소스 URL을 http://127.0.0.1:3000/finals-overlay?key=... 로 설정.
"""

from src.overlay.auth import AccessGate
from src.overlay.hub import RealtimeHub
from src.overlay.server import create_app, create_asgi_app
from src.overlay.state import CHANNELS, AppState, channel_for_referer

__all__ = [
    "AccessGate",
    "AppState",
    "CHANNELS",
    "RealtimeHub",
    "channel_for_referer",
    "create_app",
    "create_asgi_app",
]
