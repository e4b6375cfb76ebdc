"""
점수판 오버레이 서버 실행.

.env에 CONNECTION_KEY 설정 후 실행: python main.py  (프로젝트 루트에서)
컨트롤 패널: http://localhost:3000/finals-control?key=...
OBS 브라우저 소스: http://localhost:3000/finals-overlay?key=...
"""

import logging

import uvicorn

from src.overlay import AppState, AccessGate, create_asgi_app
from src.store import ChannelStore
from src.utils import Settings, setup_logging

logger = logging.getLogger(__name__)


def build_app(settings: Settings):
    """설정으로 저장소·상태·앱 조립. 채널 문서는 여기서 한 번 로드."""
    store = ChannelStore(settings.data_dir)
    state = AppState(store, AccessGate(settings.connection_key))
    state.load()
    return create_asgi_app(state, static_dir=settings.static_dir)


def main() -> None:
    settings = Settings.from_env()
    log_dir = setup_logging()
    logger.info("Logs: %s", log_dir)

    if settings.connection_key:
        logger.info("Connection key configured")
    else:
        logger.error("CONNECTION_KEY is not set: every page and connection will be rejected")

    app = build_app(settings)

    base = f"http://localhost:{settings.port}"
    logger.info("Server running on %s", base)
    logger.info("Open Finals Control Panel at: %s/finals-control", base)
    logger.info("Add Finals Overlay to OBS from: %s/finals-overlay", base)
    logger.info("Open Rematch Control Panel at: %s/rematch-control", base)
    logger.info("Add Rematch Overlay to OBS from: %s/rematch-overlay", base)

    try:
        uvicorn.run(app, host=settings.host, port=settings.port, log_level="warning")
    except KeyboardInterrupt:
        logger.info("Exiting...")


if __name__ == "__main__":
    main()
