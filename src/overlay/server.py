"""
방송 오버레이 HTTP 서버. 로그인 페이지, 키로 보호되는 컨트롤/오버레이 페이지 4개, /source 정적 파일.
페이지는 서버 렌더링 없음: HTML이 URL의 key 로 직접 Socket.IO 연결을 연다.
create_asgi_app() 이 Socket.IO 허브와 합친 단일 ASGI 앱을 만든다 (uvicorn 으로 실행).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urlencode

import socketio
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

from src.overlay.hub import RealtimeHub
from src.overlay.state import AppState

logger = logging.getLogger(__name__)

_PAGES_DIR = Path(__file__).resolve().parent / "pages"

LOGIN_PATH = "/auth"
# 로그인 성공 시 이동할 페이지
LANDING_PATH = "/rematch-overlay"

# 보호 페이지 경로 → HTML 파일. 채널은 경로(=Referer)로 구분되므로 역할별 파일 하나씩 공유
PROTECTED_PAGES = {
    "/rematch-control": "control.html",
    "/rematch-overlay": "overlay.html",
    "/finals-control": "control.html",
    "/finals-overlay": "overlay.html",
}

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _page(name: str) -> HTMLResponse:
    return HTMLResponse((_PAGES_DIR / name).read_text(encoding="utf-8"))


async def request_key(request: Request) -> Optional[str]:
    """쿼리스트링 key 우선, 비어 있으면 폼 필드 key."""
    key = request.query_params.get("key")
    if key:
        return key
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        value = form.get("key")
        return value if isinstance(value, str) else None
    return None


def _to_login(error: bool = False) -> RedirectResponse:
    url = f"{LOGIN_PATH}?error=1" if error else LOGIN_PATH
    return RedirectResponse(url, status_code=302)


def create_app(state: AppState, static_dir: Optional[Path] = None) -> FastAPI:
    """페이지 서버. state.gate 로 키 검사."""
    app = FastAPI(title="Scoreboard Overlay", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.overlay = state

    if static_dir is not None and Path(static_dir).is_dir():
        app.mount("/source", StaticFiles(directory=str(static_dir)), name="source")
    elif static_dir is not None:
        logger.warning("Static directory not found, /source disabled: %s", static_dir)

    @app.get("/")
    def root():
        return _to_login()

    @app.get(LOGIN_PATH, response_class=HTMLResponse)
    def login_page():
        """로그인 폼. ?error=1 이면 페이지 스크립트가 오류 문구 표시."""
        return _page("auth.html")

    @app.post(LOGIN_PATH)
    async def login(request: Request):
        form = await request.form()
        key = form.get("key")
        if state.gate.authorize(key):
            logger.info("Login ok")
            return RedirectResponse(f"{LANDING_PATH}?{urlencode({'key': key})}", status_code=302)
        logger.warning("Login failed")
        return _to_login(error=True)

    def _register(path: str, filename: str) -> None:
        async def protected_page(request: Request):
            if not state.gate.authorize(await request_key(request)):
                return _to_login()
            return _page(filename)

        app.add_api_route(
            path,
            protected_page,
            methods=["GET"],
            name=path.strip("/").replace("-", "_"),
            include_in_schema=False,
        )

    for path, filename in PROTECTED_PAGES.items():
        _register(path, filename)

    return app


def create_asgi_app(
    state: AppState,
    static_dir: Optional[Path] = None,
    hub: Optional[RealtimeHub] = None,
) -> socketio.ASGIApp:
    """FastAPI 페이지 앱 + Socket.IO 허브를 한 포트로 묶음. /socket.io 는 허브가 처리."""
    hub = hub or RealtimeHub(state)
    app = create_app(state, static_dir=static_dir)
    app.state.hub = hub
    return socketio.ASGIApp(hub.sio, other_asgi_app=app)
