"""
프로젝트 공통 로깅 설정.

- 콘솔: INFO 이상 (LOG_CONSOLE_LEVEL)
- 통합: logs/app.log (INFO 이상)
- 에러: logs/error.log (ERROR 이상)
- 카테고리: logs/realtime.log (소켓 허브), logs/store.log (파일 저장)
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .settings import project_root

# 카테고리 로그 파일 → 담을 logger name prefix
CATEGORY_LOGS = {
    "realtime.log": ("src.overlay.hub", "engineio", "socketio"),
    "store.log": ("src.store",),
}

NOISY_LOGGERS = ("engineio", "engineio.server", "socketio", "socketio.server", "uvicorn.access")


class _CategoryFilter(logging.Filter):
    """지정한 logger(또는 그 하위)에서 온 레코드만 통과."""

    def __init__(self, prefixes: tuple[str, ...]):
        super().__init__()
        self._prefixes = prefixes

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name or ""
        return any(name == p or name.startswith(p + ".") for p in self._prefixes)


def _level_from_env(var: str, default: str) -> int:
    name = (os.environ.get(var) or default).upper()
    return getattr(logging, name, getattr(logging, default))


def _file_handler(
    path: Path,
    level: int,
    fmt: logging.Formatter,
    prefixes: tuple[str, ...] = (),
) -> RotatingFileHandler:
    """회전 파일 핸들러. prefixes 를 주면 해당 logger 만 기록."""
    handler = RotatingFileHandler(
        filename=str(path),
        maxBytes=int(os.environ.get("LOG_MAX_MB", "10")) * 1024 * 1024,
        backupCount=int(os.environ.get("LOG_BACKUP_COUNT", "5")),
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    if prefixes:
        handler.addFilter(_CategoryFilter(prefixes))
    return handler


def setup_logging(log_dir: Optional[Path] = None) -> Path:
    """루트 로거/핸들러를 재설정하고 로그 디렉터리 경로 반환."""
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.DEBUG)

    log_dir = Path(log_dir) if log_dir else project_root() / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    console = logging.StreamHandler()
    console.setLevel(_level_from_env("LOG_CONSOLE_LEVEL", "INFO"))
    console.setFormatter(fmt)
    root.addHandler(console)

    root.addHandler(_file_handler(log_dir / "app.log", logging.INFO, fmt))
    root.addHandler(_file_handler(log_dir / "error.log", logging.ERROR, fmt))
    for filename, prefixes in CATEGORY_LOGS.items():
        root.addHandler(_file_handler(log_dir / filename, logging.DEBUG, fmt, prefixes))

    noisy_level = _level_from_env("ENGINEIO_LOG_LEVEL", "WARNING")
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)

    return log_dir
