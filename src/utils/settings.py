"""
서버 설정. .env / 환경 변수에서 읽음.

CONNECTION_KEY     공유 비밀키 (필수, 없으면 아무것도 통과 못 함)
OVERLAY_HOST       바인드 주소 (기본 0.0.0.0)
OVERLAY_PORT       포트 (기본 3000)
DATA_DIR           채널 JSON 저장 위치 (기본 <프로젝트>/source)
STATIC_DIR         /source 로 제공할 정적 파일 위치 (기본 <프로젝트>/source)
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

DEFAULT_PORT = 3000


def project_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


@dataclass
class Settings:
    connection_key: Optional[str]
    data_dir: Path
    static_dir: Path
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "Settings":
        """env 를 주지 않으면 .env 를 읽은 뒤 os.environ 사용."""
        if env is None:
            load_dotenv(project_root() / ".env")
            env = os.environ
        root = project_root()
        # 키는 그대로 비교하므로 공백도 키의 일부
        key = env.get("CONNECTION_KEY") or None
        return cls(
            connection_key=key,
            data_dir=Path(env.get("DATA_DIR") or root / "source"),
            static_dir=Path(env.get("STATIC_DIR") or root / "source"),
            host=(env.get("OVERLAY_HOST") or "0.0.0.0").strip(),
            port=int(env.get("OVERLAY_PORT") or DEFAULT_PORT),
        )
