"""
채널 문서 저장소.
채널마다 JSON 파일 하나(<data_dir>/<channel>-data.json)를 통째로 덮어쓴다.
읽기 실패(없음/빈 파일/깨진 JSON)는 기본 문서로 대체하고 즉시 저장(self-heal).
쓰기 실패는 로그만 남기고 삼킨다. 메모리 상태가 기준.
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

Document = dict[str, Any]

# 저장된 문서가 없거나 못 읽을 때 쓰는 기본값 (두 채널 공통)
DEFAULT_DOCUMENT: Document = {
    "p1Flag": "fr",
    "p1Ranking": "#1",
    "p1Name": "Player 1",
    "p2Flag": "rn",
    "p2Ranking": "#2",
    "p2Name": "Player 2",
    "p1Score": 0,
    "p2Score": 0,
    "round": "Winners Round 1",
}


def default_document() -> Document:
    """기본 문서 사본. 호출 측에서 수정해도 원본은 그대로."""
    return copy.deepcopy(DEFAULT_DOCUMENT)


class ChannelStore:
    """채널별 JSON 파일 읽기/쓰기."""

    def __init__(self, data_dir: Path | str):
        self.root = Path(data_dir)
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, channel: str) -> Path:
        return self.root / f"{channel}-data.json"

    def load(self, channel: str) -> Document:
        """
        채널 문서 로드. 실패 시 기본 문서를 저장하고 반환 (예외 없음).
        JSON이어도 객체(dict)가 아니면 깨진 것으로 취급.
        """
        path = self.path_for(channel)
        try:
            text = path.read_text(encoding="utf-8")
            if not text.strip():
                raise ValueError("File is empty")
            data = json.loads(text)
            if not isinstance(data, dict):
                raise ValueError(f"JSON object expected, got {type(data).__name__}")
            return data
        except (OSError, ValueError) as e:
            logger.error("Error loading data from %s: %s", path, e)
            document = default_document()
            self.save(channel, document)
            return document

    def save(self, channel: str, document: Document) -> bool:
        """
        문서 전체를 덮어쓰기. 임시 파일에 쓴 뒤 os.replace 로 교체.
        실패는 로그만 남기고 False 반환.
        """
        path = self.path_for(channel)
        tmp = None
        try:
            fd, tmp = tempfile.mkstemp(prefix=f".{channel}.", dir=str(self.root))
            with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
            os.replace(tmp, path)
            tmp = None
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving data to %s: %s", path, e)
            return False
        finally:
            if tmp is not None:
                try:
                    os.remove(tmp)
                except OSError:
                    pass
        logger.info("Data saved successfully to %s", path)
        return True
