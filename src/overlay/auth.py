"""공유 비밀키(CONNECTION_KEY) 검사. 페이지 요청, 로그인 폼, 소켓 핸드셰이크 공통."""

from __future__ import annotations

from typing import Any, Optional


class AccessGate:
    """설정된 키와 정확히 같은 문자열만 통과. 키가 비어 있으면 전부 거부."""

    def __init__(self, secret: Optional[str]):
        self._secret = secret or None

    @property
    def configured(self) -> bool:
        return self._secret is not None

    def authorize(self, candidate: Any) -> bool:
        if self._secret is None or not isinstance(candidate, str):
            return False
        return candidate == self._secret
