"""채널 문서 영속 저장 모듈"""

from .channel_store import DEFAULT_DOCUMENT, ChannelStore, Document, default_document

__all__ = ["ChannelStore", "DEFAULT_DOCUMENT", "Document", "default_document"]
