"""유틸리티 모듈"""
from .logging_config import setup_logging
from .settings import Settings

__all__ = ["Settings", "setup_logging"]
