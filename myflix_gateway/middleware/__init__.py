"""
미들웨어 패키지 (Middleware Package)

사용 가능한 미들웨어:
- RequestLogMiddleware: 구조화 요청 로그 (structlog)
"""
from .request_log import RequestLogMiddleware

__all__ = ["RequestLogMiddleware"]
