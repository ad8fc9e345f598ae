"""
요청 로그 미들웨어
모든 HTTP 요청을 한 줄 구조화 로그로 기록 (access log)

기록 항목:
- method, path, status, duration_ms
- client: 클라이언트 IP (프록시 뒤면 X-Forwarded-For)
- user: 인증된 사용자 (get_current_user 의존성이 설정한 값)
"""
import time

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


log = structlog.get_logger("myflix.access")


# ============================================================
# 로그 제외 경로
# ============================================================

# 헬스체크/문서 경로는 기록하지 않음
EXCLUDED_PATHS = {
    "/health",          # 헬스체크
    "/docs",            # Swagger UI
    "/openapi.json",    # OpenAPI 스키마
    "/redoc"            # ReDoc
}


class RequestLogMiddleware(BaseHTTPMiddleware):
    """요청 처리 시간과 결과를 기록"""

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        log.info(
            "request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            duration_ms=duration_ms,
            client=self._client_ip(request),
            user=self._username(request),
        )
        return response

    def _client_ip(self, request: Request) -> str:
        # X-Forwarded-For: client, proxy1, proxy2
        forwarded = request.headers.get("X-Forwarded-For")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.client.host if request.client else "unknown"

    def _username(self, request: Request) -> str:
        user = getattr(request.state, "user", None)
        return user.username if user is not None else "-"
