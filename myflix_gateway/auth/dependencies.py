"""
인증 의존성 (Auth Dependencies)
라우트 보호를 위한 FastAPI 의존성 함수들

주요 기능:
- app.state 에 조립된 저장소/전략 객체 주입
- Bearer 토큰 검증 (AccessGuard)
- 실패 시 401 로 요청 차단 (핸들러 실행 전)
"""
from typing import Annotated

import structlog
from fastapi import Depends, HTTPException, Request, status

from myflix_shared import DocumentStore, Settings, UserRecord
from .errors import AuthError
from .strategies import AccessGuard, LoginVerifier, SessionIssuer


log = structlog.get_logger()


# ============================================================
# 애플리케이션 상태 의존성
# ============================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_login_verifier(request: Request) -> LoginVerifier:
    return request.app.state.login_verifier


def get_session_issuer(request: Request) -> SessionIssuer:
    return request.app.state.session_issuer


def get_access_guard(request: Request) -> AccessGuard:
    return request.app.state.access_guard


# ============================================================
# 사용자 인증 의존성
# ============================================================

async def get_current_user(
    request: Request,
    guard: Annotated[AccessGuard, Depends(get_access_guard)],
) -> UserRecord:
    """
    현재 인증된 사용자 가져오기 (JWT 검증)

    검증 단계:
    1. Authorization 헤더에서 Bearer 토큰 추출
    2. JWT 서명/만료 검증
    3. subject 사용자 재조회

    사용법:
        @router.get("/protected")
        async def protected_route(user: CurrentUser):
            return {"username": user.username}

    Raises:
        HTTPException 401: 실패 원인과 무관하게 동일한 응답 (원인은 로그에만)
    """
    try:
        user = await guard.authorize(request.headers.get("Authorization"))
    except AuthError as exc:
        log.info(
            "authorization_rejected",
            reason=type(exc).__name__,
            detail=exc.message,
            path=request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 다른 미들웨어(요청 로그)에서 접근할 수 있도록 저장
    request.state.user = user
    return user


CurrentUser = Annotated[UserRecord, Depends(get_current_user)]
StoreDep = Annotated[DocumentStore, Depends(get_store)]
