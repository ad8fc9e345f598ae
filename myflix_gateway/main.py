"""
myFlix API Gateway 메인 애플리케이션
FastAPI 기반 REST API 서버

주요 기능:
- 로그인 API (/login) → JWT 발급
- 영화 카탈로그 API (/movies/*)
- 사용자/즐겨찾기 API (/users/*)
- CORS 설정, 요청 로그

실행 방법:
    uvicorn myflix_gateway.main:app --reload
    또는
    myflix-api
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from myflix_shared import (
    DocumentStore,
    InMemoryDocumentStore,
    RedisDocumentStore,
    Settings,
    configure_logging,
    get_settings,
    seed_movies,
)
from myflix_gateway.auth import AccessGuard, InternalFault, LoginVerifier, SessionIssuer, TokenCodec
from myflix_gateway.middleware import RequestLogMiddleware
from myflix_gateway.routes import auth, movies, pages, users


log = structlog.get_logger()


def build_store(settings: Settings) -> DocumentStore:
    """설정에 따라 저장소 구현체 선택"""
    if settings.store_backend == "redis":
        return RedisDocumentStore(settings)
    return InMemoryDocumentStore()


# ============================================================
# 애플리케이션 수명주기 관리
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 수명주기 핸들러

    시작 시 (Startup):
    - 저장소 연결
    - 영화 카탈로그 시드 (MOVIES_SEED_PATH 설정 시)

    종료 시 (Shutdown):
    - 저장소 연결 해제
    """
    settings: Settings = app.state.settings
    store: DocumentStore = app.state.store

    # ========== Startup ==========
    log.info("gateway_starting", environment=settings.environment, store=settings.store_backend)
    await store.connect()

    if settings.movies_seed_path:
        await seed_movies(store, settings.movies_seed_path)

    # yield 이후는 Shutdown 시 실행됨
    yield

    # ========== Shutdown ==========
    await store.disconnect()
    log.info("gateway_stopped")


# ============================================================
# 예외 핸들러
# ============================================================

async def internal_fault_handler(request: Request, exc: InternalFault) -> JSONResponse:
    """해싱/서명 오류: 인증 실패로 낮추지 않고 500"""
    log.error("internal_fault", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> PlainTextResponse:
    log.error("unhandled_error", path=request.url.path, error=repr(exc), exc_info=exc)
    return PlainTextResponse(
        "Oops, something broke! Please try again later.",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


# ============================================================
# 애플리케이션 팩토리
# ============================================================

def create_app(settings: Optional[Settings] = None, store: Optional[DocumentStore] = None) -> FastAPI:
    """
    FastAPI 애플리케이션 생성 및 설정

    설정 항목:
    1. 인증 컴포넌트 조립 (TokenCodec → 전략 객체)
    2. CORS / 요청 로그 미들웨어
    3. 라우터 등록
    4. 예외 핸들러, 정적 파일
    """
    settings = settings or get_settings()
    store = store or build_store(settings)

    app = FastAPI(
        title="myFlix API",
        description="Movie catalog and favorites API",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ========== 인증 컴포넌트 ==========
    # 서명 키는 여기서 한 번만 읽어 코덱에 주입
    codec = TokenCodec(settings.jwt_secret_key.get_secret_value(), algorithm=settings.jwt_algorithm)

    app.state.settings = settings
    app.state.store = store
    app.state.token_codec = codec
    app.state.login_verifier = LoginVerifier(store, rounds=settings.bcrypt_rounds)
    app.state.session_issuer = SessionIssuer(codec)
    app.state.access_guard = AccessGuard(codec, store)

    # ========== 미들웨어 설정 ==========
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogMiddleware)

    # ========== 라우터 등록 ==========
    app.include_router(pages.router, tags=["Pages"])
    app.include_router(auth.router, tags=["Authentication"])
    app.include_router(movies.router, prefix="/movies", tags=["Movies"])
    app.include_router(users.router, prefix="/users", tags=["Users"])

    # ========== 예외 핸들러 ==========
    app.add_exception_handler(InternalFault, internal_fault_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ========== 정적 파일 ==========
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    return app


# ============================================================
# 애플리케이션 인스턴스
# ============================================================

app = create_app()


def run() -> None:
    """콘솔 스크립트 진입점 (myflix-api)"""
    import uvicorn

    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
