"""
Shared 패키지
Gateway 에서 사용하는 설정, 데이터 모델, 문서 저장소 모음

주요 모듈:
- config: 환경 설정 관리
- models: Pydantic 데이터 모델
- store: 문서 저장소 인터페이스 + 인메모리 구현
- redis_client: Redis 문서 저장소
- seed: 영화 카탈로그 시드
- log_config: structlog 설정
"""
from .config import get_settings, Settings
from .models import (
    # 카탈로그 모델
    Genre,
    Director,
    Movie,
    # User 모델
    UserBase,
    UserCreate,
    UserResponse,
    UserRecord,
    # Auth 모델
    LoginRequest,
    LoginResponse,
    LoginErrorResponse,
    MessageResponse,
    TokenClaims,
)
from .store import DocumentStore, InMemoryDocumentStore, StoreError, DuplicateKeyError
from .redis_client import RedisDocumentStore
from .seed import load_movies, seed_movies
from .log_config import configure_logging

__all__ = [
    # 설정
    "get_settings",
    "Settings",
    # 카탈로그 모델
    "Genre",
    "Director",
    "Movie",
    # User 모델
    "UserBase",
    "UserCreate",
    "UserResponse",
    "UserRecord",
    # Auth 모델
    "LoginRequest",
    "LoginResponse",
    "LoginErrorResponse",
    "MessageResponse",
    "TokenClaims",
    # 저장소
    "DocumentStore",
    "InMemoryDocumentStore",
    "RedisDocumentStore",
    "StoreError",
    "DuplicateKeyError",
    # 시드
    "load_movies",
    "seed_movies",
    # 로깅
    "configure_logging",
]
