"""
공통 설정 모듈 (Shared Config)
환경변수를 로드하고 애플리케이션 설정 제공

Pydantic Settings를 사용하여:
- .env 파일에서 설정 로드
- 기본값 제공
- 타입 검증 자동 수행
"""
from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings


# 개발용 기본 서명 키 (프로덕션에서는 사용 거부)
DEFAULT_JWT_SECRET = "myflix-development-secret-change-me-in-production"


class Settings(BaseSettings):
    """
    애플리케이션 설정 클래스

    환경변수에서 값을 로드 (없으면 기본값 사용)
    환경변수 이름은 필드명과 동일 (대소문자 구분 없음)

    예: REDIS_HOST 환경변수 → redis_host 필드
    """

    # ============================================================
    # 환경 설정
    # ============================================================
    environment: str = "development"  # development, staging, production

    # ============================================================
    # 문서 저장소 (Document Store)
    # ============================================================
    store_backend: Literal["memory", "redis"] = "memory"

    # ============================================================
    # Redis (store_backend=redis 일 때 사용)
    # ============================================================
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_password: str = ""
    redis_db: int = 0

    # ============================================================
    # JWT 인증
    # ============================================================
    # SecretStr: repr/로그에 값이 노출되지 않음
    jwt_secret_key: SecretStr = SecretStr(DEFAULT_JWT_SECRET)
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"

    # ============================================================
    # 비밀번호 해싱 (bcrypt cost factor)
    # ============================================================
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # ============================================================
    # HTTP 서버
    # ============================================================
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = ["*"]
    static_dir: str = "public"           # 정적 파일 + documentation.html
    movies_seed_path: str = ""           # 비어 있으면 시드 안 함

    # ============================================================
    # 로깅
    # ============================================================
    log_level: str = "INFO"

    # ============================================================
    # 계산된 속성 (Property)
    # ============================================================

    @property
    def redis_url(self) -> str:
        """
        Redis 연결 URL

        형식: redis://[:password@]host:port/db_number
        """
        if self.redis_password:
            return f"redis://:{self.redis_password}@{self.redis_host}:{self.redis_port}/{self.redis_db}"
        return f"redis://{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @model_validator(mode="after")
    def _reject_default_secret_in_production(self) -> "Settings":
        """프로덕션에서 개발용 서명 키 사용 금지"""
        if self.is_production and self.jwt_secret_key.get_secret_value() == DEFAULT_JWT_SECRET:
            raise ValueError("JWT_SECRET_KEY must be set in production")
        return self

    class Config:
        """Pydantic 설정"""
        env_file = ".env"           # .env 파일에서 로드
        env_file_encoding = "utf-8"


# ============================================================
# 싱글톤 설정 인스턴스
# ============================================================

@lru_cache()
def get_settings() -> Settings:
    """
    설정 인스턴스 반환 (캐시됨)

    lru_cache로 한 번만 로드하고 재사용
    서명 키도 프로세스 시작 시 한 번만 읽음
    """
    return Settings()
