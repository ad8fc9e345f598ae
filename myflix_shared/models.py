"""
공유 Pydantic 모델
저장소와 Gateway에서 공통으로 사용하는 데이터 모델

주요 모델 분류:
1. Catalog Models: 영화/장르/감독
2. User Models: 사용자 관련
3. Auth Models: 인증/토큰 관련
"""
from datetime import date, datetime, timezone
from typing import Optional
import uuid

from pydantic import BaseModel, EmailStr, Field, field_validator


# 사용자 이름 규칙: 5자 이상, 영문/숫자만
USERNAME_MIN_LENGTH = 5
USERNAME_PATTERN = r"^[A-Za-z0-9]+$"

# bcrypt는 72바이트까지만 입력으로 사용
PASSWORD_MAX_BYTES = 72


# ============================================================
# 카탈로그 모델 (Catalog Models)
# ============================================================

class Genre(BaseModel):
    """영화 장르"""
    name: str
    description: str = ""


class Director(BaseModel):
    """영화 감독"""
    name: str
    bio: str = ""
    birth: Optional[str] = None   # 연도 또는 ISO 날짜
    death: Optional[str] = None


class Movie(BaseModel):
    """
    영화 문서

    장르/감독은 별도 컬렉션 없이 영화 문서에 내장됨
    → /movies/genre/{name}, /movies/director/{name} 은 영화에서 추출
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    description: str = ""
    genre: Genre
    director: Director
    image_path: Optional[str] = None
    featured: bool = False


# ============================================================
# 사용자 모델 (User Models)
# ============================================================

class UserBase(BaseModel):
    """사용자 기본 모델 (요청 검증 규칙 포함)"""
    username: str = Field(..., min_length=USERNAME_MIN_LENGTH, pattern=USERNAME_PATTERN)
    email: EmailStr
    birthday: Optional[date] = None


class UserCreate(UserBase):
    """
    사용자 생성/수정 요청 모델

    PUT /users/{username} 도 전체 필드를 요구하므로 같은 모델 사용
    """
    password: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
        return value


class UserResponse(BaseModel):
    """
    사용자 응답 모델

    비밀번호 해시 제외한 사용자 정보 반환
    """
    username: str
    email: str
    birthday: Optional[date] = None
    favorite_movies: list[str] = []

    class Config:
        from_attributes = True  # UserRecord 에서 변환 허용


class UserRecord(BaseModel):
    """
    저장소에 보관되는 사용자 문서 (Identity)

    - password_hash: bcrypt 해시 (평문은 절대 저장하지 않음)
    - favorite_movies: 영화 ID 집합 (순서 무관, 중복 없음)
    """
    username: str
    password_hash: str
    email: str
    birthday: Optional[date] = None
    favorite_movies: list[str] = []

    def to_public(self) -> UserResponse:
        """해시를 제외한 응답 모델로 변환"""
        return UserResponse.model_validate(self)


# ============================================================
# 인증 모델 (Auth Models)
# ============================================================

class LoginRequest(BaseModel):
    """
    로그인 요청 모델

    필드가 빠지거나 null 이어도 422 대신 일반 로그인 실패(400)로 처리되도록 ""
    """
    username: str = ""
    password: str = ""

    @field_validator("username", "password", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value


class TokenClaims(BaseModel):
    """
    JWT 토큰 클레임

    JWT 내부에 포함된 정보:
    - sub: Subject (username)
    - iat: Issued At (발급 시간)
    - exp: Expiration (만료 시간, iat + 7일)
    - alg: 서명 알고리즘 (헤더 값)

    JWT는 초 단위 정수 타임스탬프를 사용하므로 UTC, 초 단위로 정규화
    """
    sub: str
    iat: datetime
    exp: datetime
    alg: str = "HS256"

    @field_validator("iat", "exp")
    @classmethod
    def _truncate_to_seconds(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(microsecond=0)


class LoginResponse(BaseModel):
    """로그인 성공 응답: 사용자 + 토큰"""
    user: UserResponse
    token: str


class LoginErrorResponse(BaseModel):
    """로그인 실패 응답 (사용자 존재 여부를 구분하지 않음)"""
    message: str
    error: str


class MessageResponse(BaseModel):
    """단순 메시지 응답"""
    message: str
