"""
인증 전략 (Auth Strategies)

- LoginVerifier (local): username + 비밀번호 → 사용자
- SessionIssuer: 로그인 성공 사용자 → 토큰 발급
- AccessGuard (bearer): Authorization 헤더 → 토큰 검증 → 사용자 재조회

세 객체 모두 create_app 에서 명시적으로 조립되어 app.state 에 보관됨
"""
from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache
from typing import Optional

import structlog
from starlette.concurrency import run_in_threadpool

from myflix_shared import DocumentStore, TokenClaims, UserRecord
from .errors import CredentialFailure, IdentityGone, TokenMissing
from .jwt_handler import TokenCodec
from .password import DEFAULT_ROUNDS, hash_password, verify_password


log = structlog.get_logger()

# 사용자 없음 / 비밀번호 불일치 모두 같은 메시지 (username 열거 방지)
INVALID_CREDENTIALS = "Incorrect username or password."


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """'Bearer <token>' 헤더에서 토큰 추출 (스킴은 대소문자 무시)"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


@lru_cache()
def _dummy_hash(rounds: int) -> str:
    """없는 사용자 로그인 시 비교할 더미 해시 (rounds 별로 한 번만 생성)"""
    return hash_password("myflix-dummy-password", rounds=rounds)


# ============================================================
# Local 전략: 로그인 검증
# ============================================================

class LoginVerifier:
    """
    username/비밀번호 검증

    사용자가 없어도 더미 해시와 비교하여 두 실패 경로의 응답 시간을 맞춤
    bcrypt 는 CPU 작업이므로 스레드풀에서 실행 (이벤트 루프 차단 방지)
    """

    def __init__(self, store: DocumentStore, rounds: int = DEFAULT_ROUNDS):
        self._store = store
        self._rounds = rounds

    def _check(self, password: str, user: Optional[UserRecord]) -> bool:
        hashed = user.password_hash if user else _dummy_hash(self._rounds)
        matched = verify_password(password, hashed)
        return matched and user is not None

    async def verify_login(self, username: str, password: str) -> UserRecord:
        """
        Raises:
            CredentialFailure: 사용자 없음 또는 비밀번호 불일치 (구분 없음)
        """
        user = await self._store.find_user(username) if username else None
        matched = await run_in_threadpool(self._check, password, user)

        if not matched:
            log.info("login_rejected", username=username, user_found=user is not None)
            raise CredentialFailure(INVALID_CREDENTIALS, user=user)

        log.info("login_succeeded", username=user.username)
        return user


# ============================================================
# 세션 발급: 로그인 성공 → 토큰
# ============================================================

@dataclass(frozen=True)
class Session:
    """로그인 결과 (서버에 저장하지 않음)"""
    user: UserRecord
    token: str
    claims: TokenClaims


class SessionIssuer:
    """LoginVerifier 성공 후에만 호출"""

    def __init__(self, codec: TokenCodec):
        self._codec = codec

    def issue_session(self, user: UserRecord, now: Optional[datetime] = None) -> Session:
        """
        sub = username, exp = now + 7일 토큰 발급

        코덱 오류는 InternalFault 로 그대로 전파
        """
        claims = self._codec.build_claims(user.username, now=now)
        token = self._codec.encode(claims)
        return Session(user=user, token=token, claims=claims)


# ============================================================
# Bearer 전략: 요청 인가
# ============================================================

class AccessGuard:
    """
    Bearer 토큰 → 사용자

    토큰이 유효해도 사용자를 저장소에서 다시 조회
    → 발급 후 삭제된 사용자는 만료 전이라도 거부 (폐기 목록 없음)
    """

    def __init__(self, codec: TokenCodec, store: DocumentStore):
        self._codec = codec
        self._store = store

    async def authorize(self, authorization: Optional[str]) -> UserRecord:
        """
        Raises:
            TokenMissing: 헤더 없음 / Bearer 아님
            TokenMalformed, TokenBadSignature, TokenExpired: 토큰 검증 실패
            IdentityGone: subject 사용자 없음
        """
        token = extract_bearer_token(authorization)
        if token is None:
            raise TokenMissing("Missing bearer token")

        claims = self._codec.decode(token)

        user = await self._store.find_user(claims.sub)
        if user is None:
            raise IdentityGone(f"Token subject no longer exists: {claims.sub}")
        return user
