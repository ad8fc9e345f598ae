"""
JWT 토큰 코덱 (Token Codec)
- 클레임 → 서명된 토큰 (로그인 시)
- 토큰 → 검증된 클레임 (보호된 요청마다)

서명 키는 생성자로 주입 (전역 상수 없음)
앱 시작 시 한 번 생성되어 요청 간 공유 (불변)
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from pydantic import ValidationError

from myflix_shared import TokenClaims
from .errors import (
    InternalFault,
    TokenBadSignature,
    TokenExpired,
    TokenMalformed,
)


# 토큰 수명: 7일 고정 (Refresh Token 없음)
TOKEN_LIFETIME = timedelta(days=7)

# HMAC 계열만 허용
SUPPORTED_ALGORITHMS = ("HS256", "HS384", "HS512")


class TokenCodec:
    """
    JWT 인코딩/디코딩

    토큰 형식: header.payload.signature (base64url, 점 구분)

    Payload 구조:
    {
        "sub": "alice123",   # Subject: username
        "iat": 1707200000,   # Issued At: 발급 시간
        "exp": 1707804800    # Expiration: 발급 + 7일
    }
    """

    def __init__(self, secret_key: str, algorithm: str = "HS256", lifetime: timedelta = TOKEN_LIFETIME):
        if not secret_key:
            raise InternalFault("JWT secret key is not configured")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise InternalFault(f"Unsupported JWT algorithm: {algorithm}")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._lifetime = lifetime

    def __repr__(self) -> str:
        # 서명 키는 repr 에 포함하지 않음
        return f"TokenCodec(algorithm={self._algorithm!r}, lifetime={self._lifetime!r})"

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def lifetime(self) -> timedelta:
        return self._lifetime

    # ============================================================
    # 클레임 생성
    # ============================================================

    def build_claims(self, subject: str, now: Optional[datetime] = None) -> TokenClaims:
        """발급 시각(now, 기본 현재 UTC) 기준 exp = iat + 7일"""
        issued_at = (now or datetime.now(timezone.utc)).replace(microsecond=0)
        return TokenClaims(
            sub=subject,
            iat=issued_at,
            exp=issued_at + self._lifetime,
            alg=self._algorithm,
        )

    # ============================================================
    # 인코딩 (서명)
    # ============================================================

    def encode(self, claims: TokenClaims) -> str:
        """
        클레임을 서명된 토큰 문자열로 변환

        서명 실패는 인증 실패가 아닌 InternalFault (500)
        """
        payload = {
            "sub": claims.sub,
            "iat": int(claims.iat.timestamp()),
            "exp": int(claims.exp.timestamp()),
        }
        try:
            return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise InternalFault(f"token signing failed: {e}") from e

    # ============================================================
    # 디코딩 (검증)
    # ============================================================

    def decode(self, token: str) -> TokenClaims:
        """
        토큰 검증 후 클레임 반환

        검증 순서 (PyJWT):
        1. 형식 (세그먼트 3개, base64url, JSON 헤더)
        2. 서명 (헤더 알고리즘 포함) → 위조 토큰은 만료 여부와 무관하게 거부
        3. 만료 (now >= exp)

        iat 는 검증하지 않음 (서명에 포함되고, 유효 기간은 exp 로 판단)
        → 인스턴스 간 시계 오차로 iat 가 약간 미래여도 정상 토큰

        헤더 한 글자 변조:
        - 헤더가 여전히 JSON 으로 해석되면 → TokenBadSignature (서명/알고리즘 불일치)
        - base64/JSON 해석 불가 → TokenMalformed (서명 검증 전 단계에서 실패)
        어느 쪽이든 TokenError 이므로 클라이언트 응답은 동일한 401

        Raises:
            TokenMalformed: 형식 오류, 필수 클레임 누락
            TokenBadSignature: 서명 불일치, 다른 알고리즘
            TokenExpired: 서명은 유효하지만 만료
        """
        if not token or token.count(".") != 2:
            raise TokenMalformed("Token must have three segments")

        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"], "verify_iat": False},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Token has expired") from e
        except (jwt.InvalidSignatureError, jwt.InvalidAlgorithmError) as e:
            # InvalidSignatureError 는 DecodeError 하위 클래스 → 먼저 처리
            raise TokenBadSignature("Token signature mismatch") from e
        except jwt.InvalidTokenError as e:
            raise TokenMalformed(f"Invalid token: {e}") from e

        try:
            return TokenClaims(
                sub=payload["sub"],
                iat=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                exp=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
                alg=self._algorithm,
            )
        except (KeyError, TypeError, ValueError, OverflowError, ValidationError) as e:
            raise TokenMalformed("Token claims are invalid") from e
