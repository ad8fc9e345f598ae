"""
인증 모듈 (Auth Module)

주요 컴포넌트:
- password: 비밀번호 해싱/검증 (bcrypt)
- jwt_handler: JWT 토큰 코덱
- strategies: 로그인 검증, 세션 발급, Bearer 인가
- dependencies: FastAPI 인증 의존성 (라우트 보호용)
- errors: 인증 예외 계층
"""
from .errors import (
    AuthError,
    CredentialFailure,
    TokenError,
    TokenMissing,
    TokenMalformed,
    TokenBadSignature,
    TokenExpired,
    IdentityGone,
    InternalFault,
)
from .password import (
    hash_password,         # 비밀번호 해싱
    verify_password,       # 비밀번호 검증
)
from .jwt_handler import TOKEN_LIFETIME, TokenCodec
from .strategies import (
    AccessGuard,           # Bearer 전략
    LoginVerifier,         # Local 전략
    Session,
    SessionIssuer,         # 토큰 발급
    extract_bearer_token,
)
from .dependencies import (
    CurrentUser,
    StoreDep,
    get_app_settings,
    get_current_user,      # 인증 필수 의존성
    get_store,
    get_login_verifier,
    get_session_issuer,
    get_access_guard,
)

__all__ = [
    "AuthError",
    "CredentialFailure",
    "TokenError",
    "TokenMissing",
    "TokenMalformed",
    "TokenBadSignature",
    "TokenExpired",
    "IdentityGone",
    "InternalFault",
    "hash_password",
    "verify_password",
    "TOKEN_LIFETIME",
    "TokenCodec",
    "AccessGuard",
    "LoginVerifier",
    "Session",
    "SessionIssuer",
    "extract_bearer_token",
    "CurrentUser",
    "StoreDep",
    "get_app_settings",
    "get_current_user",
    "get_store",
    "get_login_verifier",
    "get_session_issuer",
    "get_access_guard",
]
