"""
인증 예외 (Auth Errors)

AuthError 계열은 HTTP 경계에서 400(로그인) / 401(토큰)로 변환되고,
클래스 이름은 로그 진단용으로만 사용됨 (응답 본문은 구분하지 않음)

InternalFault 는 AuthError 가 아님 → 500 (운영 장애와 보안 실패를 로그에서 구분)
"""
from typing import Optional

from myflix_shared import UserRecord


class AuthError(Exception):
    """인증/인가 실패 기본 클래스"""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)
        self.message = message


class CredentialFailure(AuthError):
    """
    로그인 실패 (없는 사용자 또는 비밀번호 불일치)

    user: 조회된 사용자 (로그용, 신뢰 판단에 사용 금지)
    """

    def __init__(self, message: str, user: Optional[UserRecord] = None):
        super().__init__(message)
        self.user = user


class TokenError(AuthError):
    """Bearer 토큰 검증 실패"""


class TokenMissing(TokenError):
    """Authorization 헤더 없음 또는 Bearer 스킴 아님"""


class TokenMalformed(TokenError):
    """세그먼트 수 오류, 디코딩 불가, 클레임 누락"""


class TokenBadSignature(TokenError):
    """서명 불일치 또는 다른 알고리즘으로 서명된 토큰"""


class TokenExpired(TokenError):
    """서명은 유효하지만 만료된 토큰 (재로그인 필요)"""


class IdentityGone(AuthError):
    """토큰은 유효하지만 subject 사용자가 삭제됨"""


class InternalFault(Exception):
    """해싱/서명 프리미티브 오류 또는 설정 오류 (500)"""
