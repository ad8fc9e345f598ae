"""
비밀번호 해싱 (bcrypt)

bcrypt 특징:
- 솔트(salt) 자동 생성 → 같은 비밀번호도 매번 다른 해시
- 느린 해싱 (cost factor = rounds) → 무차별 대입 공격 방어
- checkpw 는 상수 시간 비교 → 타이밍 공격 방어
- 출력 형식: $2b$12$솔트+해시 (60자)
"""
import bcrypt

from .errors import InternalFault


DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """
    비밀번호를 bcrypt로 해싱

    가입/비밀번호 변경 시에만 호출
    잘못된 rounds 등 프리미티브 오류는 InternalFault
    """
    try:
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()
    except ValueError as e:
        raise InternalFault(f"password hashing failed: {e}") from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    입력 비밀번호가 저장된 해시와 일치하는지 검증

    해시가 비어 있거나 형식이 잘못되면 예외 대신 False
    """
    if not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except ValueError:
        return False
