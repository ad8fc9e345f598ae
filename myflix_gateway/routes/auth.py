"""
인증 라우터 (Authentication Routes)
- 로그인 → JWT 토큰 발급 (세션/쿠키 없음)
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from myflix_shared import LoginErrorResponse, LoginRequest, LoginResponse
from myflix_gateway.auth import (
    CredentialFailure,
    LoginVerifier,
    SessionIssuer,
    get_login_verifier,
    get_session_issuer,
)


router = APIRouter()

LOGIN_FAILED_MESSAGE = "Something is not right"

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_credentials(request: Request) -> LoginRequest:
    """
    로그인 본문 읽기 (JSON 또는 form)

    본문이 없거나 형식이 맞지 않으면 빈 자격 증명 → 검증 단계에서 400
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        data = {key: value for key, value in form.items() if isinstance(value, str)}
    else:
        try:
            data = await request.json()
        except ValueError:
            data = {}

    if not isinstance(data, dict):
        return LoginRequest()
    try:
        return LoginRequest.model_validate(data)
    except ValidationError:
        return LoginRequest()


# ============== 로그인 ==============
@router.post(
    "/login",
    response_model=LoginResponse,
    responses={status.HTTP_400_BAD_REQUEST: {"model": LoginErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": LoginRequest.model_json_schema()}},
        },
    },
)
async def login(
    credentials: Annotated[LoginRequest, Depends(read_credentials)],
    verifier: Annotated[LoginVerifier, Depends(get_login_verifier)],
    issuer: Annotated[SessionIssuer, Depends(get_session_issuer)],
):
    """
    로그인 및 JWT 토큰 발급

    1. username 으로 사용자 조회 + 비밀번호 검증 (bcrypt)
    2. 실패: 400 (사용자 없음/비밀번호 불일치 구분 없음)
    3. 성공: Access Token 생성 (7일) → {user, token}
    """
    try:
        user = await verifier.verify_login(credentials.username, credentials.password)
    except CredentialFailure as exc:
        body = LoginErrorResponse(message=LOGIN_FAILED_MESSAGE, error=exc.message)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())

    # 토큰 발급은 검증 성공 후에만
    session = issuer.issue_session(user)
    return LoginResponse(user=user.to_public(), token=session.token)
