"""
사용자 라우터 (User Routes)
- 회원가입 (공개), 조회/수정/삭제 (인증 필요)
- 즐겨찾기 영화 추가/삭제
"""
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from starlette.concurrency import run_in_threadpool

from myflix_shared import (
    DuplicateKeyError,
    MessageResponse,
    Settings,
    UserCreate,
    UserRecord,
    UserResponse,
)
from myflix_gateway.auth import CurrentUser, StoreDep, get_app_settings, hash_password


router = APIRouter()

SettingsDep = Annotated[Settings, Depends(get_app_settings)]


def _not_found(username: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{username} was not found")


async def _hash(password: str, settings: Settings) -> str:
    # bcrypt 는 CPU 작업 → 스레드풀
    return await run_in_threadpool(hash_password, password, settings.bcrypt_rounds)


# ============== 회원가입 ==============
@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, store: StoreDep, settings: SettingsDep):
    """
    새 사용자 등록

    1. username 중복 확인
    2. 비밀번호 해싱
    3. 사용자 저장
    """
    if await store.find_user(payload.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{payload.username} already exists"
        )

    record = UserRecord(
        username=payload.username,
        password_hash=await _hash(payload.password, settings),
        email=payload.email,
        birthday=payload.birthday,
    )
    try:
        user = await store.create_user(record)
    except DuplicateKeyError as e:
        # 조회 이후 동시에 가입된 경우
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return user.to_public()


# ============== 사용자 조회 ==============
@router.get("", response_model=list[UserResponse])
async def list_users(user: CurrentUser, store: StoreDep):
    """전체 사용자 목록 (비밀번호 해시 제외)"""
    return [u.to_public() for u in await store.list_users()]


@router.get("/{username}", response_model=UserResponse)
async def get_user(username: str, user: CurrentUser, store: StoreDep):
    found = await store.find_user(username)
    if found is None:
        raise _not_found(username)
    return found.to_public()


# ============== 사용자 수정 ==============
@router.put("/{username}", response_model=UserResponse)
async def update_user(
    username: str,
    payload: UserCreate,
    user: CurrentUser,
    store: StoreDep,
    settings: SettingsDep,
):
    """
    사용자 정보 수정 ($set)

    username 변경 가능 (이미 있는 이름이면 400)
    비밀번호는 새로 해싱하여 저장
    """
    fields = {
        "username": payload.username,
        "password_hash": await _hash(payload.password, settings),
        "email": payload.email,
        "birthday": payload.birthday,
    }
    try:
        updated = await store.update_user(username, fields)
    except DuplicateKeyError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    if updated is None:
        raise _not_found(username)
    return updated.to_public()


# ============== 즐겨찾기 ==============
@router.post("/{username}/movies/{movie_id}", response_model=UserResponse)
async def add_favorite(username: str, movie_id: str, user: CurrentUser, store: StoreDep):
    """즐겨찾기 추가 (이미 있으면 변화 없음)"""
    if await store.find_movie("id", movie_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Movie {movie_id} was not found")

    updated = await store.add_favorite(username, movie_id)
    if updated is None:
        raise _not_found(username)
    return updated.to_public()


@router.delete("/{username}/movies/{movie_id}", response_model=UserResponse)
async def remove_favorite(username: str, movie_id: str, user: CurrentUser, store: StoreDep):
    """즐겨찾기 삭제 (없는 영화 ID 여도 성공)"""
    updated = await store.remove_favorite(username, movie_id)
    if updated is None:
        raise _not_found(username)
    return updated.to_public()


# ============== 사용자 삭제 ==============
@router.delete("/{username}", response_model=MessageResponse)
async def delete_user(username: str, user: CurrentUser, store: StoreDep):
    deleted = await store.delete_user(username)
    if deleted is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{username} was not found"
        )
    return MessageResponse(message=f"{username} was deleted.")
