"""
Redis 문서 저장소
사용자/영화 문서를 Redis에 JSON 으로 저장

키 구조:
1. user:{username}            → 사용자 JSON (즐겨찾기 제외)
2. user:{username}:favorites  → 즐겨찾기 영화 ID Set (SADD/SREM 으로 원자적 추가/삭제)
3. users                      → username Set (목록 조회용 인덱스)
4. movie:{id}                 → 영화 JSON
5. movies                     → 영화 ID Set
"""
import json
from typing import Any, Iterable, Optional

import redis.asyncio as redis
import structlog

from .config import Settings, get_settings
from .models import Movie, UserRecord
from .store import DocumentStore, DuplicateKeyError


log = structlog.get_logger()

USERS_INDEX = "users"
MOVIES_INDEX = "movies"


def _user_key(username: str) -> str:
    return f"user:{username}"


def _favorites_key(username: str) -> str:
    return f"user:{username}:favorites"


def _movie_key(movie_id: str) -> str:
    return f"movie:{movie_id}"


class RedisDocumentStore(DocumentStore):
    """
    비동기 Redis 저장소

    앱 시작 시 connect(), 종료 시 disconnect()
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._client: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Redis 서버에 연결"""
        self._client = redis.from_url(
            self.settings.redis_url,
            encoding="utf-8",
            decode_responses=True  # 바이트 대신 문자열 반환
        )
        log.info("store_connected", backend="redis", host=self.settings.redis_host, port=self.settings.redis_port)

    async def disconnect(self) -> None:
        """Redis 연결 해제"""
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> redis.Redis:
        """Redis 클라이언트 인스턴스 반환"""
        if not self._client:
            raise RuntimeError("Redis client not connected. Call connect() first.")
        return self._client

    # ============================================================
    # 1. 사용자 (Users)
    # ============================================================

    @staticmethod
    def _dump_user(user: UserRecord) -> str:
        return user.model_dump_json(exclude={"favorite_movies"})

    async def _load_user(self, username: str, raw: Optional[str]) -> Optional[UserRecord]:
        if raw is None:
            return None
        data = json.loads(raw)
        favorites = await self.client.smembers(_favorites_key(username))
        data["favorite_movies"] = sorted(favorites)
        return UserRecord.model_validate(data)

    async def find_user(self, username: str) -> Optional[UserRecord]:
        raw = await self.client.get(_user_key(username))
        return await self._load_user(username, raw)

    async def list_users(self) -> list[UserRecord]:
        usernames = sorted(await self.client.smembers(USERS_INDEX))
        if not usernames:
            return []
        raws = await self.client.mget([_user_key(u) for u in usernames])
        users = []
        for username, raw in zip(usernames, raws):
            user = await self._load_user(username, raw)
            if user is not None:
                users.append(user)
        return users

    async def create_user(self, user: UserRecord) -> UserRecord:
        """
        사용자 생성

        SET NX 로 username 고유성 보장 (동시 가입 경쟁에도 안전)
        """
        created = await self.client.set(_user_key(user.username), self._dump_user(user), nx=True)
        if not created:
            raise DuplicateKeyError(user.username)

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.sadd(USERS_INDEX, user.username)
            if user.favorite_movies:
                pipe.sadd(_favorites_key(user.username), *user.favorite_movies)
            await pipe.execute()
        return user

    async def update_user(self, username: str, fields: dict[str, Any]) -> Optional[UserRecord]:
        """
        $set 수정 (이름 변경 포함)

        이름 변경 시:
        1. 새 키를 SET NX 로 선점 (중복이면 DuplicateKeyError)
        2. 즐겨찾기 Set 이동, 기존 키 삭제, 인덱스 갱신 (트랜잭션)
        """
        current = await self.find_user(username)
        if current is None:
            return None

        updated = current.model_copy(update=fields, deep=True)
        if updated.username == username:
            await self.client.set(_user_key(username), self._dump_user(updated))
            return updated

        claimed = await self.client.set(_user_key(updated.username), self._dump_user(updated), nx=True)
        if not claimed:
            raise DuplicateKeyError(updated.username)

        has_favorites = await self.client.exists(_favorites_key(username))
        async with self.client.pipeline(transaction=True) as pipe:
            if has_favorites:
                pipe.rename(_favorites_key(username), _favorites_key(updated.username))
            pipe.delete(_user_key(username))
            pipe.srem(USERS_INDEX, username)
            pipe.sadd(USERS_INDEX, updated.username)
            await pipe.execute()
        return updated

    async def add_favorite(self, username: str, movie_id: str) -> Optional[UserRecord]:
        if not await self.client.exists(_user_key(username)):
            return None
        await self.client.sadd(_favorites_key(username), movie_id)
        return await self.find_user(username)

    async def remove_favorite(self, username: str, movie_id: str) -> Optional[UserRecord]:
        if not await self.client.exists(_user_key(username)):
            return None
        await self.client.srem(_favorites_key(username), movie_id)
        return await self.find_user(username)

    async def delete_user(self, username: str) -> Optional[UserRecord]:
        user = await self.find_user(username)
        if user is None:
            return None
        async with self.client.pipeline(transaction=True) as pipe:
            pipe.delete(_user_key(username), _favorites_key(username))
            pipe.srem(USERS_INDEX, username)
            await pipe.execute()
        return user

    # ============================================================
    # 2. 영화 카탈로그 (Movies)
    # ============================================================

    async def list_movies(self) -> list[Movie]:
        movie_ids = sorted(await self.client.smembers(MOVIES_INDEX))
        if not movie_ids:
            return []
        raws = await self.client.mget([_movie_key(m) for m in movie_ids])
        return [Movie.model_validate_json(raw) for raw in raws if raw is not None]

    async def insert_movies(self, movies: Iterable[Movie]) -> int:
        movies = list(movies)
        if not movies:
            return 0
        async with self.client.pipeline(transaction=True) as pipe:
            for movie in movies:
                pipe.set(_movie_key(movie.id), movie.model_dump_json())
                pipe.sadd(MOVIES_INDEX, movie.id)
            await pipe.execute()
        return len(movies)

    async def count_movies(self) -> int:
        return await self.client.scard(MOVIES_INDEX)
