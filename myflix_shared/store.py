"""
문서 저장소 (Document Store)
사용자/영화 문서의 조회, 생성, 수정($set), 즐겨찾기 추가/삭제($addToSet/$pull)

구현체:
- InMemoryDocumentStore: 프로세스 메모리 (개발/테스트 기본값)
- RedisDocumentStore: Redis 기반 (redis_client 모듈)

인증 코어는 find_user 만 사용 (읽기 전용)
"""
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from .models import Movie, UserRecord


# ============================================================
# 저장소 예외
# ============================================================

class StoreError(Exception):
    """저장소 오류 기본 클래스"""


class DuplicateKeyError(StoreError):
    """고유 키(username) 중복"""

    def __init__(self, key: str):
        super().__init__(f"{key} already exists")
        self.key = key


def _lookup(document: dict, path: str) -> Any:
    """점 표기 경로로 중첩 필드 값 조회 (예: "genre.name")"""
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


# ============================================================
# 저장소 인터페이스
# ============================================================

class DocumentStore(ABC):
    """
    문서 저장소 추상 클래스

    모든 메서드는 비동기 (I/O 대기 중 이벤트 루프 양보)
    존재하지 않는 사용자에 대한 수정은 None 반환
    """

    async def connect(self) -> None:
        """저장소 연결 (필요한 구현체만)"""

    async def disconnect(self) -> None:
        """저장소 연결 해제"""

    # ---------- 사용자 ----------

    @abstractmethod
    async def find_user(self, username: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def list_users(self) -> list[UserRecord]:
        ...

    @abstractmethod
    async def create_user(self, user: UserRecord) -> UserRecord:
        """사용자 생성 (username 중복 시 DuplicateKeyError)"""

    @abstractmethod
    async def update_user(self, username: str, fields: dict[str, Any]) -> Optional[UserRecord]:
        """
        $set 수정

        fields 에 다른 username 이 있으면 이름 변경 (중복 시 DuplicateKeyError)
        """

    @abstractmethod
    async def add_favorite(self, username: str, movie_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def remove_favorite(self, username: str, movie_id: str) -> Optional[UserRecord]:
        ...

    @abstractmethod
    async def delete_user(self, username: str) -> Optional[UserRecord]:
        """삭제된 사용자 반환 (없으면 None)"""

    # ---------- 영화 ----------

    @abstractmethod
    async def list_movies(self) -> list[Movie]:
        ...

    @abstractmethod
    async def insert_movies(self, movies: Iterable[Movie]) -> int:
        ...

    async def count_movies(self) -> int:
        return len(await self.list_movies())

    async def find_movie(self, field: str, value: Any) -> Optional[Movie]:
        """
        필드 값이 일치하는 첫 번째 영화

        field 는 점 표기 경로 지원: "title", "genre.name", "director.name"
        """
        for movie in await self.list_movies():
            if _lookup(movie.model_dump(), field) == value:
                return movie
        return None


# ============================================================
# 인메모리 구현체
# ============================================================

class InMemoryDocumentStore(DocumentStore):
    """
    프로세스 메모리 저장소

    변경 메서드 내부에 await 가 없어 이벤트 루프 안에서 원자적으로 동작
    """

    def __init__(self):
        self._users: dict[str, UserRecord] = {}
        self._movies: dict[str, Movie] = {}

    async def find_user(self, username: str) -> Optional[UserRecord]:
        user = self._users.get(username)
        return user.model_copy(deep=True) if user else None

    async def list_users(self) -> list[UserRecord]:
        return [u.model_copy(deep=True) for u in self._users.values()]

    async def create_user(self, user: UserRecord) -> UserRecord:
        if user.username in self._users:
            raise DuplicateKeyError(user.username)
        self._users[user.username] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    async def update_user(self, username: str, fields: dict[str, Any]) -> Optional[UserRecord]:
        current = self._users.get(username)
        if current is None:
            return None

        updated = current.model_copy(update=fields, deep=True)
        if updated.username != username:
            if updated.username in self._users:
                raise DuplicateKeyError(updated.username)
            del self._users[username]
        self._users[updated.username] = updated
        return updated.model_copy(deep=True)

    async def add_favorite(self, username: str, movie_id: str) -> Optional[UserRecord]:
        user = self._users.get(username)
        if user is None:
            return None
        if movie_id not in user.favorite_movies:
            user.favorite_movies.append(movie_id)
        return user.model_copy(deep=True)

    async def remove_favorite(self, username: str, movie_id: str) -> Optional[UserRecord]:
        user = self._users.get(username)
        if user is None:
            return None
        user.favorite_movies = [m for m in user.favorite_movies if m != movie_id]
        return user.model_copy(deep=True)

    async def delete_user(self, username: str) -> Optional[UserRecord]:
        return self._users.pop(username, None)

    async def list_movies(self) -> list[Movie]:
        return [m.model_copy(deep=True) for m in self._movies.values()]

    async def insert_movies(self, movies: Iterable[Movie]) -> int:
        count = 0
        for movie in movies:
            self._movies[movie.id] = movie.model_copy(deep=True)
            count += 1
        return count

    async def count_movies(self) -> int:
        return len(self._movies)
