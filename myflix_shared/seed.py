"""
영화 카탈로그 시드 (Catalog Seeding)

JSON 배열 파일을 읽어 비어 있는 저장소에 영화 문서를 채움
앱 시작 시 MOVIES_SEED_PATH 가 설정된 경우에만 실행
"""
import json
from pathlib import Path
from typing import Union

import structlog
from pydantic import TypeAdapter

from .models import Movie
from .store import DocumentStore


log = structlog.get_logger()

_movie_list = TypeAdapter(list[Movie])


def load_movies(path: Union[str, Path]) -> list[Movie]:
    """JSON 파일에서 영화 목록 로드 (형식 오류 시 ValidationError)"""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return _movie_list.validate_python(raw)


async def seed_movies(store: DocumentStore, path: Union[str, Path]) -> int:
    """
    저장소에 영화가 없을 때만 시드

    Returns:
        삽입한 영화 수 (이미 데이터가 있으면 0)
    """
    existing = await store.count_movies()
    if existing:
        log.info("catalog_seed_skipped", existing=existing)
        return 0

    inserted = await store.insert_movies(load_movies(path))
    log.info("catalog_seeded", inserted=inserted, path=str(path))
    return inserted
