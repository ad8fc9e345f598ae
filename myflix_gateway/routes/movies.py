"""
영화 라우터 (Movie Routes)
- 영화 목록 (공개)
- 제목/장르/감독 조회 (인증 필요)
"""
from fastapi import APIRouter, HTTPException, status

from myflix_shared import Director, Genre, Movie
from myflix_gateway.auth import CurrentUser, StoreDep


router = APIRouter()


async def _find_or_404(store, field: str, value: str, label: str) -> Movie:
    movie = await store.find_movie(field, value)
    if movie is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} {value} was not found")
    return movie


# ============== 영화 목록 ==============
@router.get("", response_model=list[Movie])
async def list_movies(store: StoreDep):
    return await store.list_movies()


# ============== 장르/감독 조회 ==============
# 장르/감독은 영화 문서에 내장 → 해당 이름을 가진 첫 영화에서 추출
@router.get("/genre/{genre_name}", response_model=Genre)
async def get_genre(genre_name: str, user: CurrentUser, store: StoreDep):
    movie = await _find_or_404(store, "genre.name", genre_name, "Genre")
    return movie.genre


@router.get("/director/{director_name}", response_model=Director)
async def get_director(director_name: str, user: CurrentUser, store: StoreDep):
    movie = await _find_or_404(store, "director.name", director_name, "Director")
    return movie.director


# ============== 제목으로 조회 ==============
@router.get("/{title}", response_model=Movie)
async def get_movie(title: str, user: CurrentUser, store: StoreDep):
    return await _find_or_404(store, "title", title, "Movie")
