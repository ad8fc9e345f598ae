"""
라우터 패키지 (Routes Package)

API 엔드포인트:
- auth: 로그인 (/login)
- movies: 영화 카탈로그 (/movies/*)
- users: 사용자 + 즐겨찾기 (/users/*)
- pages: 환영/문서/헬스체크
"""
from . import auth, movies, pages, users

__all__ = ["auth", "movies", "pages", "users"]
