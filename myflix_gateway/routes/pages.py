"""
페이지 라우터 (Page Routes)
- 환영 메시지, API 문서 페이지, 헬스체크
"""
from pathlib import Path
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse, PlainTextResponse

from myflix_shared import Settings
from myflix_gateway.auth import get_app_settings


router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def welcome():
    return "Welcome to myFlix!"


@router.get("/documentation", response_class=FileResponse)
async def documentation(settings: Annotated[Settings, Depends(get_app_settings)]):
    """public/documentation.html 제공"""
    page = Path(settings.static_dir) / "documentation.html"
    if not page.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Documentation not found")
    return FileResponse(page, media_type="text/html")


@router.get("/health")
async def health_check():
    """
    헬스체크 엔드포인트

    로드밸런서/쿠버네티스가 서버 상태 확인용으로 사용
    """
    return {"status": "healthy", "service": "myflix-gateway"}
