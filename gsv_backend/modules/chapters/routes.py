from fastapi import APIRouter, Depends
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.chapters.schemas import ChapterCreate, ChapterUpdate, ChapterResponse
from gsv_backend.modules.chapters.service import ChapterService
from gsv_backend.core.dependencies import get_optional_user, require_role
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/chapters", tags=["chapters"])

staff_only = require_role("founder", "intern", detail="Insufficient permissions")


def get_chapter_service(supabase: Client = Depends(get_supabase)) -> ChapterService:
    return ChapterService(supabase)


@router.get("", response_model=List[ChapterResponse])
async def list_chapters(
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: ChapterService = Depends(get_chapter_service)
):
    """Public chapter directory"""
    return service.list_chapters(with_stats=user_data is not None)


@router.post("", response_model=ChapterResponse, status_code=201)
async def create_chapter(
    body: ChapterCreate,
    user_data: Dict = Depends(staff_only),
    service: ChapterService = Depends(get_chapter_service)
):
    return service.create_chapter(body)


@router.get("/{chapter_id}", response_model=ChapterResponse)
async def get_chapter(
    chapter_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: ChapterService = Depends(get_chapter_service)
):
    return service.get_chapter(chapter_id, with_stats=user_data is not None)


@router.put("/{chapter_id}", response_model=ChapterResponse)
async def update_chapter(
    chapter_id: str,
    body: ChapterUpdate,
    user_data: Dict = Depends(staff_only),
    service: ChapterService = Depends(get_chapter_service)
):
    return service.update_chapter(chapter_id, body)
