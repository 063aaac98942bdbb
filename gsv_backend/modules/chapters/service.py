from supabase import Client
from gsv_backend.modules.chapters.schemas import ChapterCreate, ChapterUpdate, ChapterResponse
from typing import Any, Dict, List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class ChapterService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _count(self, table: str, **filters: Any) -> int:
        query = self.supabase.table(table).select("id", count="exact")
        for column, value in filters.items():
            query = query.eq(column, value)
        result = query.execute()
        if getattr(result, "count", None) is not None:
            return result.count
        return len(result.data or [])

    def _with_stats(self, chapter: Dict[str, Any]) -> Dict[str, Any]:
        return {
            **chapter,
            "volunteer_count": self._count("volunteers", chapter_id=chapter["id"]),
            "presentation_count": self._count("presentations", chapter_id=chapter["id"]),
            "leadership_count": self._count("chapter_leadership", chapter_id=chapter["id"], is_active=True),
        }

    def list_chapters(self, with_stats: bool = False) -> List[ChapterResponse]:
        """All chapters by name; counts are included for signed-in callers"""
        try:
            result = self.supabase.table("chapters")\
                .select("*")\
                .order("name")\
                .execute()
            chapters = result.data or []
            if with_stats:
                chapters = [self._with_stats(chapter) for chapter in chapters]
            return [ChapterResponse(**chapter) for chapter in chapters]
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def get_chapter(self, chapter_id: str, with_stats: bool = False) -> ChapterResponse:
        try:
            result = self.supabase.table("chapters")\
                .select("*")\
                .eq("id", chapter_id)\
                .maybe_single()\
                .execute()
            if not result or not result.data:
                raise HTTPException(status_code=404, detail="Chapter not found")
            chapter = self._with_stats(result.data) if with_stats else result.data
            return ChapterResponse(**chapter)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def create_chapter(self, data: ChapterCreate) -> ChapterResponse:
        if not data.name or not data.name.strip() or not data.country or not data.country.strip():
            raise HTTPException(status_code=400, detail="Chapter name and country are required")
        try:
            payload = data.model_dump()
            payload.update({
                "name": data.name.strip(),
                "country": data.country.strip(),
                "currency": data.currency.upper(),
                "status": "forming",
            })
            result = self.supabase.table("chapters").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create chapter")
            logger.info("Chapter %s created", result.data[0]["id"])
            return ChapterResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_chapter(self, chapter_id: str, data: ChapterUpdate) -> ChapterResponse:
        update_data = data.model_dump(exclude_none=True)
        if not update_data:
            raise HTTPException(status_code=400, detail="No fields to update")
        if "currency" in update_data:
            update_data["currency"] = update_data["currency"].upper()
        try:
            result = self.supabase.table("chapters")\
                .update(update_data)\
                .eq("id", chapter_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Chapter not found")
            return ChapterResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))
