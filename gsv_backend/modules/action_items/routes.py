from fastapi import APIRouter, Depends, Query
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.action_items.schemas import (
    ActionItemCreate, ActionItemUpdate, ActionItemList, ActionItemEnvelope,
    CommentCreate, CommentResponse, BulkActionRequest, BulkActionResponse
)
from gsv_backend.modules.action_items.service import ActionItemService
from gsv_backend.core.dependencies import get_current_user
from supabase import Client
from typing import List, Dict, Optional

router = APIRouter(prefix="/action-items", tags=["action-items"])


def get_action_item_service(supabase: Client = Depends(get_supabase)) -> ActionItemService:
    return ActionItemService(supabase)


@router.get("", response_model=ActionItemList)
async def list_action_items(
    status: Optional[str] = None,
    priority: Optional[str] = None,
    item_type: Optional[str] = Query(default=None, alias="type"),
    assigned_to: Optional[str] = None,
    limit: int = Query(default=50, ge=1, le=500),
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    """Visible items plus dashboard stats; assigned_to accepts 'me' or a user id"""
    return service.list_items(user_data, status, priority, item_type, assigned_to, limit)


@router.post("", response_model=ActionItemEnvelope, status_code=201)
async def create_action_item(
    body: ActionItemCreate,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    return ActionItemEnvelope(item=service.create_item(body, user_data))


@router.post("/bulk", response_model=BulkActionResponse)
async def bulk_action_items(
    body: BulkActionRequest,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    return BulkActionResponse(message=service.bulk_action(body, user_data))


@router.get("/{item_id}", response_model=ActionItemEnvelope)
async def get_action_item(
    item_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    return ActionItemEnvelope(item=service.get_item(item_id, user_data))


@router.patch("/{item_id}", response_model=ActionItemEnvelope)
async def update_action_item(
    item_id: str,
    body: ActionItemUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    return ActionItemEnvelope(item=service.update_item(item_id, body, user_data))


@router.delete("/{item_id}")
async def delete_action_item(
    item_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    service.delete_item(item_id, user_data)
    return {"ok": True, "message": "Action item deleted"}


@router.get("/{item_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    item_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    return service.list_comments(item_id, user_data)


@router.post("/{item_id}/comments", response_model=CommentResponse, status_code=201)
async def add_comment(
    item_id: str,
    body: CommentCreate,
    user_data: Dict = Depends(get_current_user),
    service: ActionItemService = Depends(get_action_item_service)
):
    return service.add_comment(item_id, body, user_data)
