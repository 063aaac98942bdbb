from fastapi import APIRouter, Depends, Query, Request
from gsv_backend.config import settings
from gsv_backend.database.supabase_client import get_supabase
from gsv_backend.modules.materials.schemas import (
    MaterialRequestCreate, MaterialApproval, MaterialRequestEnvelope, MaterialRequestList
)
from gsv_backend.modules.materials.service import MaterialService
from gsv_backend.core.dependencies import get_current_user, require_role, get_access_cache
from gsv_backend.core.rate_limit import limiter
from supabase import Client
from typing import Any, Dict, Optional

router = APIRouter(prefix="/materials", tags=["materials"])


def get_material_service(supabase: Client = Depends(get_supabase)) -> MaterialService:
    return MaterialService(supabase)


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@router.post("/request", response_model=MaterialRequestEnvelope)
@limiter.limit(settings.material_request_rate_limit)
async def create_material_request(
    request: Request,
    body: MaterialRequestCreate,
    user_data: Dict = Depends(require_role("volunteer", detail="Only volunteers can create material requests")),
    service: MaterialService = Depends(get_material_service)
):
    """Submit a material request for the caller's team presentation"""
    material_request = service.create_request(user_data, body)
    return MaterialRequestEnvelope(
        request=material_request,
        message="Material request submitted successfully and is pending founder approval."
    )


@router.get("/request", response_model=MaterialRequestList)
async def list_material_requests(
    status: Optional[str] = None,
    request_type: Optional[str] = Query(default=None, alias="requestType"),
    user_data: Dict = Depends(get_current_user),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: MaterialService = Depends(get_material_service)
):
    return MaterialRequestList(requests=service.list_requests(user_data, status, request_type, cache))


@router.post("/approve", response_model=MaterialRequestEnvelope)
@limiter.limit(settings.material_approve_rate_limit)
async def approve_material_request(
    request: Request,
    body: Optional[MaterialApproval] = None,
    user_data: Dict = Depends(get_current_user),
    cache: Dict[str, Any] = Depends(get_access_cache),
    service: MaterialService = Depends(get_material_service)
):
    """Approve or reject a material request (founder, or intern with material_requests_approve)"""
    result = service.process_approval(user_data, body or MaterialApproval(), cache, ip_address=_client_ip(request))
    return MaterialRequestEnvelope(**result)
