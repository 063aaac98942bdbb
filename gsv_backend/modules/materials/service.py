from supabase import Client
from gsv_backend.modules.materials.schemas import MaterialRequestCreate, MaterialApproval
from gsv_backend.modules.admin_settings.service import AdminSettingsService
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.core.dependencies import get_user_team_id, has_staff_permission
from gsv_backend.core.audit import log_system_event
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class MaterialService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.settings_service = AdminSettingsService(supabase)
        self.notifications = NotificationService(supabase)

    def _get_request(self, request_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("material_requests")\
            .select("*")\
            .eq("id", request_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            return None
        return result.data

    def _team_name(self, team_id: Any) -> str:
        try:
            result = self.supabase.table("volunteers")\
                .select("team_name")\
                .eq("id", team_id)\
                .maybe_single()\
                .execute()
            if result and result.data and result.data.get("team_name"):
                return result.data["team_name"]
        except Exception as e:
            logger.warning(f"Could not load team name for {team_id}: {e}")
        return "A volunteer group"

    def create_request(self, user_data: dict, data: MaterialRequestCreate) -> Dict[str, Any]:
        """Validate against procurement settings and submit a request for founder approval"""
        settings = self.settings_service.get_procurement_settings()
        request_type = data.request_type

        if request_type == "gsv_provided" and not settings["procurement_enabled"]:
            raise HTTPException(
                status_code=400,
                detail="GSV material procurement is currently disabled. Please select 'Volunteer Funded' or 'Kit Recommendation'."
            )
        if request_type == "volunteer_funded" and not settings["volunteer_self_fund_allowed"]:
            raise HTTPException(
                status_code=400,
                detail="Volunteer self-funding is currently disabled. Please select 'GSV Provided' or 'Kit Recommendation'."
            )

        estimated_cost = data.total_cost()
        max_budget = float(settings["max_budget_per_group"])
        if request_type == "gsv_provided" and estimated_cost > max_budget:
            raise HTTPException(
                status_code=400,
                detail=f"Estimated cost ${estimated_cost:.2f} exceeds the maximum budget of ${max_budget:.2f} per group."
            )

        justification = (data.budget_justification or "").strip()
        if settings["require_budget_justification"] and len(justification) < 10:
            raise HTTPException(
                status_code=400,
                detail="Budget justification is required and must be at least 10 characters long."
            )

        try:
            team_id = get_user_team_id(user_data["id"], self.supabase)
            if not team_id:
                raise HTTPException(status_code=400, detail="You are not currently assigned to a volunteer team")

            presentation = self.supabase.table("presentations")\
                .select("id, volunteer_team_id")\
                .eq("id", data.presentation_id)\
                .eq("volunteer_team_id", team_id)\
                .maybe_single()\
                .execute()
            if not presentation or not presentation.data:
                raise HTTPException(
                    status_code=400,
                    detail="Presentation not found or you don't have permission to request materials for it"
                )

            result = self.supabase.table("material_requests").insert({
                "group_id": team_id,
                "presentation_id": data.presentation_id,
                "request_type": request_type,
                "estimated_cost": estimated_cost,
                "budget_justification": justification or None,
                "items": [item.model_dump() for item in data.items],
                "delivery_preference": data.delivery_preference,
                "needed_by_date": data.needed_by_date.isoformat(),
                "status": "submitted",
                "created_by": user_data["id"],
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create material request")
            material_request = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating material request: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if settings["notify_on_request"]:
            self.notifications.notify(
                None,
                "material_request",
                "New Material Request Submitted",
                f"{self._team_name(team_id)} has submitted a material request for ${estimated_cost:.2f} "
                f"({request_type.replace('_', ' ')})",
                action_url="/dashboard/founder/material-requests",
                priority="high" if estimated_cost > 15 else "medium",
                related_id=material_request.get("id"),
                related_type="material_request",
            )

        logger.info("Material request %s submitted by %s ($%.2f, %s)",
                    material_request.get("id"), user_data["id"], estimated_cost, request_type)
        return material_request

    def list_requests(
        self,
        user_data: dict,
        status: Optional[str] = None,
        request_type: Optional[str] = None,
        cache: Optional[Dict[str, Any]] = None
    ) -> List[Dict[str, Any]]:
        role = user_data.get("role")
        if role == "intern" and not has_staff_permission(user_data, "material_requests_view", self.supabase, cache):
            raise HTTPException(status_code=403, detail="You don't have permission to view material requests")
        if role not in ("founder", "intern", "volunteer"):
            raise HTTPException(status_code=403, detail="Unauthorized")
        try:
            query = self.supabase.table("material_requests").select("*")
            if status:
                query = query.eq("status", status)
            if request_type:
                query = query.eq("request_type", request_type)
            if role == "volunteer":
                query = query.eq("created_by", user_data["id"])
            result = query.order("created_at", desc=True).execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Error fetching material requests: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def process_approval(
        self,
        user_data: dict,
        data: MaterialApproval,
        cache: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None
    ) -> Dict[str, Any]:
        """Approve or reject a request; returns {request, message}"""
        if user_data.get("role") not in ("founder", "intern"):
            raise HTTPException(status_code=403, detail="Unauthorized")
        if not data.request_id or not data.action:
            raise HTTPException(status_code=400, detail="Request ID and action are required")
        if data.action not in ("approve", "reject"):
            raise HTTPException(status_code=400, detail="Action must be 'approve' or 'reject'")
        if not has_staff_permission(user_data, "material_requests_approve", self.supabase, cache):
            raise HTTPException(status_code=403, detail="You don't have permission to approve material requests")

        approving = data.action == "approve"
        try:
            material_request = self._get_request(data.request_id)
            if not material_request:
                raise HTTPException(status_code=404, detail="Material request not found")
            if material_request.get("status") not in ("submitted", "approved"):
                raise HTTPException(
                    status_code=400,
                    detail=f"Cannot {data.action} a request that is {material_request.get('status')}"
                )

            settings = self.settings_service.get_procurement_settings()
            max_budget = float(settings["max_budget_per_group"])
            estimated_cost = float(material_request.get("estimated_cost") or 0)
            if approving and material_request.get("request_type") == "gsv_provided" and estimated_cost > max_budget:
                raise HTTPException(
                    status_code=400,
                    detail=f"Cannot approve request exceeding budget limit of ${max_budget:.2f}"
                )

            update_data = {
                "status": "approved" if approving else "cancelled",
                "approved_by": user_data["id"],
                "approved_at": datetime.now(timezone.utc).isoformat(),
                "purchase_notes": data.notes or None,
            }
            if not approving:
                update_data["cancellation_reason"] = data.notes or "Request rejected by approver"

            result = self.supabase.table("material_requests")\
                .update(update_data)\
                .eq("id", data.request_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update material request")
            updated_request = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error processing material request approval: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if settings["notify_on_approval"]:
            if approving:
                message = f"Your material request for ${estimated_cost:.2f} has been approved. Procurement will begin shortly."
            else:
                message = f"Your material request for ${estimated_cost:.2f} has been rejected. {data.notes or ''}"
            if data.message_to_group:
                message += f"\n\nMessage from Green Silicon Valley: {data.message_to_group}"
            self.notifications.notify(
                material_request.get("created_by"),
                "material_request_approved" if approving else "material_request_rejected",
                "Material Request Approved" if approving else "Material Request Rejected",
                message,
                action_url="/dashboard/volunteer/materials",
                priority="medium" if approving else "high",
                related_id=data.request_id,
                related_type="material_request",
            )

        log_system_event(
            self.supabase,
            user_data["id"],
            "material_request_approved" if approving else "material_request_rejected",
            "material_request",
            data.request_id,
            details={
                "request_type": material_request.get("request_type"),
                "estimated_cost": estimated_cost,
                "group_id": material_request.get("group_id"),
                "presentation_id": material_request.get("presentation_id"),
                "notes": data.notes,
            },
            ip_address=ip_address,
        )
        logger.info("Material request %s %s by %s", data.request_id,
                    "approved" if approving else "rejected", user_data["id"])

        return {
            "request": updated_request,
            "message": "Material request approved successfully" if approving else "Material request rejected",
        }
