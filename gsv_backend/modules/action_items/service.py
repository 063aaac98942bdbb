from supabase import Client
from gsv_backend.modules.action_items.permissions import get_action_item_permissions
from gsv_backend.modules.action_items.schemas import (
    ActionItemCreate, ActionItemUpdate, ActionItemResponse, ActionItemStats,
    ActionItemList, CommentCreate, CommentResponse, BulkActionRequest
)
from gsv_backend.modules.notifications.service import NotificationService
from gsv_backend.core.dependencies import is_founder
from gsv_backend.core.types import parse_timestamp
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def compute_stats(rows: List[Dict[str, Any]], now: Optional[datetime] = None) -> ActionItemStats:
    now = now or datetime.now(timezone.utc)

    def overdue(row):
        due = parse_timestamp(row.get("due_date"))
        return row.get("status") != "completed" and due is not None and due < now

    return ActionItemStats(
        total=len(rows),
        pending=sum(1 for row in rows if row.get("status") == "pending"),
        in_progress=sum(1 for row in rows if row.get("status") == "in_progress"),
        completed=sum(1 for row in rows if row.get("status") == "completed"),
        overdue=sum(1 for row in rows if overdue(row)),
        urgent=sum(1 for row in rows if row.get("priority") == "urgent"),
    )


def can_access(item: Dict[str, Any], user_data: dict) -> bool:
    """Assignees, the creator and founders can open an item"""
    return (
        user_data["id"] in (item.get("assigned_to") or [])
        or item.get("assigned_by") == user_data["id"]
        or is_founder(user_data)
    )


def _own_items_filter(user_id: str) -> str:
    return f"assigned_to.cs.{{{user_id}}},assigned_by.eq.{user_id}"


class ActionItemService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.notifications = NotificationService(supabase)

    def _get_item(self, item_id: str) -> Dict[str, Any]:
        result = self.supabase.table("action_items")\
            .select("*")\
            .eq("id", item_id)\
            .maybe_single()\
            .execute()
        if not result or not result.data:
            raise HTTPException(status_code=404, detail="Action item not found")
        return result.data

    def _log_history(self, entries: List[Dict[str, Any]]) -> None:
        if not entries:
            return
        try:
            self.supabase.table("action_item_history").insert(entries).execute()
        except Exception as e:
            logger.error(f"Failed to write action item history: {e}")

    def list_items(
        self,
        user_data: dict,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        item_type: Optional[str] = None,
        assigned_to: Optional[str] = None,
        limit: int = 50,
    ) -> ActionItemList:
        permissions = get_action_item_permissions(user_data, self.supabase)
        if not permissions.can_view:
            raise HTTPException(status_code=403, detail="You don't have permission to view action items")
        try:
            query = self.supabase.table("action_items").select("*")
            if status and status != "all":
                query = query.eq("status", status)
            if priority and priority != "all":
                query = query.eq("priority", priority)
            if item_type and item_type != "all":
                query = query.eq("type", item_type)
            if assigned_to == "me":
                query = query.contains("assigned_to", [user_data["id"]])
            elif assigned_to and assigned_to != "all":
                query = query.contains("assigned_to", [assigned_to])
            if not permissions.can_view_all:
                query = query.or_(_own_items_filter(user_data["id"]))
                if "all" not in permissions.viewable_types:
                    query = query.in_("type", permissions.viewable_types)
            result = query.order("created_at", desc=True).limit(limit).execute()

            stats_query = self.supabase.table("action_items").select("status, priority, due_date")
            if not permissions.can_view_all:
                stats_query = stats_query.or_(_own_items_filter(user_data["id"]))
            stats = compute_stats(stats_query.execute().data or [])

            return ActionItemList(
                items=[ActionItemResponse(**row) for row in (result.data or [])],
                stats=stats,
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching action items: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def _check_assignment(self, assigned_to: List[str], user_data: dict, permissions) -> None:
        if not assigned_to:
            return
        if not permissions.can_assign and any(user_id != user_data["id"] for user_id in assigned_to):
            raise HTTPException(status_code=403, detail="You can only assign items to yourself")
        others = [user_id for user_id in assigned_to if user_id != user_data["id"]]
        if others and permissions.assignable_roles:
            users = self.supabase.table("users")\
                .select("id, role")\
                .in_("id", others)\
                .execute()
            invalid = sorted({
                row.get("role") or "unknown" for row in (users.data or [])
                if row.get("role") not in permissions.assignable_roles
            })
            if invalid:
                raise HTTPException(
                    status_code=403,
                    detail=f"You cannot assign items to users with roles: {', '.join(invalid)}"
                )

    def create_item(self, data: ActionItemCreate, user_data: dict) -> ActionItemResponse:
        if not (data.title or "").strip() or not (data.type or "").strip():
            raise HTTPException(status_code=400, detail="Title and type are required")
        permissions = get_action_item_permissions(user_data, self.supabase)
        if not permissions.can_create:
            raise HTTPException(status_code=403, detail="You don't have permission to create action items")
        if not permissions.allows_type(data.type):
            raise HTTPException(status_code=403, detail=f"You cannot create action items of type {data.type}")
        self._check_assignment(data.assigned_to, user_data, permissions)

        try:
            payload = data.model_dump(mode="json")
            payload["title"] = data.title.strip()
            payload["assigned_to"] = data.assigned_to or [user_data["id"]]
            payload["assigned_by"] = user_data["id"]
            payload["status"] = "pending"
            payload["is_system_generated"] = False
            result = self.supabase.table("action_items").insert(payload).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create action item")
            item = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating action item: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        self._log_history([{
            "action_item_id": item["id"],
            "user_id": user_data["id"],
            "action": "created",
            "new_value": "manual_creation",
            "metadata": {"created_by": user_data["id"]},
        }])
        for assignee in item.get("assigned_to") or []:
            if assignee != user_data["id"]:
                self.notifications.notify(
                    assignee,
                    "action_item_assigned",
                    "New Action Item",
                    f"You have been assigned: {item['title']}",
                    priority=item.get("priority") or "medium",
                    related_id=item["id"],
                    related_type="action_item",
                )
        return ActionItemResponse(**item)

    def get_item(self, item_id: str, user_data: dict) -> ActionItemResponse:
        try:
            item = self._get_item(item_id)
            if not can_access(item, user_data):
                raise HTTPException(status_code=403, detail="Access denied")
            comments = self.list_comments(item_id, user_data, item=item)
            return ActionItemResponse(**item, comments=comments)
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def update_item(self, item_id: str, data: ActionItemUpdate, user_data: dict) -> ActionItemResponse:
        updates = data.model_dump(mode="json", exclude_none=True)
        if not updates:
            raise HTTPException(status_code=400, detail="No fields to update")
        permissions = get_action_item_permissions(user_data, self.supabase)
        if not permissions.can_edit:
            raise HTTPException(status_code=403, detail="Access denied")
        if data.assigned_to is not None:
            self._check_assignment(data.assigned_to, user_data, permissions)

        try:
            existing = self._get_item(item_id)
            if not can_access(existing, user_data):
                raise HTTPException(status_code=403, detail="Access denied")

            now = datetime.now(timezone.utc).isoformat()
            updates["updated_at"] = now
            if data.status == "completed":
                updates["completed_at"] = now
                updates["completed_by"] = user_data["id"]

            result = self.supabase.table("action_items")\
                .update(updates)\
                .eq("id", item_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to update action item")
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating action item {item_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        self._log_history([
            {
                "action_item_id": item_id,
                "user_id": user_data["id"],
                "action": "updated",
                "old_value": existing.get(field),
                "new_value": value,
                "metadata": {"field": field, "updated_by": user_data["id"]},
            }
            for field, value in data.model_dump(mode="json", exclude_none=True).items()
        ])
        return ActionItemResponse(**result.data[0])

    def delete_item(self, item_id: str, user_data: dict) -> None:
        if not is_founder(user_data):
            raise HTTPException(status_code=403, detail="Access denied")
        try:
            result = self.supabase.table("action_items").delete().eq("id", item_id).execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="Action item not found")
        except HTTPException:
            raise
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

    def list_comments(self, item_id: str, user_data: dict, item: Optional[Dict[str, Any]] = None) -> List[CommentResponse]:
        item = item or self._get_item(item_id)
        if not can_access(item, user_data):
            raise HTTPException(status_code=403, detail="Access denied")
        result = self.supabase.table("action_item_comments")\
            .select("*")\
            .eq("action_item_id", item_id)\
            .order("created_at")\
            .execute()
        return [CommentResponse(**row) for row in (result.data or [])]

    def add_comment(self, item_id: str, data: CommentCreate, user_data: dict) -> CommentResponse:
        comment = (data.comment or "").strip()
        if not comment:
            raise HTTPException(status_code=400, detail="Comment is required")
        try:
            item = self._get_item(item_id)
            if not can_access(item, user_data):
                raise HTTPException(status_code=403, detail="Access denied")
            result = self.supabase.table("action_item_comments").insert({
                "action_item_id": item_id,
                "user_id": user_data["id"],
                "comment": comment,
                "is_internal": data.is_internal,
            }).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to add comment")
            created = result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error adding comment to action item {item_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        self._log_history([{
            "action_item_id": item_id,
            "user_id": user_data["id"],
            "action": "commented",
            "new_value": comment[:100] + ("..." if len(comment) > 100 else ""),
            "metadata": {"comment_id": created["id"], "is_internal": data.is_internal},
        }])
        return CommentResponse(**created)

    def bulk_action(self, data: BulkActionRequest, user_data: dict) -> str:
        """Apply one action to many items; every item must be accessible to the caller"""
        if not data.action or data.item_ids is None:
            raise HTTPException(status_code=400, detail="Action and itemIds are required")
        item_ids = list(dict.fromkeys(str(item_id) for item_id in data.item_ids))
        count = len(item_ids)

        try:
            items = self.supabase.table("action_items")\
                .select("id, assigned_to, assigned_by")\
                .in_("id", item_ids)\
                .execute().data or []
            if len(items) != count:
                raise HTTPException(status_code=404, detail="Some items not found")
            if not all(can_access(item, user_data) for item in items):
                raise HTTPException(status_code=403, detail="Access denied to some items")

            now = datetime.now(timezone.utc).isoformat()
            table = self.supabase.table("action_items")

            if data.action == "status_update":
                new_status = data.data.get("status")
                if new_status not in ("pending", "in_progress", "completed", "cancelled"):
                    raise HTTPException(status_code=400, detail="Status is required")
                completed = new_status == "completed"
                table.update({
                    "status": new_status,
                    "updated_at": now,
                    "completed_at": now if completed else None,
                    "completed_by": user_data["id"] if completed else None,
                }).in_("id", item_ids).execute()
                self._log_history([
                    {
                        "action_item_id": item_id,
                        "user_id": user_data["id"],
                        "action": "status_changed",
                        "new_value": new_status,
                        "metadata": {"bulk_update": True},
                    }
                    for item_id in item_ids
                ])
                return f"Updated {count} items to {new_status}"

            if data.action == "assign":
                if not is_founder(user_data):
                    raise HTTPException(status_code=403, detail="Only founders can bulk assign")
                assignees = data.data.get("assigned_to")
                if not isinstance(assignees, list):
                    raise HTTPException(status_code=400, detail="assigned_to array is required")
                table.update({"assigned_to": assignees, "updated_at": now}).in_("id", item_ids).execute()
                return f"Assigned {count} items"

            if data.action == "priority_update":
                new_priority = data.data.get("priority")
                if new_priority not in ("low", "medium", "high", "urgent"):
                    raise HTTPException(status_code=400, detail="Priority is required")
                table.update({"priority": new_priority, "updated_at": now}).in_("id", item_ids).execute()
                return f"Updated priority for {count} items"

            if not is_founder(user_data):
                raise HTTPException(status_code=403, detail="Only founders can bulk delete")
            table.delete().in_("id", item_ids).execute()
            return f"Deleted {count} items"
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error in bulk action {data.action}: {e}")
            raise HTTPException(status_code=500, detail=str(e))
