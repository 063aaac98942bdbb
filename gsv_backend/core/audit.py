import logging
from typing import Any, Dict, Optional
from supabase import Client

logger = logging.getLogger(__name__)


def log_system_event(
    supabase: Client,
    actor_id: Optional[str],
    action_type: str,
    resource_type: str,
    resource_id: Any,
    details: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
) -> None:
    """Insert an audit row into system_logs. Failures are logged, never raised."""
    try:
        supabase.table("system_logs").insert({
            "actor_id": actor_id,
            "action_type": action_type,
            "resource_type": resource_type,
            "resource_id": str(resource_id) if resource_id is not None else None,
            "details": details or {},
            "ip_address": ip_address or "unknown",
        }).execute()
    except Exception as e:
        logger.error(f"Failed to write audit log for {action_type} {resource_id}: {e}")
