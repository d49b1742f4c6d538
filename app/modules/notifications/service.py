import logging
from datetime import datetime, timezone
from supabase import Client
from app.core.errors import raise_api_error
from typing import List, Dict, Any, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_notifications(self, user_id: str, limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("notifications")\
                .select("*")\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .range(offset, offset + limit - 1)\
                .execute()
            return result.data or []
        except Exception as e:
            raise_api_error(e, "Failed to fetch notifications")

    def count_unread(self, user_id: str) -> int:
        try:
            result = self.supabase.table("notifications")\
                .select("id", count="exact")\
                .eq("user_id", user_id)\
                .eq("is_read", False)\
                .execute()
            return result.count or 0
        except Exception as e:
            raise_api_error(e, "Failed to fetch unread count")

    def mark_read(self, user_id: str, notification_id: Optional[str]) -> Dict[str, Any]:
        if not notification_id:
            raise HTTPException(status_code=400, detail="Notification ID is required")
        try:
            result = self.supabase.table("notifications")\
                .update({"is_read": True, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", notification_id)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to mark notification as read")

        if not result.data:
            raise HTTPException(status_code=404, detail="Notification not found")
        return result.data[0]

    def mark_all_read(self, user_id: str) -> int:
        """Mark every unread notification read; returns how many changed"""
        try:
            result = self.supabase.table("notifications")\
                .update({"is_read": True, "updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("user_id", user_id)\
                .eq("is_read", False)\
                .execute()
            return len(result.data or [])
        except Exception as e:
            raise_api_error(e, "Failed to mark all notifications as read")

    def delete_notification(self, user_id: str, notification_id: Optional[str]) -> bool:
        if not notification_id:
            raise HTTPException(status_code=400, detail="Notification ID is required")
        try:
            self.supabase.table("notifications")\
                .delete()\
                .eq("id", notification_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to delete notification")
