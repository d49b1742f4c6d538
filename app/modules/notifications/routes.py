from fastapi import APIRouter, Depends, HTTPException, Query
from app.modules.notifications.schemas import (
    NotificationListResponse, NotificationAction, NotificationActionResponse,
    NotificationDeleteResponse
)
from app.modules.notifications.service import NotificationService
from app.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/notifications", tags=["notifications"])


def get_notification_service(supabase: Client = Depends(get_user_supabase)) -> NotificationService:
    return NotificationService(supabase)


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """The caller's notifications, newest first, plus the unread count"""
    return {
        "notifications": service.list_notifications(user_data["id"], limit, offset),
        "unreadCount": service.count_unread(user_data["id"]),
    }


@router.put("", response_model=NotificationActionResponse, response_model_exclude_none=True)
async def update_notifications(
    action_data: NotificationAction,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """mark_read (with notification_id) or mark_all_read"""
    if action_data.action == "mark_read":
        notification = service.mark_read(user_data["id"], action_data.notification_id)
        return {"success": True, "message": "Notification marked as read", "notification": notification}
    if action_data.action == "mark_all_read":
        updated = service.mark_all_read(user_data["id"])
        return {"success": True, "message": "All notifications marked as read", "updatedCount": updated}
    raise HTTPException(status_code=400, detail="Invalid action")


@router.delete("", response_model=NotificationDeleteResponse)
async def delete_notification(
    id: Optional[str] = None,
    user_data: Dict = Depends(get_current_user),
    service: NotificationService = Depends(get_notification_service)
):
    """Delete one of the caller's notifications (?id=...)"""
    service.delete_notification(user_data["id"], id)
    return {"success": True, "message": "Notification deleted successfully"}
