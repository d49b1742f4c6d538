from pydantic import BaseModel
from typing import Optional, List, Dict, Any


class NotificationListResponse(BaseModel):
    notifications: List[Dict[str, Any]]
    unreadCount: int


class NotificationAction(BaseModel):
    action: str
    notification_id: Optional[str] = None


class NotificationActionResponse(BaseModel):
    success: bool
    message: str
    # mark_read fills notification, mark_all_read fills updatedCount
    notification: Optional[Dict[str, Any]] = None
    updatedCount: Optional[int] = None


class NotificationDeleteResponse(BaseModel):
    success: bool
    message: str
