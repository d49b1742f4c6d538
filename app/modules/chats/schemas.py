from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from app.core.pagination import Pagination


class ChatCreate(BaseModel):
    other_user_id: str = Field(min_length=1)


class ChatResponse(BaseModel):
    id: str
    other_user: Optional[Dict[str, Any]] = None
    last_message: Optional[Dict[str, Any]] = None
    updated_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ChatListResponse(BaseModel):
    chats: List[ChatResponse]


class UnreadCountResponse(BaseModel):
    unread_count: int


class ChatMessageCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v.strip()


class ChatMessagesPage(BaseModel):
    messages: List[Dict[str, Any]]
    pagination: Pagination
