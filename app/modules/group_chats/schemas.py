from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from app.core.pagination import Pagination


class GroupChatMember(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: str
    joined_at: Optional[datetime] = None


class GroupChatMembersResponse(BaseModel):
    members: List[GroupChatMember]


class GroupChatMembersAdd(BaseModel):
    user_ids: List[str] = Field(min_length=1)


class GroupChatMembersAdded(BaseModel):
    success: bool
    added_members: List[str]
    already_members: List[str]


class GroupChatMessageCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v.strip()


class GroupChatMessagesPage(BaseModel):
    messages: List[Dict[str, Any]]
    pagination: Pagination
