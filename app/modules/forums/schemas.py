from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime
from app.core.pagination import Pagination


class ForumCreate(BaseModel):
    title: str
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()


class ForumResponse(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    created_by: Optional[str] = None
    creator: Optional[Dict[str, Any]] = None
    posts_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        extra = "allow"


class ForumsPage(BaseModel):
    forums: List[ForumResponse]
    pagination: Pagination


class ForumPostCreate(BaseModel):
    title: str
    content: str

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Title is required")
        return v.strip()

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Content is required")
        return v.strip()


class ForumPostResponse(BaseModel):
    id: str
    forum_id: str
    author_id: Optional[str] = None
    title: str
    content: str
    author: Optional[Dict[str, Any]] = None
    comments_count: int = 0
    created_at: Optional[datetime] = None

    class Config:
        extra = "allow"


class ForumPostsPage(BaseModel):
    posts: List[ForumPostResponse]
    pagination: Pagination
