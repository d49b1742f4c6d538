from pydantic import BaseModel, field_validator
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime
from app.core.pagination import Pagination

PostType = Literal["text", "image", "video", "document", "mixed"]


def _require_content(v: str) -> str:
    if not v.strip():
        raise ValueError("Content is required")
    return v.strip()


class PostCreate(BaseModel):
    content: str
    media_urls: List[str] = []
    post_type: PostType = "text"

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _require_content(v)


class PostResponse(BaseModel):
    id: str
    author_id: Optional[str] = None
    content: str
    media_urls: Optional[List[str]] = []
    post_type: Optional[str] = None
    author: Optional[Dict[str, Any]] = None
    likes_count: int = 0
    comments_count: int = 0
    is_liked: bool = False
    created_at: Optional[datetime] = None

    class Config:
        extra = "allow"


class PostsPage(BaseModel):
    posts: List[PostResponse]
    pagination: Pagination


class CommentCreate(BaseModel):
    content: str

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        return _require_content(v)


class CommentsPage(BaseModel):
    comments: List[Dict[str, Any]]
    pagination: Pagination


class SuccessResponse(BaseModel):
    success: bool
