import logging
from supabase import Client
from app.core.counts import embedded_count
from app.core.errors import raise_api_error
from app.core.pagination import page_bounds
from app.modules.forums.schemas import ForumCreate, ForumResponse, ForumPostCreate, ForumPostResponse
from typing import List
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class ForumService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_forums(self, page: int, limit: int) -> List[ForumResponse]:
        start, end = page_bounds(page, limit)
        try:
            result = self.supabase.table("forums")\
                .select("*, creator:profiles(*), posts_count:forum_posts(count)")\
                .order("created_at", desc=True)\
                .range(start, end)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch forums")
        return [
            ForumResponse(**{**forum, "posts_count": embedded_count(forum.get("posts_count"))})
            for forum in result.data or []
        ]

    def create_forum(self, user_id: str, forum_data: ForumCreate) -> ForumResponse:
        try:
            inserted = self.supabase.table("forums").insert({
                "title": forum_data.title,
                "description": (forum_data.description or "").strip() or None,
                "created_by": user_id
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create forum")

            forum_id = inserted.data[0]["id"]
            result = self.supabase.table("forums")\
                .select("*, creator:profiles(*)")\
                .eq("id", forum_id)\
                .limit(1)\
                .execute()
            forum = result.data[0] if result.data else inserted.data[0]
            logger.info(f"Created forum {forum_id} by {user_id}")
            return ForumResponse(**{**forum, "posts_count": 0})
        except Exception as e:
            raise_api_error(e, "Failed to create forum")

    def ensure_forum_exists(self, forum_id: str) -> None:
        try:
            result = self.supabase.table("forums")\
                .select("id")\
                .eq("id", forum_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch forum")
        if not result.data:
            raise HTTPException(status_code=404, detail="Forum not found")

    def list_posts(self, forum_id: str, page: int, limit: int) -> List[ForumPostResponse]:
        self.ensure_forum_exists(forum_id)
        start, end = page_bounds(page, limit)
        try:
            result = self.supabase.table("forum_posts")\
                .select("*, author:profiles(*), comments_count:forum_post_comments(count)")\
                .eq("forum_id", forum_id)\
                .order("created_at", desc=True)\
                .range(start, end)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch forum posts")
        return [
            ForumPostResponse(**{**post, "comments_count": embedded_count(post.get("comments_count"))})
            for post in result.data or []
        ]

    def create_post(self, forum_id: str, user_id: str, post_data: ForumPostCreate) -> ForumPostResponse:
        self.ensure_forum_exists(forum_id)
        try:
            inserted = self.supabase.table("forum_posts").insert({
                "forum_id": forum_id,
                "author_id": user_id,
                "title": post_data.title,
                "content": post_data.content
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create forum post")

            result = self.supabase.table("forum_posts")\
                .select("*, author:profiles(*)")\
                .eq("id", inserted.data[0]["id"])\
                .limit(1)\
                .execute()
            post = result.data[0] if result.data else inserted.data[0]
            return ForumPostResponse(**{**post, "comments_count": 0})
        except Exception as e:
            raise_api_error(e, "Failed to create forum post")
