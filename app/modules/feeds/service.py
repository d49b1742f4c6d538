import logging
from supabase import Client
from app.core.counts import embedded_count
from app.core.errors import raise_api_error
from app.core.pagination import page_bounds
from app.modules.feeds.schemas import PostCreate, PostResponse
from typing import List, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)

POST_SELECT = (
    "*, author:profiles(*), "
    "likes_count:post_likes(count), "
    "comments_count:post_comments(count)"
)


class FeedService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _liked_post_ids(self, user_id: str, post_ids: List[str]) -> set:
        if not post_ids:
            return set()
        result = self.supabase.table("post_likes")\
            .select("post_id")\
            .eq("user_id", user_id)\
            .in_("post_id", post_ids)\
            .execute()
        return {row["post_id"] for row in result.data or []}

    def list_posts(self, user_id: str, page: int, limit: int) -> List[PostResponse]:
        """Newest posts with counters and whether the caller liked each one"""
        start, end = page_bounds(page, limit)
        try:
            result = self.supabase.table("posts")\
                .select(POST_SELECT)\
                .order("created_at", desc=True)\
                .range(start, end)\
                .execute()
            posts = result.data or []
            liked = self._liked_post_ids(user_id, [post["id"] for post in posts])
        except Exception as e:
            raise_api_error(e, "Failed to fetch posts")

        return [
            PostResponse(**{
                **post,
                "likes_count": embedded_count(post.get("likes_count")),
                "comments_count": embedded_count(post.get("comments_count")),
                "is_liked": post["id"] in liked,
            })
            for post in posts
        ]

    def create_post(self, user_id: str, post_data: PostCreate) -> PostResponse:
        try:
            inserted = self.supabase.table("posts").insert({
                "content": post_data.content,
                "author_id": user_id,
                "media_urls": post_data.media_urls,
                "post_type": post_data.post_type
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create post")

            post_id = inserted.data[0]["id"]
            result = self.supabase.table("posts")\
                .select("*, author:profiles(*)")\
                .eq("id", post_id)\
                .limit(1)\
                .execute()
            post = result.data[0] if result.data else inserted.data[0]
            logger.info(f"Created post {post_id} by {user_id}")
            return PostResponse(**{**post, "likes_count": 0, "comments_count": 0, "is_liked": False})
        except Exception as e:
            raise_api_error(e, "Failed to create post")

    def ensure_post_exists(self, post_id: str) -> None:
        try:
            result = self.supabase.table("posts")\
                .select("id")\
                .eq("id", post_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch post")
        if not result.data:
            raise HTTPException(status_code=404, detail="Post not found")

    def list_comments(self, post_id: str, page: int, limit: int) -> List[Dict[str, Any]]:
        """Comments oldest first"""
        start, end = page_bounds(page, limit)
        try:
            result = self.supabase.table("post_comments")\
                .select("*, author:profiles(*)")\
                .eq("post_id", post_id)\
                .order("created_at")\
                .range(start, end)\
                .execute()
            return result.data or []
        except Exception as e:
            raise_api_error(e, "Failed to fetch comments")

    def add_comment(self, post_id: str, user_id: str, content: str) -> Dict[str, Any]:
        self.ensure_post_exists(post_id)
        try:
            inserted = self.supabase.table("post_comments").insert({
                "post_id": post_id,
                "author_id": user_id,
                "content": content
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create comment")

            result = self.supabase.table("post_comments")\
                .select("*, author:profiles(*)")\
                .eq("id", inserted.data[0]["id"])\
                .limit(1)\
                .execute()
            return result.data[0] if result.data else inserted.data[0]
        except Exception as e:
            raise_api_error(e, "Failed to create comment")

    def like_post(self, post_id: str, user_id: str) -> bool:
        self.ensure_post_exists(post_id)
        try:
            existing = self.supabase.table("post_likes")\
                .select("id")\
                .eq("post_id", post_id)\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to like post")
        if existing.data:
            raise HTTPException(status_code=400, detail="Post already liked")

        try:
            self.supabase.table("post_likes").insert({
                "post_id": post_id,
                "user_id": user_id
            }).execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to like post")

    def unlike_post(self, post_id: str, user_id: str) -> bool:
        try:
            self.supabase.table("post_likes")\
                .delete()\
                .eq("post_id", post_id)\
                .eq("user_id", user_id)\
                .execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to unlike post")
