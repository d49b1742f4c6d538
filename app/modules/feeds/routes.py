from fastapi import APIRouter, Depends, Query, Request
from app.modules.feeds.schemas import (
    PostCreate, PostResponse, PostsPage, CommentCreate, CommentsPage, SuccessResponse
)
from app.modules.feeds.service import FeedService
from app.core.dependencies import get_current_user, get_user_supabase
from app.core.pagination import build_pagination
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/feeds", tags=["feeds"])


def get_feed_service(supabase: Client = Depends(get_user_supabase)) -> FeedService:
    return FeedService(supabase)


@router.get("", response_model=PostsPage)
async def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service)
):
    """Newest posts first"""
    posts = service.list_posts(user_data["id"], page, limit)
    return {"posts": posts, "pagination": build_pagination(page, limit, len(posts))}


@router.post("", response_model=PostResponse, status_code=201)
@limiter.limit(settings.write_rate_limit)
async def create_post(
    request: Request,
    post_data: PostCreate,
    user_data: Dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service)
):
    """Publish a post"""
    return service.create_post(user_data["id"], post_data)


@router.get("/{post_id}/comments", response_model=CommentsPage)
async def list_comments(
    post_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service)
):
    """Comments on a post, oldest first"""
    comments = service.list_comments(post_id, page, limit)
    return {"comments": comments, "pagination": build_pagination(page, limit, len(comments))}


@router.post("/{post_id}/comments", status_code=201)
@limiter.limit(settings.write_rate_limit)
async def add_comment(
    request: Request,
    post_id: str,
    comment_data: CommentCreate,
    user_data: Dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service)
):
    """Comment on a post"""
    return service.add_comment(post_id, user_data["id"], comment_data.content)


@router.post("/{post_id}/like", response_model=SuccessResponse)
async def like_post(
    post_id: str,
    user_data: Dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service)
):
    """Like a post"""
    return {"success": service.like_post(post_id, user_data["id"])}


@router.delete("/{post_id}/like", response_model=SuccessResponse)
async def unlike_post(
    post_id: str,
    user_data: Dict = Depends(get_current_user),
    service: FeedService = Depends(get_feed_service)
):
    """Remove your like from a post"""
    return {"success": service.unlike_post(post_id, user_data["id"])}
