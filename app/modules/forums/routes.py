from fastapi import APIRouter, Depends, Query, Request
from app.modules.forums.schemas import (
    ForumCreate, ForumResponse, ForumsPage, ForumPostCreate, ForumPostResponse, ForumPostsPage
)
from app.modules.forums.service import ForumService
from app.core.dependencies import get_current_user, get_user_supabase
from app.core.pagination import build_pagination
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/forums", tags=["forums"])


def get_forum_service(supabase: Client = Depends(get_user_supabase)) -> ForumService:
    return ForumService(supabase)


@router.get("", response_model=ForumsPage)
async def list_forums(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: ForumService = Depends(get_forum_service)
):
    """Newest forums first, with post counts"""
    forums = service.list_forums(page, limit)
    return {"forums": forums, "pagination": build_pagination(page, limit, len(forums))}


@router.post("", response_model=ForumResponse, status_code=201)
async def create_forum(
    forum_data: ForumCreate,
    user_data: Dict = Depends(get_current_user),
    service: ForumService = Depends(get_forum_service)
):
    """Create a forum"""
    return service.create_forum(user_data["id"], forum_data)


@router.get("/{forum_id}/posts", response_model=ForumPostsPage)
async def list_forum_posts(
    forum_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: ForumService = Depends(get_forum_service)
):
    """Posts in a forum, newest first"""
    posts = service.list_posts(forum_id, page, limit)
    return {"posts": posts, "pagination": build_pagination(page, limit, len(posts))}


@router.post("/{forum_id}/posts", response_model=ForumPostResponse, status_code=201)
@limiter.limit(settings.write_rate_limit)
async def create_forum_post(
    request: Request,
    forum_id: str,
    post_data: ForumPostCreate,
    user_data: Dict = Depends(get_current_user),
    service: ForumService = Depends(get_forum_service)
):
    """Start a thread in a forum"""
    return service.create_post(forum_id, user_data["id"], post_data)
