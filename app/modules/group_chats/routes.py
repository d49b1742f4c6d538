from fastapi import APIRouter, Depends, Query, Request
from app.modules.group_chats.schemas import (
    GroupChatMembersResponse, GroupChatMembersAdd, GroupChatMembersAdded,
    GroupChatMessageCreate, GroupChatMessagesPage
)
from app.modules.group_chats.service import GroupChatService
from app.core.dependencies import get_current_user, get_user_supabase, check_group_chat_member
from app.core.pagination import build_pagination
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/group-chats", tags=["group-chats"])


def get_group_chat_service(supabase: Client = Depends(get_user_supabase)) -> GroupChatService:
    return GroupChatService(supabase)


@router.get("/{group_chat_id}/members", response_model=GroupChatMembersResponse)
async def list_group_chat_members(
    group_chat_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupChatService = Depends(get_group_chat_service),
    supabase: Client = Depends(get_user_supabase)
):
    """List members of a group chat (members only)"""
    check_group_chat_member(group_chat_id, user_data["id"], supabase)
    return {"members": service.list_members(group_chat_id)}


@router.post("/{group_chat_id}/members", response_model=GroupChatMembersAdded)
async def add_group_chat_members(
    group_chat_id: str,
    members_data: GroupChatMembersAdd,
    user_data: Dict = Depends(get_current_user),
    service: GroupChatService = Depends(get_group_chat_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Add users to a group chat (admins only)"""
    check_group_chat_member(group_chat_id, user_data["id"], supabase, require_admin=True)
    return service.add_members(group_chat_id, members_data.user_ids)


@router.get("/{group_chat_id}/messages", response_model=GroupChatMessagesPage)
async def list_group_chat_messages(
    group_chat_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: GroupChatService = Depends(get_group_chat_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Page through messages, oldest first within the page"""
    check_group_chat_member(group_chat_id, user_data["id"], supabase)
    messages = service.list_messages(group_chat_id, page, limit)
    return {"messages": messages, "pagination": build_pagination(page, limit, len(messages))}


@router.post("/{group_chat_id}/messages", status_code=201)
@limiter.limit(settings.write_rate_limit)
async def send_group_chat_message(
    request: Request,
    group_chat_id: str,
    message_data: GroupChatMessageCreate,
    user_data: Dict = Depends(get_current_user),
    service: GroupChatService = Depends(get_group_chat_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Post a message to a group chat (members only)"""
    check_group_chat_member(group_chat_id, user_data["id"], supabase)
    return service.send_message(group_chat_id, user_data["id"], message_data.content)
