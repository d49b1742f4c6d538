from fastapi import APIRouter, Depends, Query, Request, Response
from app.modules.chats.schemas import (
    ChatCreate, ChatResponse, ChatListResponse, UnreadCountResponse,
    ChatMessageCreate, ChatMessagesPage
)
from app.modules.chats.service import ChatService
from app.core.dependencies import get_current_user, get_user_supabase, check_chat_participant
from app.core.pagination import build_pagination
from app.core.rate_limit import limiter
from app.config import settings
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/chats", tags=["chats"])


def get_chat_service(supabase: Client = Depends(get_user_supabase)) -> ChatService:
    return ChatService(supabase)


@router.get("", response_model=ChatListResponse)
async def list_chats(
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """List the caller's one-on-one chats"""
    return {"chats": service.list_chats(user_data["id"])}


@router.post("", response_model=ChatResponse, status_code=201)
async def open_chat(
    chat_data: ChatCreate,
    response: Response,
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """Open a chat with another user; an existing chat is returned with 200"""
    chat, created = service.get_or_create_chat(user_data["id"], chat_data.other_user_id)
    if not created:
        response.status_code = 200
    return chat


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service)
):
    """Number of messages from other users across the caller's chats"""
    return {"unread_count": service.count_unread(user_data["id"])}


@router.get("/{chat_id}/messages", response_model=ChatMessagesPage)
async def list_chat_messages(
    chat_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Page through a chat's messages (participants only)"""
    check_chat_participant(chat_id, user_data["id"], supabase)
    messages = service.list_messages(chat_id, page, limit)
    return {"messages": messages, "pagination": build_pagination(page, limit, len(messages))}


@router.post("/{chat_id}/messages", status_code=201)
@limiter.limit(settings.write_rate_limit)
async def send_chat_message(
    request: Request,
    chat_id: str,
    message_data: ChatMessageCreate,
    user_data: Dict = Depends(get_current_user),
    service: ChatService = Depends(get_chat_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Send a message in a chat (participants only)"""
    check_chat_participant(chat_id, user_data["id"], supabase)
    return service.send_message(chat_id, user_data["id"], message_data.content)
