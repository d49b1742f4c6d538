import logging
from datetime import datetime, timezone
from supabase import Client
from app.core.errors import raise_api_error
from app.core.pagination import page_bounds
from app.modules.chats.schemas import ChatResponse
from typing import List, Dict, Any, Optional, Tuple
from fastapi import HTTPException

logger = logging.getLogger(__name__)

CHAT_SELECT = (
    "*, "
    "user1:profiles!one_on_one_chats_user1_id_fkey(*), "
    "user2:profiles!one_on_one_chats_user2_id_fkey(*)"
)
CHAT_WITH_MESSAGES_SELECT = (
    CHAT_SELECT + ", last_message:one_on_one_messages(content, created_at, author:profiles(*))"
)


def chat_pair_filter(user_id: str, other_user_id: str) -> str:
    return (
        f"and(user1_id.eq.{user_id},user2_id.eq.{other_user_id}),"
        f"and(user1_id.eq.{other_user_id},user2_id.eq.{user_id})"
    )


def newest_message(messages: Optional[List[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
    if not messages:
        return None
    return max(messages, key=lambda m: m.get("created_at") or "")


def to_chat_response(chat: Dict[str, Any], user_id: str) -> ChatResponse:
    """Present a chat from the caller's side"""
    other_user = chat.get("user2") if chat.get("user1_id") == user_id else chat.get("user1")
    return ChatResponse(
        id=chat["id"],
        other_user=other_user,
        last_message=newest_message(chat.get("last_message")),
        updated_at=chat.get("updated_at"),
        created_at=chat.get("created_at"),
    )


class ChatService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_chats(self, user_id: str) -> List[ChatResponse]:
        """The caller's chats, most recently active first"""
        try:
            result = self.supabase.table("one_on_one_chats")\
                .select(CHAT_WITH_MESSAGES_SELECT)\
                .or_(f"user1_id.eq.{user_id},user2_id.eq.{user_id}")\
                .order("updated_at", desc=True)\
                .execute()
            return [to_chat_response(chat, user_id) for chat in result.data or []]
        except Exception as e:
            raise_api_error(e, "Failed to fetch chats")

    def get_or_create_chat(self, user_id: str, other_user_id: str) -> Tuple[ChatResponse, bool]:
        """Return (chat, created)"""
        if other_user_id == user_id:
            raise HTTPException(status_code=400, detail="Cannot create chat with yourself")

        try:
            other = self.supabase.table("profiles")\
                .select("id")\
                .eq("id", other_user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to look up user")
        if not other.data:
            raise HTTPException(status_code=404, detail="User not found")

        try:
            existing = self.supabase.table("one_on_one_chats")\
                .select(CHAT_WITH_MESSAGES_SELECT)\
                .or_(chat_pair_filter(user_id, other_user_id))\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to check existing chat")
        if existing.data:
            return to_chat_response(existing.data[0], user_id), False

        try:
            inserted = self.supabase.table("one_on_one_chats").insert({
                "user1_id": user_id,
                "user2_id": other_user_id
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create chat")

            chat_id = inserted.data[0]["id"]
            result = self.supabase.table("one_on_one_chats")\
                .select(CHAT_SELECT)\
                .eq("id", chat_id)\
                .limit(1)\
                .execute()
            chat = result.data[0] if result.data else inserted.data[0]
            logger.info(f"Created chat {chat_id} between {user_id} and {other_user_id}")
            return to_chat_response(chat, user_id), True
        except Exception as e:
            raise_api_error(e, "Failed to create chat")

    def count_unread(self, user_id: str) -> int:
        """Messages in the caller's chats written by someone else"""
        try:
            chats = self.supabase.table("one_on_one_chats")\
                .select("id")\
                .or_(f"user1_id.eq.{user_id},user2_id.eq.{user_id}")\
                .execute()
            chat_ids = [chat["id"] for chat in chats.data or []]
            if not chat_ids:
                return 0

            result = self.supabase.table("one_on_one_messages")\
                .select("id", count="exact")\
                .in_("chat_id", chat_ids)\
                .neq("author_id", user_id)\
                .execute()
            return result.count or 0
        except Exception as e:
            raise_api_error(e, "Failed to fetch unread count")

    def list_messages(self, chat_id: str, page: int, limit: int) -> List[Dict[str, Any]]:
        """One page of messages, newest page first, returned in chronological order"""
        start, end = page_bounds(page, limit)
        try:
            result = self.supabase.table("one_on_one_messages")\
                .select("*, author:profiles(*)")\
                .eq("chat_id", chat_id)\
                .order("created_at", desc=True)\
                .range(start, end)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch messages")
        return list(reversed(result.data or []))

    def send_message(self, chat_id: str, user_id: str, content: str) -> Dict[str, Any]:
        try:
            inserted = self.supabase.table("one_on_one_messages").insert({
                "chat_id": chat_id,
                "author_id": user_id,
                "content": content
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create message")

            message_id = inserted.data[0]["id"]
            result = self.supabase.table("one_on_one_messages")\
                .select("*, author:profiles(*)")\
                .eq("id", message_id)\
                .limit(1)\
                .execute()
            message = result.data[0] if result.data else inserted.data[0]
        except Exception as e:
            raise_api_error(e, "Failed to create message")

        try:
            self.supabase.table("one_on_one_chats")\
                .update({"updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", chat_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to bump updated_at of chat {chat_id}: {e}")
        return message
