import logging
from datetime import datetime, timezone
from supabase import Client
from app.core.errors import raise_api_error
from app.core.pagination import page_bounds
from app.modules.group_chats.schemas import GroupChatMember
from typing import List, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)


class GroupChatService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_members(self, group_chat_id: str) -> List[GroupChatMember]:
        """Members flattened to their profile summary and role"""
        try:
            result = self.supabase.table("group_chat_members")\
                .select("*, user:profiles(*)")\
                .eq("group_chat_id", group_chat_id)\
                .order("joined_at")\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch members")

        members = []
        for row in result.data or []:
            user = row.get("user") or {}
            members.append(GroupChatMember(
                id=user.get("id") or row.get("user_id"),
                username=user.get("username"),
                full_name=user.get("full_name"),
                avatar_url=user.get("avatar_url"),
                role=row.get("role") or "member",
                joined_at=row.get("joined_at"),
            ))
        return members

    def add_members(self, group_chat_id: str, user_ids: List[str]) -> Dict[str, Any]:
        """Add existing users that are not members yet"""
        requested = list(dict.fromkeys(user_ids))
        try:
            users = self.supabase.table("profiles")\
                .select("id")\
                .in_("id", requested)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to verify users")

        valid_ids = {u["id"] for u in users.data or []}
        invalid_ids = [user_id for user_id in requested if user_id not in valid_ids]
        if invalid_ids:
            raise HTTPException(
                status_code=400,
                detail={"message": "Some users not found", "invalid_user_ids": invalid_ids}
            )

        try:
            existing = self.supabase.table("group_chat_members")\
                .select("user_id")\
                .eq("group_chat_id", group_chat_id)\
                .in_("user_id", requested)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to check existing members")

        existing_ids = [m["user_id"] for m in existing.data or []]
        new_ids = [user_id for user_id in requested if user_id not in existing_ids]
        if not new_ids:
            raise HTTPException(
                status_code=400,
                detail={"message": "All users are already members", "already_members": existing_ids}
            )

        try:
            self.supabase.table("group_chat_members").insert([
                {"group_chat_id": group_chat_id, "user_id": user_id, "role": "member"}
                for user_id in new_ids
            ]).execute()
        except Exception as e:
            raise_api_error(e, "Failed to add members")

        logger.info(f"Added {len(new_ids)} members to group chat {group_chat_id}")
        return {"success": True, "added_members": new_ids, "already_members": existing_ids}

    def list_messages(self, group_chat_id: str, page: int, limit: int) -> List[Dict[str, Any]]:
        """One page of messages, newest page first, returned in chronological order"""
        start, end = page_bounds(page, limit)
        try:
            result = self.supabase.table("group_chat_messages")\
                .select("*, author:profiles(*)")\
                .eq("group_chat_id", group_chat_id)\
                .order("created_at", desc=True)\
                .range(start, end)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch messages")
        return list(reversed(result.data or []))

    def send_message(self, group_chat_id: str, user_id: str, content: str) -> Dict[str, Any]:
        try:
            inserted = self.supabase.table("group_chat_messages").insert({
                "group_chat_id": group_chat_id,
                "author_id": user_id,
                "content": content
            }).execute()

            if not inserted.data:
                raise HTTPException(status_code=500, detail="Failed to create message")

            message_id = inserted.data[0]["id"]
            result = self.supabase.table("group_chat_messages")\
                .select("*, author:profiles(*)")\
                .eq("id", message_id)\
                .limit(1)\
                .execute()
            message = result.data[0] if result.data else inserted.data[0]
        except Exception as e:
            raise_api_error(e, "Failed to create message")

        try:
            self.supabase.table("group_chats")\
                .update({"updated_at": datetime.now(timezone.utc).isoformat()})\
                .eq("id", group_chat_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to bump updated_at of group chat {group_chat_id}: {e}")
        return message
