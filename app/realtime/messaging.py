"""
Subscriptions to message and chat changes over Supabase Realtime.

Channels are kept in a registry keyed by name so that subscribing twice to the
same chat replaces the old channel instead of stacking listeners.
"""

import logging
from datetime import datetime, timezone
from supabase import AsyncClient
from app.database.supabase_client import get_realtime_client
from typing import Any, Awaitable, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

MESSAGE_SELECT = (
    "*, "
    "sender:profiles!messages_sender_id_fkey(*), "
    "receiver:profiles!messages_receiver_id_fkey(*)"
)
CHAT_SELECT = (
    "*, "
    "user:profiles!chats_user_id_fkey(*), "
    "friend:profiles!chats_friend_id_fkey(*)"
)

MessageHandler = Callable[[Dict[str, Any]], None]
ErrorHandler = Callable[[Exception], None]
Unsubscribe = Callable[[], Awaitable[None]]

FAILED_STATES = {"CHANNEL_ERROR", "TIMED_OUT"}


class RealtimeError(Exception):
    """A realtime query or subscription failed"""


def record_from_payload(payload: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """The new row carried by a postgres_changes event"""
    data = payload.get("data")
    if isinstance(data, dict) and data.get("record") is not None:
        return data["record"]
    return payload.get("new") or payload.get("record")


def _single(value: Any) -> Any:
    # Embedded relations can come back as a one-element list
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _flatten_participants(message: Dict[str, Any]) -> Dict[str, Any]:
    return {**message, "sender": _single(message.get("sender")), "receiver": _single(message.get("receiver"))}


class RealtimeMessaging:
    def __init__(self, client: AsyncClient):
        self.client = client
        self.channels: Dict[str, Any] = {}

    @classmethod
    async def connect(cls, access_token: Optional[str] = None) -> "RealtimeMessaging":
        return cls(await get_realtime_client(access_token))

    async def _subscribe(
        self,
        name: str,
        bindings: List[Dict[str, Any]],
        on_record: MessageHandler,
        on_error: Optional[ErrorHandler],
        description: str
    ) -> Unsubscribe:
        await self.unsubscribe_from_channel(name)

        def handle_change(payload: Dict[str, Any]) -> None:
            record = record_from_payload(payload)
            if record is not None:
                on_record(record)

        def handle_status(status: Any, err: Optional[Exception] = None) -> None:
            state = getattr(status, "value", status)
            if state == "SUBSCRIBED":
                logger.info(f"Subscribed to {name}")
            elif state in FAILED_STATES:
                logger.error(f"Error subscribing to {description}: {err}")
                if on_error:
                    on_error(RealtimeError(f"Failed to subscribe to {description}"))

        channel = self.client.channel(name)
        for binding in bindings:
            channel.on_postgres_changes(
                binding["event"],
                callback=handle_change,
                table=binding["table"],
                schema="public",
                filter=binding.get("filter"),
            )
        await channel.subscribe(handle_status)
        self.channels[name] = channel

        async def unsubscribe() -> None:
            await self.unsubscribe_from_channel(name)

        return unsubscribe

    async def subscribe_to_chat_messages(
        self,
        chat_id: str,
        on_message: MessageHandler,
        on_error: Optional[ErrorHandler] = None
    ) -> Unsubscribe:
        """New and edited messages of one chat"""
        chat_filter = f"chat_id=eq.{chat_id}"
        bindings = [
            {"event": event, "table": "messages", "filter": chat_filter}
            for event in ("INSERT", "UPDATE")
        ]
        return await self._subscribe(f"chat:{chat_id}", bindings, on_message, on_error, f"chat {chat_id}")

    async def subscribe_to_user_messages(
        self,
        user_id: str,
        on_message: MessageHandler,
        on_error: Optional[ErrorHandler] = None
    ) -> Unsubscribe:
        """Messages sent or received by a user, across all chats"""
        # Realtime filters take a single column, so sender and receiver get separate bindings
        bindings = [
            {"event": event, "table": "messages", "filter": f"{column}=eq.{user_id}"}
            for event in ("INSERT", "UPDATE")
            for column in ("sender_id", "receiver_id")
        ]
        return await self._subscribe(
            f"user_messages:{user_id}", bindings, on_message, on_error, f"user {user_id} messages"
        )

    async def subscribe_to_user_chats(
        self,
        user_id: str,
        on_chat_update: MessageHandler,
        on_error: Optional[ErrorHandler] = None
    ) -> Unsubscribe:
        """Any change to the chats a user takes part in"""
        bindings = [
            {"event": "*", "table": "chats", "filter": f"{column}=eq.{user_id}"}
            for column in ("user_id", "friend_id")
        ]
        return await self._subscribe(
            f"user_chats:{user_id}", bindings, on_chat_update, on_error, f"user {user_id} chats"
        )

    async def unsubscribe_from_channel(self, name: str) -> None:
        channel = self.channels.pop(name, None)
        if channel is not None:
            await self.client.remove_channel(channel)

    async def unsubscribe_all(self) -> None:
        for name in list(self.channels):
            await self.unsubscribe_from_channel(name)

    def get_connection_status(self) -> str:
        return "connected" if self.channels else "disconnected"

    async def send_message(self, content: str, sender_id: str, receiver_id: str, chat_id: str) -> Dict[str, Any]:
        """Insert a message and record it as the chat's last message"""
        try:
            inserted = await self.client.table("messages").insert({
                "content": content,
                "sender_id": sender_id,
                "receiver_id": receiver_id,
                "chat_id": chat_id
            }).execute()
            if not inserted.data:
                raise RealtimeError("Message was not stored")

            result = await self.client.table("messages")\
                .select(MESSAGE_SELECT)\
                .eq("id", inserted.data[0]["id"])\
                .limit(1)\
                .execute()
            message = result.data[0] if result.data else inserted.data[0]
        except RealtimeError:
            raise
        except Exception as e:
            logger.error(f"Error sending message: {e}")
            raise RealtimeError(str(e)) from e

        try:
            await self.client.table("chats")\
                .update({
                    "last_message": content,
                    "last_message_at": datetime.now(timezone.utc).isoformat()
                })\
                .eq("id", chat_id)\
                .execute()
        except Exception as e:
            logger.warning(f"Failed to update last message of chat {chat_id}: {e}")

        return _flatten_participants(message)

    async def get_or_create_chat(self, user_id: str, friend_id: str) -> Dict[str, Any]:
        try:
            existing = await self.client.table("chats")\
                .select("*")\
                .or_(
                    f"and(user_id.eq.{user_id},friend_id.eq.{friend_id}),"
                    f"and(user_id.eq.{friend_id},friend_id.eq.{user_id})"
                )\
                .limit(1)\
                .execute()
            if existing.data:
                return existing.data[0]

            created = await self.client.table("chats").insert({
                "user_id": user_id,
                "friend_id": friend_id
            }).execute()
        except Exception as e:
            logger.error(f"Error in get_or_create_chat: {e}")
            raise RealtimeError(str(e)) from e

        if not created.data:
            raise RealtimeError("Chat was not created")
        return created.data[0]

    async def load_chat_messages(self, chat_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        """Oldest messages of a chat first"""
        try:
            result = await self.client.table("messages")\
                .select(MESSAGE_SELECT)\
                .eq("chat_id", chat_id)\
                .order("created_at")\
                .limit(limit)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading messages: {e}")
            raise RealtimeError(str(e)) from e
        return [_flatten_participants(message) for message in result.data or []]

    async def load_user_chats(self, user_id: str) -> List[Dict[str, Any]]:
        """A user's chats, most recent activity first"""
        try:
            result = await self.client.table("chats")\
                .select(CHAT_SELECT)\
                .or_(f"user_id.eq.{user_id},friend_id.eq.{user_id}")\
                .order("last_message_at", desc=True)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading user chats: {e}")
            raise RealtimeError(str(e)) from e
        return result.data or []
