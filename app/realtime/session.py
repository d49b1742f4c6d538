import logging
from app.realtime.messaging import RealtimeMessaging, Unsubscribe
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class MessagingSession:
    """
    Live view of a user's conversations.

    Keeps the loaded messages and chats in sync with realtime events:
    a message is added at most once per id, and a chat update replaces the
    chat with the same id or is put at the top of the list.
    """

    def __init__(self, messaging: RealtimeMessaging, user_id: str, chat_id: Optional[str] = None):
        self.messaging = messaging
        self.user_id = user_id
        self.chat_id = chat_id
        self.messages: List[Dict[str, Any]] = []
        self.chats: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None
        self.connection_status = "disconnected"
        self._unsubscribers: List[Unsubscribe] = []

    async def connect(self) -> None:
        """Subscribe to the user's messages and chats (and the open chat), then load data"""
        self.connection_status = "connecting"
        subscriptions = [
            (self.messaging.subscribe_to_user_messages, self.user_id, self.handle_new_message),
            (self.messaging.subscribe_to_user_chats, self.user_id, self.handle_chat_update),
        ]
        if self.chat_id:
            subscriptions.append(
                (self.messaging.subscribe_to_chat_messages, self.chat_id, self.handle_new_message)
            )
        try:
            for subscribe, target, handler in subscriptions:
                self._unsubscribers.append(await subscribe(target, handler, self.handle_error))
        except Exception as e:
            await self.close()
            self.handle_error(e)
            return

        # An error reported while subscribing leaves the session disconnected
        if self.connection_status == "connecting":
            self.connection_status = "connected"

        await self.load_chats()
        if self.chat_id:
            await self.load_messages()

    async def close(self) -> None:
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            await unsubscribe()
        self.connection_status = "disconnected"

    def clear_error(self) -> None:
        self.error = None

    def handle_new_message(self, message: Dict[str, Any]) -> None:
        if any(existing.get("id") == message.get("id") for existing in self.messages):
            return
        self.messages.append(message)

    def handle_chat_update(self, chat: Dict[str, Any]) -> None:
        for index, existing in enumerate(self.chats):
            if existing.get("id") == chat.get("id"):
                self.chats[index] = chat
                return
        self.chats.insert(0, chat)

    def handle_error(self, err: Exception) -> None:
        logger.error(f"Realtime error: {err}")
        self.error = f"Connection error: {err}"
        self.connection_status = "disconnected"

    async def load_messages(self) -> None:
        if not self.chat_id:
            return
        self.loading = True
        self.error = None
        try:
            self.messages = await self.messaging.load_chat_messages(self.chat_id)
        except Exception as e:
            self.error = f"Failed to load messages: {e}"
        finally:
            self.loading = False

    async def load_chats(self) -> None:
        self.loading = True
        self.error = None
        try:
            self.chats = await self.messaging.load_user_chats(self.user_id)
        except Exception as e:
            self.error = f"Failed to load chats: {e}"
        finally:
            self.loading = False

    async def get_or_create_chat(self, friend_id: str) -> Dict[str, Any]:
        return await self.messaging.get_or_create_chat(self.user_id, friend_id)

    async def send_message(self, content: str, receiver_id: str) -> Dict[str, Any]:
        """Returns {"success": True} or {"success": False, "error": ...}"""
        if not content.strip():
            return {"success": False, "error": "Message content cannot be empty"}

        try:
            chat = await self.get_or_create_chat(receiver_id)
        except Exception as e:
            return {"success": False, "error": f"Failed to get/create chat: {e}"}

        try:
            message = await self.messaging.send_message(
                content.strip(), self.user_id, receiver_id, chat["id"]
            )
        except Exception as e:
            return {"success": False, "error": f"Failed to send message: {e}"}

        self.handle_new_message(message)
        return {"success": True}
