import asyncio
import logging
from supabase import AsyncClient
from typing import Any, Dict, Set

logger = logging.getLogger(__name__)


class UnreadCounter:
    """Unread one-on-one message count, recomputed whenever someone else writes"""

    def __init__(self, client: AsyncClient, user_id: str):
        self.client = client
        self.user_id = user_id
        self.unread_count = 0
        self.loading = True
        self._channel = None
        self._pending: Set[asyncio.Task] = set()

    async def refresh(self) -> int:
        try:
            chats = await self.client.table("one_on_one_chats")\
                .select("id")\
                .or_(f"user1_id.eq.{self.user_id},user2_id.eq.{self.user_id}")\
                .execute()
            chat_ids = [chat["id"] for chat in chats.data or []]
            if not chat_ids:
                self.unread_count = 0
                return 0

            result = await self.client.table("one_on_one_messages")\
                .select("id", count="exact")\
                .in_("chat_id", chat_ids)\
                .neq("author_id", self.user_id)\
                .execute()
            self.unread_count = result.count or 0
        except Exception as e:
            logger.error(f"Error fetching unread count: {e}")
        finally:
            self.loading = False
        return self.unread_count

    def _on_insert(self, payload: Dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self.refresh())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def wait_pending(self) -> None:
        """Wait for the refreshes scheduled by realtime events so far"""
        if self._pending:
            await asyncio.gather(*self._pending)

    async def start(self) -> None:
        await self.refresh()
        channel = self.client.channel(f"unread-count:{self.user_id}")
        channel.on_postgres_changes(
            "INSERT",
            callback=self._on_insert,
            table="one_on_one_messages",
            schema="public",
            filter=f"author_id=neq.{self.user_id}",
        )
        await channel.subscribe()
        self._channel = channel

    async def stop(self) -> None:
        if self._channel is not None:
            await self.client.remove_channel(self._channel)
            self._channel = None
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        self._pending.clear()
