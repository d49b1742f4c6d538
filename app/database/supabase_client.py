import logging
from supabase import create_client, acreate_client, Client, AsyncClient, ClientOptions
from app.config import settings
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    def short_lived(cls, headers: Optional[Dict[str, str]] = None) -> Client:
        """Client for a single request; it never stores or refreshes a session of its own."""
        options = ClientOptions(
            headers=headers or {},
            auto_refresh_token=False,
            persist_session=False,
        )
        return create_client(settings.supabase_url, settings.supabase_key, options=options)

    @classmethod
    def for_user(cls, access_token: str) -> Client:
        """Client acting as the caller so row level security applies to every query."""
        client = cls.short_lived({"Authorization": f"Bearer {access_token}"})
        client.postgrest.auth(access_token)
        return client


def close_client(client: Client) -> None:
    """Release the HTTP connections of a short-lived client"""
    try:
        client.auth.close()
        client.postgrest.session.close()
    except Exception as e:
        logger.warning(f"Failed to close Supabase client: {e}")


def get_supabase() -> Client:
    return SupabaseClient.get_client()


async def get_realtime_client(access_token: str = None) -> AsyncClient:
    """Async client for realtime subscriptions. Pass the user's token so channels respect RLS."""
    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    if access_token:
        await client.realtime.set_auth(access_token)
        client.postgrest.auth(access_token)
    return client
