"""
Core dependencies for route protection and membership checking
"""

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, close_client, SupabaseClient
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any, Iterator
import logging

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)

GROUP_PERMISSION_COLUMNS = (
    "role, can_add_members, can_remove_members, can_edit_group_info, "
    "can_manage_permissions, can_delete_group, can_pin_messages, can_delete_messages"
)


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_session_supabase() -> Iterator[Client]:
    """Throwaway client for sign-up and sign-in, so the shared client never holds a user session"""
    client = SupabaseClient.short_lived()
    try:
        yield client
    finally:
        close_client(client)


def get_session_auth_service(supabase: Client = Depends(get_session_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> str:
    """Extract JWT token from Authorization header"""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the caller from the bearer token; 401 when missing or invalid"""
    return auth_service.get_current_user(token)


def get_user_supabase(
    token: str = Depends(get_current_token),
    user_data: dict = Depends(get_current_user),
) -> Iterator[Client]:
    """Supabase client scoped to the caller, closed when the request ends.

    Depends on get_current_user so the token is verified first.
    """
    client = SupabaseClient.for_user(token)
    try:
        yield client
    finally:
        close_client(client)


def _first(result) -> Optional[Dict[str, Any]]:
    return result.data[0] if result and result.data else None


def get_active_group_membership(
    group_id: str,
    user_id: str,
    supabase: Client,
    columns: str = "role"
) -> Optional[Dict[str, Any]]:
    """Return the caller's active group_members row or None"""
    try:
        result = supabase.table("group_members")\
            .select(columns)\
            .eq("group_id", group_id)\
            .eq("user_id", user_id)\
            .eq("status", "active")\
            .limit(1)\
            .execute()
        return _first(result)
    except Exception as e:
        logger.error(f"Error checking membership of group {group_id}: {e}")
        return None


def check_group_member(group_id: str, user_id: str, supabase: Client, columns: str = "role") -> Dict[str, Any]:
    """Require an active membership in a group"""
    membership = get_active_group_membership(group_id, user_id, supabase, columns)
    if not membership:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return membership


def check_join_request_reviewer(group_id: str, user_id: str, supabase: Client) -> Dict[str, Any]:
    """Creators and admins, or members allowed to add members, may review join requests"""
    membership = get_active_group_membership(group_id, user_id, supabase, "role, can_add_members")
    if not membership or (
        membership.get("role") not in ("creator", "admin") and not membership.get("can_add_members")
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return membership


def check_group_chat_member(
    group_chat_id: str,
    user_id: str,
    supabase: Client,
    require_admin: bool = False
) -> Dict[str, Any]:
    """Require membership (or the admin role) in a group chat"""
    try:
        result = supabase.table("group_chat_members")\
            .select("role")\
            .eq("group_chat_id", group_chat_id)\
            .eq("user_id", user_id)\
            .limit(1)\
            .execute()
        membership = _first(result)
    except Exception as e:
        logger.error(f"Error checking membership of group chat {group_chat_id}: {e}")
        membership = None

    if require_admin and (not membership or membership.get("role") != "admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    if not membership:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return membership


def check_chat_participant(chat_id: str, user_id: str, supabase: Client) -> Dict[str, Any]:
    """Require the caller to be one of the two users of a one-on-one chat"""
    try:
        result = supabase.table("one_on_one_chats")\
            .select("id")\
            .eq("id", chat_id)\
            .or_(f"user1_id.eq.{user_id},user2_id.eq.{user_id}")\
            .limit(1)\
            .execute()
        chat = _first(result)
    except Exception as e:
        logger.error(f"Error checking access to chat {chat_id}: {e}")
        chat = None

    if not chat:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat not found or access denied"
        )
    return chat


def are_friends(user_id: str, other_user_id: str, supabase: Client) -> bool:
    """True if an accepted friendship exists in either direction"""
    try:
        result = supabase.table("friendships")\
            .select("id")\
            .or_(friendship_pair_filter(user_id, other_user_id))\
            .eq("status", "accepted")\
            .limit(1)\
            .execute()
        return bool(result.data)
    except Exception as e:
        logger.error(f"Error checking friendship: {e}")
        return False


def friendship_pair_filter(user_id: str, other_user_id: str) -> str:
    """PostgREST or-filter matching a friendship in either direction"""
    return (
        f"and(user_id.eq.{user_id},friend_id.eq.{other_user_id}),"
        f"and(user_id.eq.{other_user_id},friend_id.eq.{user_id})"
    )

