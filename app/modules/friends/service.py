import logging
from datetime import datetime, timezone
from supabase import Client
from app.core.dependencies import friendship_pair_filter
from app.core.errors import raise_api_error
from app.modules.friends.schemas import FriendSummary, FriendRequestSummary
from typing import List, Dict, Any, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

FRIENDSHIP_SELECT = (
    "*, "
    "friend:profiles!friendships_friend_id_fkey(*), "
    "requester:profiles!friendships_user_id_fkey(*)"
)

# type -> (rpc name, response key)
LIST_RPCS = {
    "friends": ("get_user_friends", "friends"),
    "pending": ("get_pending_friend_requests", "requests"),
    "sent": ("get_sent_friend_requests", "requests"),
    "for_groups": ("get_friends_for_groups", "friends"),
}


def to_friend_summary(friendship: Dict[str, Any], user_id: str) -> FriendSummary:
    """Flatten a friendship row to the profile on the other side"""
    if friendship.get("user_id") == user_id:
        other = friendship.get("friend") or {}
    else:
        other = friendship.get("requester") or {}
    return FriendSummary(
        id=other.get("id") or (
            friendship.get("friend_id") if friendship.get("user_id") == user_id else friendship.get("user_id")
        ),
        username=other.get("username"),
        full_name=other.get("full_name"),
        avatar_url=other.get("avatar_url"),
        status=friendship["status"],
        created_at=friendship.get("created_at"),
    )


class FriendService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_friends(self, user_id: str, status: str = "accepted") -> List[FriendSummary]:
        """Friendships in either direction, optionally filtered by status ('all' for every status)"""
        try:
            query = self.supabase.table("friendships")\
                .select(FRIENDSHIP_SELECT)\
                .or_(f"user_id.eq.{user_id},friend_id.eq.{user_id}")
            if status != "all":
                query = query.eq("status", status)
            result = query.execute()
            return [to_friend_summary(row, user_id) for row in result.data or []]
        except Exception as e:
            raise_api_error(e, "Failed to fetch friends")

    def find_friendship(self, user_id: str, other_user_id: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table("friendships")\
                .select("id, status")\
                .or_(friendship_pair_filter(user_id, other_user_id))\
                .limit(1)\
                .execute()
            return result.data[0] if result.data else None
        except Exception as e:
            raise_api_error(e, "Failed to check existing friendship")

    def profile_exists(self, profile_id: str) -> bool:
        try:
            result = self.supabase.table("profiles")\
                .select("id")\
                .eq("id", profile_id)\
                .limit(1)\
                .execute()
            return bool(result.data)
        except Exception as e:
            raise_api_error(e, "Failed to look up user")

    def send_request(self, user_id: str, friend_id: str) -> FriendSummary:
        """Create a pending friendship from the caller to friend_id"""
        if friend_id == user_id:
            raise HTTPException(status_code=400, detail="Cannot add yourself as a friend")
        if not self.profile_exists(friend_id):
            raise HTTPException(status_code=404, detail="User not found")

        existing = self.find_friendship(user_id, friend_id)
        if existing:
            raise HTTPException(
                status_code=400,
                detail={"message": "Friendship already exists", "status": existing.get("status")}
            )

        try:
            insert_result = self.supabase.table("friendships").insert({
                "user_id": user_id,
                "friend_id": friend_id,
                "status": "pending"
            }).execute()

            if not insert_result.data:
                raise HTTPException(status_code=500, detail="Failed to send friend request")

            friendship_id = insert_result.data[0]["id"]
            result = self.supabase.table("friendships")\
                .select(FRIENDSHIP_SELECT)\
                .eq("id", friendship_id)\
                .limit(1)\
                .execute()
            row = result.data[0] if result.data else insert_result.data[0]
            logger.info(f"Friend request {friendship_id} sent from {user_id} to {friend_id}")
            return to_friend_summary(row, user_id)
        except Exception as e:
            raise_api_error(e, "Failed to send friend request")

    def remove_friend(self, user_id: str, friend_id: str) -> bool:
        """Delete the friendship in both directions"""
        try:
            self.supabase.table("friendships")\
                .delete()\
                .or_(friendship_pair_filter(user_id, friend_id))\
                .execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to remove friend")

    def list_received_requests(self, user_id: str) -> List[FriendRequestSummary]:
        """Pending requests addressed to the caller"""
        try:
            result = self.supabase.table("friendships")\
                .select("*, requester:profiles!friendships_user_id_fkey(*)")\
                .eq("friend_id", user_id)\
                .eq("status", "pending")\
                .order("created_at", desc=True)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch friend requests")

        requests = []
        for row in result.data or []:
            requester = row.get("requester") or {}
            requests.append(FriendRequestSummary(
                id=requester.get("id") or row["user_id"],
                username=requester.get("username"),
                full_name=requester.get("full_name"),
                avatar_url=requester.get("avatar_url"),
                friendship_id=row["id"],
                created_at=row.get("created_at"),
            ))
        return requests

    def respond_to_request(self, user_id: str, friendship_id: str, action: str) -> str:
        """Accept or reject a pending request addressed to the caller"""
        try:
            result = self.supabase.table("friendships")\
                .select("*")\
                .eq("id", friendship_id)\
                .eq("friend_id", user_id)\
                .eq("status", "pending")\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch friend request")

        if not result.data:
            raise HTTPException(status_code=404, detail="Friend request not found")

        if action == "accept":
            try:
                self.supabase.table("friendships")\
                    .update({
                        "status": "accepted",
                        "updated_at": datetime.now(timezone.utc).isoformat()
                    })\
                    .eq("id", friendship_id)\
                    .execute()
            except Exception as e:
                raise_api_error(e, "Failed to accept friend request")
            return "accepted"

        try:
            self.supabase.table("friendships")\
                .delete()\
                .eq("id", friendship_id)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to reject friend request")
        return "rejected"

    def _call_request_rpc(self, rpc_name: str, params: Dict[str, Any], fallback: str) -> Dict[str, Any]:
        try:
            result = self.supabase.rpc(rpc_name, params).execute()
        except Exception as e:
            raise_api_error(e, fallback)

        outcome = result.data
        if isinstance(outcome, list):
            outcome = outcome[0] if outcome else {}
        outcome = outcome or {}
        if not outcome.get("success"):
            raise HTTPException(status_code=400, detail=outcome.get("error") or fallback)
        return outcome

    def accept_request(self, user_id: str, requester_id: str) -> Dict[str, Any]:
        outcome = self._call_request_rpc(
            "accept_friend_request",
            {"p_requester_id": requester_id, "p_accepter_id": user_id},
            "Failed to accept friend request",
        )
        logger.info(f"{user_id} accepted friend request from {requester_id}")
        return {
            "success": True,
            "message": outcome.get("message"),
            "friendship": outcome.get("friendship"),
        }

    def decline_request(self, user_id: str, requester_id: str) -> Dict[str, Any]:
        outcome = self._call_request_rpc(
            "decline_friend_request",
            {"p_requester_id": requester_id, "p_decliner_id": user_id},
            "Failed to decline friend request",
        )
        return {"success": True, "message": outcome.get("message")}

    def list_by_type(self, user_id: str, list_type: str) -> Dict[str, Any]:
        """Friend lists and counters served by database functions"""
        params = {"p_user_id": user_id}
        if list_type == "count":
            try:
                friend_count = self.supabase.rpc("get_friend_count", params).execute()
                pending_count = self.supabase.rpc("get_pending_requests_count", params).execute()
            except Exception as e:
                raise_api_error(e, "Failed to fetch counts")
            return {
                "friend_count": friend_count.data or 0,
                "pending_requests_count": pending_count.data or 0,
            }

        if list_type not in LIST_RPCS:
            raise HTTPException(status_code=400, detail="Invalid type parameter")
        rpc_name, key = LIST_RPCS[list_type]
        try:
            result = self.supabase.rpc(rpc_name, params).execute()
        except Exception as e:
            raise_api_error(e, f"Failed to fetch {list_type.replace('_', ' ')}")
        return {key: result.data or []}
