import logging
from supabase import Client
from app.core.dependencies import GROUP_PERMISSION_COLUMNS, get_active_group_membership
from app.core.errors import raise_api_error
from app.modules.groups.schemas import GroupCreate, GroupUpdate, MemberPermissionsUpdate
from typing import List, Dict, Any, Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

MEMBER_PROFILE_SELECT = (
    "*, user:profiles!group_members_user_id_fkey("
    "id, username, full_name, display_name, avatar_url, status, role, company, location)"
)

OWN_REQUESTS_SELECT = (
    "*, group:groups("
    "id, name, description, avatar_url, is_private, creator_id, "
    "creator:profiles!groups_creator_id_fkey(username, full_name, avatar_url))"
)


class GroupService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_groups(self, list_type: str = "user") -> List[Dict[str, Any]]:
        """List the caller's groups, public groups, or every visible group"""
        try:
            if list_type == "user":
                # user_groups is scoped to the caller by the database
                result = self.supabase.table("user_groups").select("*").execute()
                return result.data or []

            query = self.supabase.table("group_details").select("*")
            if list_type == "public":
                query = query.eq("is_private", False)
            result = query.order("created_at", desc=True).execute()
            return result.data or []
        except Exception as e:
            raise_api_error(e, "Failed to fetch groups")

    def _fetch_details(self, group_id: str) -> Optional[Dict[str, Any]]:
        result = self.supabase.table("group_details")\
            .select("*")\
            .eq("id", group_id)\
            .limit(1)\
            .execute()
        return result.data[0] if result.data else None

    def create_group(self, group_data: GroupCreate, user_id: str) -> Dict[str, Any]:
        """Create a group through create_group and return its details"""
        params = {
            "p_name": group_data.name.strip(),
            "p_description": (group_data.description or "").strip() or None,
            "p_avatar_url": group_data.avatar_url or None,
            "p_cover_image_url": group_data.cover_image_url or None,
            "p_is_private": group_data.is_private,
            "p_max_members": group_data.max_members,
            "p_allow_member_invites": group_data.allow_member_invites,
            "p_require_approval": group_data.require_approval,
            "p_creator_id": user_id,
            "p_initial_members": group_data.initial_members or None,
            "p_initial_admins": group_data.initial_admins or None,
        }
        try:
            result = self.supabase.rpc("create_group", params).execute()
        except Exception as e:
            raise_api_error(e, "Failed to create group", use_remote_message=True)

        group_id = result.data
        logger.info(f"Created group {group_id} by {user_id}")

        try:
            group = self._fetch_details(group_id)
        except Exception as e:
            raise_api_error(e, "Group created but failed to fetch details")
        if not group:
            raise HTTPException(status_code=500, detail="Group created but failed to fetch details")
        return group

    def get_group(self, group_id: str, user_id: str) -> Dict[str, Any]:
        """Group details; private groups are only visible to active members"""
        try:
            group = self._fetch_details(group_id)
        except Exception as e:
            raise_api_error(e, "Failed to fetch group")

        if not group:
            raise HTTPException(status_code=404, detail="Group not found")

        if group.get("is_private"):
            membership = get_active_group_membership(group_id, user_id, self.supabase, GROUP_PERMISSION_COLUMNS)
            if not membership:
                raise HTTPException(status_code=403, detail="Access denied to private group")
            return {**group, "user_membership": membership}
        return group

    def update_group(self, group_id: str, group_data: GroupUpdate, user_id: str) -> Dict[str, Any]:
        """Update group info; permission checks happen inside update_group_info"""
        params = {f"p_{key}": value for key, value in group_data.model_dump().items()}
        params["p_group_id"] = group_id
        params["p_updated_by"] = user_id
        try:
            self.supabase.rpc("update_group_info", params).execute()
        except Exception as e:
            raise_api_error(e, "Failed to update group", use_remote_message=True)

        try:
            group = self._fetch_details(group_id)
        except Exception as e:
            raise_api_error(e, "Group updated but failed to fetch details")
        if not group:
            raise HTTPException(status_code=404, detail="Group not found")
        return group

    def delete_group(self, group_id: str, user_id: str) -> bool:
        """Delete a group (creator only); members and requests cascade"""
        try:
            result = self.supabase.table("groups")\
                .select("creator_id")\
                .eq("id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch group")

        if not result.data:
            raise HTTPException(status_code=404, detail="Group not found")
        if result.data[0].get("creator_id") != user_id:
            raise HTTPException(status_code=403, detail="Only group creator can delete the group")

        try:
            self.supabase.table("groups").delete().eq("id", group_id).execute()
            logger.info(f"Deleted group {group_id}")
            return True
        except Exception as e:
            raise_api_error(e, "Failed to delete group")

    def list_members(self, group_id: str) -> List[Dict[str, Any]]:
        """Active members with their profile summary, oldest first"""
        try:
            result = self.supabase.table("group_members")\
                .select(MEMBER_PROFILE_SELECT)\
                .eq("group_id", group_id)\
                .eq("status", "active")\
                .order("joined_at")\
                .execute()
            return result.data or []
        except Exception as e:
            raise_api_error(e, "Failed to fetch group members")

    def add_member(self, group_id: str, friend_id: str, user_id: str) -> bool:
        try:
            self.supabase.rpc("add_friend_to_group", {
                "p_group_id": group_id,
                "p_friend_id": friend_id,
                "p_added_by": user_id
            }).execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to add friend to group", use_remote_message=True)

    def update_member_permissions(
        self,
        group_id: str,
        member_id: str,
        permissions: MemberPermissionsUpdate,
        user_id: str
    ) -> bool:
        """Only the flags supplied are sent"""
        try:
            self.supabase.rpc("update_group_member_permissions", {
                "p_group_id": group_id,
                "p_member_id": member_id,
                "p_permissions": permissions.model_dump(exclude_none=True),
                "p_updated_by": user_id
            }).execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to update member permissions", use_remote_message=True)

    def remove_member(self, group_id: str, member_id: str, user_id: str) -> bool:
        try:
            self.supabase.rpc("remove_group_member", {
                "p_group_id": group_id,
                "p_member_id": member_id,
                "p_removed_by": user_id
            }).execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to remove member", use_remote_message=True)

    def list_join_requests(self, group_id: str) -> List[Dict[str, Any]]:
        try:
            result = self.supabase.table("pending_join_requests")\
                .select("*")\
                .eq("group_id", group_id)\
                .order("created_at", desc=True)\
                .execute()
            return result.data or []
        except Exception as e:
            raise_api_error(e, "Failed to fetch join requests")

    def request_to_join(self, group_id: str, user_id: str, message: Optional[str]) -> Any:
        """Submit a join request; returns the new request id"""
        try:
            result = self.supabase.rpc("request_to_join_group", {
                "p_group_id": group_id,
                "p_message": message or None,
                "p_user_id": user_id
            }).execute()
            return result.data
        except Exception as e:
            raise_api_error(e, "Failed to request to join group", use_remote_message=True)

    def review_join_request(self, request_id: str, action: str, user_id: str) -> bool:
        if action == "approve":
            rpc_name, params = "approve_group_join_request", {
                "p_request_id": request_id,
                "p_approved_by": user_id
            }
        else:
            rpc_name, params = "reject_group_join_request", {
                "p_request_id": request_id,
                "p_rejected_by": user_id
            }
        try:
            self.supabase.rpc(rpc_name, params).execute()
            return True
        except Exception as e:
            raise_api_error(e, f"Failed to {action} join request", use_remote_message=True)

    def cancel_join_request(self, group_id: str, request_id: str, user_id: str) -> bool:
        """Cancel a pending request (requester only)"""
        try:
            result = self.supabase.table("group_join_requests")\
                .select("user_id, status")\
                .eq("id", request_id)\
                .eq("group_id", group_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch join request")

        if not result.data:
            raise HTTPException(status_code=404, detail="Join request not found")
        join_request = result.data[0]
        if join_request.get("user_id") != user_id:
            raise HTTPException(status_code=403, detail="Only the requester can cancel their request")
        if join_request.get("status") != "pending":
            raise HTTPException(status_code=400, detail="Cannot cancel a request that has already been processed")

        try:
            self.supabase.table("group_join_requests")\
                .update({"status": "cancelled"})\
                .eq("id", request_id)\
                .execute()
            return True
        except Exception as e:
            raise_api_error(e, "Failed to cancel join request")

    def list_own_join_requests(self, user_id: str) -> List[Dict[str, Any]]:
        """The caller's join requests with a summary of each group"""
        try:
            result = self.supabase.table("group_join_requests")\
                .select(OWN_REQUESTS_SELECT)\
                .eq("user_id", user_id)\
                .order("created_at", desc=True)\
                .execute()
            return result.data or []
        except Exception as e:
            raise_api_error(e, "Failed to fetch join requests")
