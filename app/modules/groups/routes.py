from fastapi import APIRouter, Depends
from app.modules.groups.schemas import (
    GroupCreate, GroupUpdate, GroupEnvelope, GroupMessageEnvelope, GroupListResponse,
    GroupListKind, GroupMemberAdd, MemberPermissionsUpdate, JoinRequestCreate,
    JoinRequestAction, MessageResponse
)
from app.modules.groups.service import GroupService
from app.core.dependencies import (
    get_current_user, get_user_supabase, check_group_member, check_join_request_reviewer
)
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/groups", tags=["groups"])
join_requests_router = APIRouter(prefix="/join-requests", tags=["groups"])


def get_group_service(supabase: Client = Depends(get_user_supabase)) -> GroupService:
    return GroupService(supabase)


@router.get("", response_model=GroupListResponse)
async def list_groups(
    type: GroupListKind = "user",
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """List the caller's groups (type=user), public groups, or all groups"""
    return {"groups": service.list_groups(type)}


@router.post("", response_model=GroupMessageEnvelope, status_code=201)
async def create_group(
    group_data: GroupCreate,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Create a group; the caller becomes its creator"""
    group = service.create_group(group_data, user_data["id"])
    return {"message": "Group created successfully", "group": group}


@router.get("/{group_id}", response_model=GroupEnvelope)
async def get_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Get group details (private groups only for members)"""
    return {"group": service.get_group(group_id, user_data["id"])}


@router.put("/{group_id}", response_model=GroupMessageEnvelope)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Update group information"""
    group = service.update_group(group_id, group_data, user_data["id"])
    return {"message": "Group updated successfully", "group": group}


@router.delete("/{group_id}", response_model=MessageResponse)
async def delete_group(
    group_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Delete a group (creator only)"""
    service.delete_group(group_id, user_data["id"])
    return {"message": "Group deleted successfully"}


@router.get("/{group_id}/members")
async def list_group_members(
    group_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_user_supabase)
):
    """List active members (members only)"""
    check_group_member(group_id, user_data["id"], supabase)
    return {"members": service.list_members(group_id)}


@router.post("/{group_id}/members", response_model=MessageResponse)
async def add_group_member(
    group_id: str,
    member_data: GroupMemberAdd,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Add a friend to the group"""
    service.add_member(group_id, member_data.friend_id, user_data["id"])
    return {"message": "Friend added to group successfully"}


@router.put("/{group_id}/members/{member_id}", response_model=MessageResponse)
async def update_member_permissions(
    group_id: str,
    member_id: str,
    permissions: MemberPermissionsUpdate,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Update a member's permission flags"""
    service.update_member_permissions(group_id, member_id, permissions, user_data["id"])
    return {"message": "Member permissions updated successfully"}


@router.delete("/{group_id}/members/{member_id}", response_model=MessageResponse)
async def remove_group_member(
    group_id: str,
    member_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Remove a member from the group"""
    service.remove_member(group_id, member_id, user_data["id"])
    return {"message": "Member removed from group successfully"}


@router.get("/{group_id}/join-requests")
async def list_join_requests(
    group_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service),
    supabase: Client = Depends(get_user_supabase)
):
    """Pending join requests (creators, admins and members who can add members)"""
    check_join_request_reviewer(group_id, user_data["id"], supabase)
    return {"requests": service.list_join_requests(group_id)}


@router.post("/{group_id}/join-requests")
async def request_to_join_group(
    group_id: str,
    request_data: JoinRequestCreate,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Ask to join a group"""
    request_id = service.request_to_join(group_id, user_data["id"], request_data.message)
    return {"message": "Join request submitted successfully", "request_id": request_id}


@router.put("/{group_id}/join-requests/{request_id}", response_model=MessageResponse)
async def review_join_request(
    group_id: str,
    request_id: str,
    action_data: JoinRequestAction,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Approve or reject a join request"""
    service.review_join_request(request_id, action_data.action, user_data["id"])
    outcome = "approved" if action_data.action == "approve" else "rejected"
    return {"message": f"Join request {outcome} successfully"}


@router.delete("/{group_id}/join-requests/{request_id}", response_model=MessageResponse)
async def cancel_join_request(
    group_id: str,
    request_id: str,
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """Cancel your own pending join request"""
    service.cancel_join_request(group_id, request_id, user_data["id"])
    return {"message": "Join request cancelled successfully"}


@join_requests_router.get("")
async def list_my_join_requests(
    user_data: Dict = Depends(get_current_user),
    service: GroupService = Depends(get_group_service)
):
    """The caller's own join requests"""
    return {"requests": service.list_own_join_requests(user_data["id"])}
