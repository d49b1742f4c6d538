from fastapi import APIRouter, Depends
from app.modules.friends.schemas import (
    FriendRequestCreate, FriendSummary, FriendListResponse, FriendRequestsResponse,
    FriendRequestAction, RequesterPayload, FriendListKind, FriendStatusFilter
)
from app.modules.friends.service import FriendService
from app.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/friends", tags=["friends"])


def get_friend_service(supabase: Client = Depends(get_user_supabase)) -> FriendService:
    return FriendService(supabase)


@router.get("", response_model=FriendListResponse)
async def list_friends(
    status: FriendStatusFilter = "accepted",
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """List friendships by status (accepted by default, 'all' for every status)"""
    return {"friends": service.list_friends(user_data["id"], status)}


@router.post("", response_model=FriendSummary, status_code=201)
async def send_friend_request(
    request_data: FriendRequestCreate,
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Send a friend request"""
    return service.send_request(user_data["id"], request_data.friend_id)


@router.get("/list")
async def list_friends_by_type(
    type: FriendListKind = "friends",
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Friends, pending/sent requests, counts, or friends available for group creation"""
    return service.list_by_type(user_data["id"], type)


@router.get("/requests", response_model=FriendRequestsResponse)
async def list_friend_requests(
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Pending friend requests received by the caller"""
    return {"requests": service.list_received_requests(user_data["id"])}


@router.put("/requests/{friendship_id}")
async def respond_to_friend_request(
    friendship_id: str,
    action_data: FriendRequestAction,
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Accept or reject a received friend request"""
    outcome = service.respond_to_request(user_data["id"], friendship_id, action_data.action)
    return {"success": True, "action": outcome}


@router.post("/accept")
async def accept_friend_request(
    payload: RequesterPayload,
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Accept a friend request from requester_id"""
    return service.accept_request(user_data["id"], payload.requester_id)


@router.post("/decline")
async def decline_friend_request(
    payload: RequesterPayload,
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Decline a friend request from requester_id"""
    return service.decline_request(user_data["id"], payload.requester_id)


@router.delete("/{friend_id}")
async def remove_friend(
    friend_id: str,
    user_data: Dict = Depends(get_current_user),
    service: FriendService = Depends(get_friend_service)
):
    """Remove a friend (either direction)"""
    service.remove_friend(user_data["id"], friend_id)
    return {"success": True}
