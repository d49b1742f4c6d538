from fastapi import APIRouter, Depends, HTTPException, Query, status
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileEnvelope, StatusUpdate, UserListResponse
)
from app.modules.profiles.service import ProfileService
from app.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(tags=["profiles"])


def get_profile_service(supabase: Client = Depends(get_user_supabase)) -> ProfileService:
    return ProfileService(supabase)


@router.get("/profile", response_model=ProfileEnvelope)
async def get_my_profile(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile"""
    return {"profile": service.get_profile(user_data["id"])}


@router.put("/profile", response_model=ProfileEnvelope)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update the caller's profile (only the fields sent are written)"""
    return {"profile": service.update_profile(user_data["id"], profile_data)}


@router.get("/users/online", response_model=UserListResponse)
async def list_online_users(
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Public users that are active or busy and were seen in the last few minutes"""
    return {"users": service.list_online_users()}


@router.get("/users/search", response_model=UserListResponse)
async def search_users(
    q: str = "",
    limit: int = Query(10, ge=1, le=50),
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Search users by username or full name"""
    return {"users": service.search_users(user_data["id"], q, limit)}


@router.get("/users/{user_id}", response_model=ProfileEnvelope)
async def get_user_profile(
    user_id: str,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Get another user's profile if its visibility allows"""
    return {"profile": service.get_visible_profile(user_data["id"], user_id)}


@router.put("/users/{user_id}/status", response_model=ProfileEnvelope)
async def update_user_status(
    user_id: str,
    status_data: StatusUpdate,
    user_data: Dict = Depends(get_current_user),
    service: ProfileService = Depends(get_profile_service)
):
    """Update presence status (only for yourself)"""
    if user_data["id"] != user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
    return {"profile": service.update_status(user_id, status_data)}
