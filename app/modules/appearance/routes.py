from fastapi import APIRouter, Depends
from app.modules.appearance.schemas import AppearanceSettings, AppearanceUpdate, AppearanceSaveResponse
from app.modules.appearance.service import AppearanceService
from app.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/appearance", tags=["appearance"])


def get_appearance_service(supabase: Client = Depends(get_user_supabase)) -> AppearanceService:
    return AppearanceService(supabase)


@router.get("", response_model=AppearanceSettings)
async def get_appearance(
    user_data: Dict = Depends(get_current_user),
    service: AppearanceService = Depends(get_appearance_service)
):
    """Get theme, color palette, glass effect and language"""
    return service.get_settings(user_data["id"])


@router.post("", response_model=AppearanceSaveResponse)
async def save_appearance(
    settings_data: AppearanceUpdate,
    user_data: Dict = Depends(get_current_user),
    service: AppearanceService = Depends(get_appearance_service)
):
    """Save appearance settings"""
    return service.save_settings(user_data["id"], settings_data)
