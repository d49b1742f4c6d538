from fastapi import APIRouter, Depends, UploadFile, File, Form
from app.modules.media.schemas import MediaKind, MediaUploadResponse
from app.modules.media.service import MediaService
from app.core.dependencies import get_current_user, get_user_supabase
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/media", tags=["media"])


def get_media_service(supabase: Client = Depends(get_user_supabase)) -> MediaService:
    return MediaService(supabase)


@router.post("/{kind}", response_model=MediaUploadResponse, status_code=201)
async def upload_media(
    kind: MediaKind,
    file: UploadFile = File(...),
    previous_url: Optional[str] = Form(None),
    user_data: Dict = Depends(get_current_user),
    service: MediaService = Depends(get_media_service)
):
    """
    Upload an avatar, cover image, post attachment or group cover.
    Returns the public URL to store on the profile, post or group.
    Pass previous_url to remove the file it replaces.
    """
    return await service.upload(kind, user_data["id"], file, previous_url)
