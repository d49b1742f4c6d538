import logging
import mimetypes
import os
import time
from dataclasses import dataclass
from supabase import Client
from app.config import settings
from app.modules.media.s3_storage import S3Storage, s3_configured
from app.modules.media.schemas import MediaUploadResponse
from typing import Optional, Callable
from fastapi import HTTPException, UploadFile

logger = logging.getLogger(__name__)

DOCUMENT_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
}


@dataclass(frozen=True)
class MediaRule:
    bucket: str
    path: Callable[[str, int, str], str]
    max_bytes: int
    allow_video: bool = False
    allow_documents: bool = False


def media_rules():
    return {
        "avatar": MediaRule(
            settings.profile_media_bucket,
            lambda user_id, ts, ext: f"avatars/{user_id}/{ts}.{ext}",
            settings.avatar_max_bytes,
        ),
        "cover": MediaRule(
            settings.profile_media_bucket,
            lambda user_id, ts, ext: f"covers/{user_id}/{ts}.{ext}",
            settings.cover_max_bytes,
        ),
        "post": MediaRule(
            settings.post_media_bucket,
            lambda user_id, ts, ext: f"{user_id}/{ts}.{ext}",
            settings.post_media_max_bytes,
            allow_video=True,
            allow_documents=True,
        ),
        "group-cover": MediaRule(
            settings.group_media_bucket,
            lambda user_id, ts, ext: f"{user_id}/group-covers/{ts}.{ext}",
            settings.cover_max_bytes,
        ),
    }


def classify_media(content_type: str, rule: MediaRule) -> Optional[str]:
    """image/video/document, or None when the kind does not accept this type"""
    if content_type.startswith("image/"):
        return "image"
    if rule.allow_video and content_type.startswith("video/"):
        return "video"
    if rule.allow_documents and content_type in DOCUMENT_TYPES:
        return "document"
    return None


def file_extension(filename: Optional[str], content_type: str) -> str:
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    if ext:
        return ext
    guessed = mimetypes.guess_extension(content_type) or ".bin"
    return guessed.lstrip(".")


def storage_path_from_url(url: Optional[str], bucket: str) -> Optional[str]:
    """Object path of a public URL inside bucket, or None if the URL points elsewhere"""
    marker = f"{bucket}/"
    if not url or marker not in url:
        return None
    return url.split(marker, 1)[1].split("?", 1)[0] or None


class MediaService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.s3_storage = None
        try:
            if s3_configured():
                self.s3_storage = S3Storage()
        except Exception as e:
            logger.warning(f"S3 storage initialization failed ({str(e)}), will use Supabase Storage")
            self.s3_storage = None

    def _store(self, bucket: str, path: str, content: bytes, content_type: str) -> str:
        if self.s3_storage:
            key = f"{bucket}/{path}"
            logger.info(f"Uploading to S3: {key}")
            return self.s3_storage.upload_file(content, key, content_type)

        self.supabase.storage.from_(bucket).upload(
            path,
            content,
            file_options={"content-type": content_type}
        )
        return self.supabase.storage.from_(bucket).get_public_url(path)

    def _remove(self, bucket: str, path: str) -> None:
        if self.s3_storage:
            self.s3_storage.delete_file(f"{bucket}/{path}")
            return
        self.supabase.storage.from_(bucket).remove([path])

    async def upload(
        self,
        kind: str,
        user_id: str,
        file: UploadFile,
        previous_url: Optional[str] = None
    ) -> MediaUploadResponse:
        """Validate and store an uploaded file; previous_url is removed afterwards when it is ours"""
        rule = media_rules()[kind]
        content_type = (file.content_type or "").lower()
        media_type = classify_media(content_type, rule)
        if media_type is None:
            raise HTTPException(status_code=400, detail=f"Unsupported file type for {kind}: {content_type or 'unknown'}")

        content = await file.read(rule.max_bytes + 1)
        if not content:
            raise HTTPException(status_code=400, detail="File is empty")
        if len(content) > rule.max_bytes:
            raise HTTPException(
                status_code=400,
                detail=f"File is too large (max {rule.max_bytes // (1024 * 1024)}MB)"
            )

        path = rule.path(user_id, int(time.time() * 1000), file_extension(file.filename, content_type))
        try:
            url = self._store(rule.bucket, path, content, content_type)
        except Exception as e:
            logger.error(f"Upload of {kind} for {user_id} failed: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to upload file")
        logger.info(f"Stored {kind} for {user_id} at {rule.bucket}/{path}")

        old_path = storage_path_from_url(previous_url, rule.bucket)
        # Only files inside the caller's own folder are cleaned up
        if old_path and user_id in old_path.split("/") and old_path != path:
            try:
                self._remove(rule.bucket, old_path)
            except Exception as e:
                logger.warning(f"Failed to clean up old {kind} {old_path}: {e}")

        return MediaUploadResponse(url=url, path=path, bucket=rule.bucket, media_type=media_type)
