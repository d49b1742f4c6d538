from pydantic import BaseModel
from typing import Literal

MediaKind = Literal["avatar", "cover", "post", "group-cover"]
MediaType = Literal["image", "video", "document"]


class MediaUploadResponse(BaseModel):
    url: str
    path: str
    bucket: str
    media_type: MediaType
