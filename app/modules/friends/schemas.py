from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime

FriendListKind = Literal["friends", "pending", "sent", "count", "for_groups"]
FriendStatusFilter = Literal["accepted", "pending", "blocked", "all"]


class FriendRequestCreate(BaseModel):
    friend_id: str = Field(min_length=1)


class FriendSummary(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None


class FriendListResponse(BaseModel):
    friends: List[FriendSummary]


class FriendRequestSummary(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    friendship_id: str
    created_at: Optional[datetime] = None


class FriendRequestsResponse(BaseModel):
    requests: List[FriendRequestSummary]


class FriendRequestAction(BaseModel):
    action: Literal["accept", "reject"]


class RequesterPayload(BaseModel):
    requester_id: str = Field(min_length=1)

