from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Dict, Any, Literal

GroupListKind = Literal["user", "public", "all"]


class GroupCreate(BaseModel):
    name: str = Field(max_length=100)
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_private: bool = False
    max_members: int = Field(default=100, ge=1)
    allow_member_invites: bool = True
    require_approval: bool = True
    initial_members: List[str] = []
    initial_admins: List[str] = []

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Group name is required")
        return v


class GroupUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    is_private: Optional[bool] = None
    max_members: Optional[int] = Field(default=None, ge=1)
    allow_member_invites: Optional[bool] = None
    require_approval: Optional[bool] = None


class GroupResponse(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    is_private: Optional[bool] = None
    user_membership: Optional[Dict[str, Any]] = None

    class Config:
        from_attributes = True
        extra = "allow"


class GroupEnvelope(BaseModel):
    group: GroupResponse


class GroupMessageEnvelope(BaseModel):
    message: str
    group: GroupResponse


class GroupListResponse(BaseModel):
    groups: List[Dict[str, Any]]


class GroupMemberAdd(BaseModel):
    friend_id: str = Field(min_length=1)


class MemberPermissionsUpdate(BaseModel):
    can_add_members: Optional[bool] = None
    can_remove_members: Optional[bool] = None
    can_edit_group_info: Optional[bool] = None
    can_manage_permissions: Optional[bool] = None
    can_delete_group: Optional[bool] = None
    can_pin_messages: Optional[bool] = None
    can_delete_messages: Optional[bool] = None


class JoinRequestCreate(BaseModel):
    message: Optional[str] = None


class JoinRequestAction(BaseModel):
    action: Literal["approve", "reject"]


class MessageResponse(BaseModel):
    message: str
