from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal
from datetime import datetime

ProfileStatus = Literal["active", "busy", "offline", "inactive"]
Availability = Literal["available", "busy", "unavailable"]
ExperienceLevel = Literal["junior", "mid", "senior", "lead", "architect"]
ProfileVisibility = Literal["public", "friends", "private"]
ThemePreference = Literal["light", "dark", "auto"]


class ProfileUpdate(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=20)
    full_name: Optional[str] = Field(default=None, max_length=100)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None
    bio: Optional[str] = Field(default=None, max_length=1000)
    avatar_url: Optional[str] = None
    cover_image_url: Optional[str] = None
    status: Optional[ProfileStatus] = None
    location: Optional[str] = None
    website: Optional[str] = None
    github_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    twitter_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    role: Optional[str] = None
    company: Optional[str] = None
    job_title: Optional[str] = None
    skills: Optional[List[str]] = None
    programming_languages: Optional[List[str]] = None
    frameworks: Optional[List[str]] = None
    tools: Optional[List[str]] = None
    experience_level: Optional[ExperienceLevel] = None
    years_of_experience: Optional[int] = Field(default=None, ge=0)
    education: Optional[str] = None
    certifications: Optional[List[Any]] = None
    projects: Optional[List[Any]] = None
    achievements: Optional[List[Any]] = None
    interests: Optional[List[str]] = None
    timezone: Optional[str] = None
    availability: Optional[Availability] = None
    looking_for_work: Optional[bool] = None
    remote_work: Optional[bool] = None
    profile_visibility: Optional[ProfileVisibility] = None
    theme_preference: Optional[ThemePreference] = None
    notification_preferences: Optional[Dict[str, Any]] = None
    social_links: Optional[Dict[str, Any]] = None
    contact_info: Optional[Dict[str, Any]] = None
    professional_info: Optional[Dict[str, Any]] = None


class ProfileResponse(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None
    bio: Optional[str] = None
    status: Optional[str] = None
    profile_visibility: Optional[str] = None
    profile_completed: Optional[bool] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        extra = "allow"


class ProfileEnvelope(BaseModel):
    profile: ProfileResponse


class StatusUpdate(BaseModel):
    status: Optional[ProfileStatus] = None
    availability: Optional[Availability] = None


class UserSummary(BaseModel):
    id: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

    class Config:
        extra = "allow"


class UserListResponse(BaseModel):
    users: List[UserSummary]
