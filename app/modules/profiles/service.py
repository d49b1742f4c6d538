import logging
from datetime import datetime, timedelta, timezone
from supabase import Client
from app.config import settings
from app.core.dependencies import are_friends
from app.core.errors import raise_api_error
from app.modules.profiles.schemas import ProfileUpdate, ProfileResponse, StatusUpdate, UserSummary
from typing import List, Dict, Any
from fastapi import HTTPException

logger = logging.getLogger(__name__)

TRIMMED_FIELDS = (
    "username", "full_name", "first_name", "last_name", "display_name", "bio",
    "location", "website", "github_url", "linkedin_url", "twitter_url",
    "portfolio_url", "role", "company", "job_title", "education",
)
# A profile counts as completed once at least this many of these are filled in
COMPLETION_FIELDS = ("username", "full_name", "bio", "role")
COMPLETION_THRESHOLD = 3

ONLINE_COLUMNS = (
    "id, username, display_name, full_name, avatar_url, status, last_seen, role, "
    "company, job_title, location, experience_level, skills, programming_languages, frameworks"
)


def build_profile_update(profile_data: ProfileUpdate) -> Dict[str, Any]:
    """Only the fields the caller sent, with text fields trimmed"""
    update_data = profile_data.model_dump(exclude_unset=True)
    for field in TRIMMED_FIELDS:
        if isinstance(update_data.get(field), str):
            update_data[field] = update_data[field].strip()

    filled = [f for f in COMPLETION_FIELDS if isinstance(update_data.get(f), str) and update_data[f]]
    if len(filled) >= COMPLETION_THRESHOLD:
        update_data["profile_completed"] = True
    return update_data


def sanitize_search_term(query: str) -> str:
    # Characters that would break a PostgREST or=(...) filter
    return "".join(ch for ch in query.strip() if ch not in ",()")


class ProfileService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_profile(self, user_id: str) -> ProfileResponse:
        """Get the profile row for a user"""
        try:
            result = self.supabase.table("profiles")\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            return ProfileResponse(**result.data[0])
        except Exception as e:
            raise_api_error(e, "Failed to fetch profile")

    def get_visible_profile(self, viewer_id: str, user_id: str) -> ProfileResponse:
        """Get another user's profile honouring its profile_visibility"""
        profile = self.get_profile(user_id)
        if viewer_id == user_id:
            return profile
        visibility = profile.profile_visibility or "public"
        if visibility == "public":
            return profile
        if visibility == "friends" and are_friends(viewer_id, user_id, self.supabase):
            return profile
        raise HTTPException(status_code=403, detail="This profile is not visible to you")

    def is_username_taken(self, username: str, user_id: str) -> bool:
        try:
            result = self.supabase.table("profiles")\
                .select("id")\
                .eq("username", username)\
                .neq("id", user_id)\
                .limit(1)\
                .execute()
            return bool(result.data)
        except Exception as e:
            raise_api_error(e, "Failed to check username availability")

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> ProfileResponse:
        """Update the caller's profile"""
        update_data = build_profile_update(profile_data)
        if update_data.get("username") and self.is_username_taken(update_data["username"], user_id):
            raise HTTPException(status_code=400, detail="Username is already taken")
        if not update_data:
            return self.get_profile(user_id)

        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            logger.info(f"Updated profile {user_id} fields={sorted(update_data)}")
            return ProfileResponse(**result.data[0])
        except Exception as e:
            raise_api_error(e, "Failed to update profile")

    def update_status(self, user_id: str, status_data: StatusUpdate) -> ProfileResponse:
        """Update presence; last_seen is always refreshed"""
        update_data = status_data.model_dump(exclude_unset=True, exclude_none=True)
        update_data["last_seen"] = datetime.now(timezone.utc).isoformat()
        try:
            result = self.supabase.table("profiles")\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()

            if not result.data:
                raise HTTPException(status_code=404, detail="Profile not found")

            row = result.data[0]
            return ProfileResponse(
                id=row["id"],
                username=row.get("username"),
                status=row.get("status"),
                availability=row.get("availability"),
                last_seen=row.get("last_seen"),
            )
        except Exception as e:
            raise_api_error(e, "Failed to update status")

    def list_online_users(self) -> List[UserSummary]:
        """Public profiles that are active or busy and were seen recently"""
        cutoff = datetime.now(timezone.utc) - timedelta(minutes=settings.online_window_minutes)
        try:
            result = self.supabase.table("profiles")\
                .select(ONLINE_COLUMNS)\
                .in_("status", ["active", "busy"])\
                .gte("last_seen", cutoff.isoformat())\
                .eq("profile_visibility", "public")\
                .order("last_seen", desc=True)\
                .limit(settings.online_users_limit)\
                .execute()
            return [UserSummary(**user) for user in result.data or []]
        except Exception as e:
            raise_api_error(e, "Failed to fetch online users")

    def search_users(self, user_id: str, query: str, limit: int = 10) -> List[UserSummary]:
        """Case-insensitive search on username or full name, excluding the caller"""
        term = sanitize_search_term(query)
        if not term:
            raise HTTPException(status_code=400, detail="Search query is required")
        try:
            result = self.supabase.table("profiles")\
                .select("id, username, full_name, avatar_url")\
                .or_(f"username.ilike.%{term}%,full_name.ilike.%{term}%")\
                .neq("id", user_id)\
                .limit(limit)\
                .execute()
            return [UserSummary(**user) for user in result.data or []]
        except Exception as e:
            raise_api_error(e, "Failed to search users")
