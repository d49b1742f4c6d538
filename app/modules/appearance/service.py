import logging
from supabase import Client
from typing import Any, Dict, get_args
from app.core.errors import raise_api_error
from app.modules.appearance.schemas import AppearanceSettings, AppearanceUpdate, AppearanceSaveResponse

logger = logging.getLogger(__name__)


def known_settings(stored: Dict[str, Any]) -> Dict[str, Any]:
    """Stored values the settings model accepts; unknown ones (e.g. retired themes) fall back to defaults"""
    known = {}
    for field, value in stored.items():
        info = AppearanceSettings.model_fields.get(field)
        if info is None or value is None:
            continue
        if value not in get_args(info.annotation):
            logger.warning(f"Ignoring stored {field} value {value!r}")
            continue
        known[field] = value
    return known


class AppearanceService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_settings(self, user_id: str) -> AppearanceSettings:
        """Stored appearance settings, or the defaults when the user has none"""
        try:
            result = self.supabase.table("appearance_settings")\
                .select("theme, color_palette, glass_effect, language")\
                .eq("user_id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise_api_error(e, "Failed to fetch settings")

        if not result.data:
            return AppearanceSettings()
        return AppearanceSettings(**known_settings(result.data[0]))

    def save_settings(self, user_id: str, settings_data: AppearanceUpdate) -> AppearanceSaveResponse:
        """Upsert appearance settings through the database function"""
        try:
            result = self.supabase.rpc("upsert_user_appearance_settings", {
                "user_uuid": user_id,
                "new_theme": settings_data.theme,
                "new_color_palette": settings_data.color_palette,
                "new_glass_effect": settings_data.glass_effect,
                "new_language": settings_data.language
            }).execute()
        except Exception as e:
            raise_api_error(e, "Failed to save settings")

        rows = result.data or []
        if isinstance(rows, dict):
            rows = [rows]
        return AppearanceSaveResponse(success=True, settings=rows[0] if rows else None)
