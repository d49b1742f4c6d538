from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""

    # AWS S3 (optional media backend; falls back to Supabase Storage)
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_region: str = "us-east-1"
    s3_bucket_name: Optional[str] = None
    s3_public_base_url: Optional[str] = None  # e.g. CloudFront domain; defaults to the bucket URL

    # Media
    profile_media_bucket: str = "profile-media"
    post_media_bucket: str = "post-media"
    group_media_bucket: str = "group-media"
    avatar_max_bytes: int = 2 * 1024 * 1024
    cover_max_bytes: int = 5 * 1024 * 1024
    post_media_max_bytes: int = 10 * 1024 * 1024

    # Presence
    online_window_minutes: int = 5
    online_users_limit: int = 50

    # App
    app_name: str = "socialhub-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    api_prefix: str = "/api"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    write_rate_limit: str = "30/minute"  # message and post creation
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
