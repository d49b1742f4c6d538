import logging
from supabase import Client
from app.config import Settings
from app.modules.diagnostics.schemas import EnvReport, ProbeResult, AuthProbeResult, SupabaseReport
from typing import Optional

logger = logging.getLogger(__name__)

REPORTED_KEYS = ("supabase_url", "supabase_key", "s3_bucket_name", "aws_access_key_id")


def _set_or_missing(value: Optional[str]) -> str:
    return "Set" if value else "Missing"


class DiagnosticsService:
    def __init__(self, supabase: Client, settings: Settings):
        self.supabase = supabase
        self.settings = settings

    def env_report(self) -> EnvReport:
        """Which connection settings are present; secrets are never echoed"""
        return EnvReport(
            supabaseUrl=self.settings.supabase_url or "NOT_SET",
            supabaseKey="SET" if self.settings.supabase_key else "NOT_SET",
            environment=self.settings.environment,
            configuredKeys=[key for key in REPORTED_KEYS if getattr(self.settings, key, None)],
        )

    def probe_auth(self, token: Optional[str]) -> AuthProbeResult:
        if not token:
            return AuthProbeResult(connected=False, error="Auth session missing")
        try:
            response = self.supabase.auth.get_user(jwt=token)
            user = response.user if response else None
            if not user:
                return AuthProbeResult(connected=False, error="Invalid token")
            return AuthProbeResult(connected=True, user={"id": user.id, "email": user.email})
        except Exception as e:
            logger.warning(f"Auth probe failed: {e}")
            return AuthProbeResult(connected=False, error=str(e))

    def probe_database(self) -> ProbeResult:
        try:
            self.supabase.table("profiles").select("id").limit(1).execute()
            return ProbeResult(connected=True)
        except Exception as e:
            logger.warning(f"Database probe failed: {e}")
            return ProbeResult(connected=False, error=getattr(e, "message", None) or str(e))

    def supabase_report(self, token: Optional[str]) -> SupabaseReport:
        return SupabaseReport(
            success=True,
            auth=self.probe_auth(token),
            database=self.probe_database(),
            environment={
                "supabaseUrl": _set_or_missing(self.settings.supabase_url),
                "supabaseKey": _set_or_missing(self.settings.supabase_key),
            },
        )
