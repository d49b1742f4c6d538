from pydantic import BaseModel
from typing import Optional, Dict, Any, List


class EnvReport(BaseModel):
    supabaseUrl: str
    supabaseKey: str
    environment: str
    configuredKeys: List[str]


class ProbeResult(BaseModel):
    connected: bool
    error: Optional[str] = None


class AuthProbeResult(ProbeResult):
    user: Optional[Dict[str, Any]] = None


class SupabaseReport(BaseModel):
    success: bool
    auth: AuthProbeResult
    database: ProbeResult
    environment: Dict[str, str]
