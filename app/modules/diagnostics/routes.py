from fastapi import APIRouter, Depends, HTTPException, Security
from fastapi.security import HTTPAuthorizationCredentials
from app.config import settings
from app.core.dependencies import security
from app.database.supabase_client import get_supabase
from app.modules.diagnostics.schemas import EnvReport, SupabaseReport
from app.modules.diagnostics.service import DiagnosticsService
from supabase import Client
from typing import Optional

router = APIRouter(prefix="/debug", tags=["diagnostics"])


def get_diagnostics_service(supabase: Client = Depends(get_supabase)) -> DiagnosticsService:
    return DiagnosticsService(supabase, settings)


@router.get("/env", response_model=EnvReport)
async def debug_env(service: DiagnosticsService = Depends(get_diagnostics_service)):
    """Report which Supabase settings are present (not available in production)"""
    if settings.is_production:
        raise HTTPException(status_code=404, detail="Not Found")
    return service.env_report()


@router.get("/supabase", response_model=SupabaseReport)
async def debug_supabase(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security),
    service: DiagnosticsService = Depends(get_diagnostics_service)
):
    """Probe Supabase auth (using the bearer token, if any) and database connectivity"""
    token = credentials.credentials if credentials else None
    return service.supabase_report(token)
