"""
Mapping of remote Supabase failures onto HTTP errors
"""

from fastapi import HTTPException, status
from supabase import PostgrestAPIError as APIError
from typing import NoReturn, Optional
import logging

logger = logging.getLogger(__name__)

# Postgres / PostgREST error codes -> HTTP status
_FORBIDDEN_CODES = {"42501", "PGRST301", "PGRST302"}
_NOT_FOUND_CODES = {"P0002", "PGRST116"}
_BAD_REQUEST_CODES = {"23505", "23503", "23514", "22P02", "P0001"}


def status_for_api_error(error: APIError) -> int:
    code = getattr(error, "code", None)
    if code in _FORBIDDEN_CODES:
        return status.HTTP_403_FORBIDDEN
    if code in _NOT_FOUND_CODES:
        return status.HTTP_404_NOT_FOUND
    if code in _BAD_REQUEST_CODES:
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def raise_api_error(error: Exception, fallback: str, use_remote_message: bool = False) -> NoReturn:
    """Log a remote failure and raise it as an HTTPException.

    HTTPExceptions pass through untouched. For APIError the status comes from the
    Postgres code; the remote message is surfaced for RPC calls (use_remote_message)
    and for client errors, otherwise the fallback text is used.
    """
    if isinstance(error, HTTPException):
        raise error
    logger.error(f"{fallback}: {error}")
    if isinstance(error, APIError):
        status_code = status_for_api_error(error)
        remote_message: Optional[str] = getattr(error, "message", None)
        if remote_message and (use_remote_message or status_code != 500):
            raise HTTPException(status_code=status_code, detail=remote_message)
        raise HTTPException(status_code=status_code, detail=fallback)
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=fallback)
