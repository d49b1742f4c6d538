import hashlib
import time
import logging
from supabase import Client
from app.modules.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, RegisterResponse
from fastapi import HTTPException
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)

# token hash -> (user dict, expiry); spares Supabase Auth when a page fires many requests at once
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

# (substring of the Supabase Auth error, status, detail), first match wins
REGISTER_ERRORS = (
    ("already registered", 400, "User already exists"),
    ("already exists", 400, "User already exists"),
    ("password", 400, "Password does not meet the requirements"),
)
LOGIN_ERRORS = (
    ("not confirmed", 401, "Email not confirmed"),
    ("invalid", 401, "Invalid email or password"),
    ("credentials", 401, "Invalid email or password"),
)


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def _token_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def _cached_user(key: str) -> Optional[Dict[str, Any]]:
    entry = _AUTH_USER_CACHE.get(key)
    if entry is None:
        return None
    user_data, expiry = entry
    if time.monotonic() >= expiry:
        del _AUTH_USER_CACHE[key]
        return None
    return user_data


def _remember_user(key: str, user_data: Dict[str, Any]) -> None:
    now = time.monotonic()
    if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
        for stale in [k for k, (_, expiry) in _AUTH_USER_CACHE.items() if expiry <= now]:
            del _AUTH_USER_CACHE[stale]
    if len(_AUTH_USER_CACHE) >= _AUTH_CACHE_MAX_SIZE:
        # Entries share one TTL, so insertion order is expiry order
        del _AUTH_USER_CACHE[next(iter(_AUTH_USER_CACHE))]
    _AUTH_USER_CACHE[key] = (user_data, now + _AUTH_CACHE_TTL_SEC)


def _auth_failure(error: Exception, known: tuple, fallback: str) -> HTTPException:
    message = str(error).lower()
    for fragment, status_code, detail in known:
        if fragment in message:
            return HTTPException(status_code=status_code, detail=detail)
    logger.error(f"{fallback}: {error}")
    return HTTPException(status_code=500, detail=fallback)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Sign up through Supabase Auth; full_name and username travel as user metadata"""
        metadata = {
            key: value.strip()
            for key, value in (("full_name", register_data.full_name), ("username", register_data.username))
            if value and value.strip()
        }
        try:
            auth_response = self.supabase.auth.sign_up({
                "email": register_data.email,
                "password": register_data.password,
                "options": {"data": metadata}
            })
        except Exception as e:
            raise _auth_failure(e, REGISTER_ERRORS, "Registration failed")

        if not auth_response or not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to register user")

        logger.info(f"Registered user {auth_response.user.id}")
        return RegisterResponse(
            user_id=auth_response.user.id,
            email=auth_response.user.email or register_data.email,
            message="User registered successfully. Check your email to verify your account."
        )

    def login(self, login_data: LoginRequest) -> TokenResponse:
        try:
            auth_response = self.supabase.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            raise _auth_failure(e, LOGIN_ERRORS, "Login failed")

        if not auth_response or not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid email or password")

        return TokenResponse(
            access_token=auth_response.session.access_token,
            user_id=auth_response.user.id,
            email=auth_response.user.email or login_data.email
        )

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Resolve a bearer token to the auth user; any failure is a 401"""
        key = _token_key(token)
        user_data = _cached_user(key)
        if user_data is not None:
            return user_data

        try:
            user_response = self.supabase.auth.get_user(jwt=token)
        except Exception as e:
            logger.warning(f"Token validation failed: {e}")
            raise HTTPException(status_code=401, detail="Unauthorized")

        user = user_response.user if user_response else None
        if not user:
            raise HTTPException(status_code=401, detail="Unauthorized")

        user_data = {
            "id": user.id,
            "email": user.email,
            "user_metadata": user.user_metadata or {},
            "app_metadata": user.app_metadata or {},
            "created_at": user.created_at,
            "updated_at": user.updated_at
        }
        _remember_user(key, user_data)
        return user_data

    def logout(self, token: str) -> bool:
        """Revoke the refresh tokens of the caller's session; the JWT itself stays valid until it expires"""
        _AUTH_USER_CACHE.pop(_token_key(token), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.warning(f"Sign out failed: {e}")
            return False
