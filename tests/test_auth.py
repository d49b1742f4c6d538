from types import SimpleNamespace

from app.main import app
from app.core.dependencies import get_session_supabase
from app.modules.auth import service as auth_service
from app.modules.auth.service import clear_auth_cache
from tests.conftest import AUTH, TOKENS, USER_ID, FakeSupabase


def test_register_creates_user(client, supabase):
    supabase.auth.sign_up_response = SimpleNamespace(
        user=SimpleNamespace(id="new-user", email="new@example.com")
    )
    response = client.post("/api/auth/register", json={
        "email": "new@example.com",
        "password": "secret123",
        "username": "newbie",
    })
    assert response.status_code == 201
    assert response.json()["user_id"] == "new-user"


def test_register_rejects_short_password(client):
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "123"})
    assert response.status_code == 400


def test_register_existing_user(client, supabase):
    supabase.auth.error = Exception("User already registered")
    response = client.post("/api/auth/register", json={"email": "a@example.com", "password": "secret123"})
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


def test_login_returns_token(client, supabase):
    supabase.auth.sign_in_response = SimpleNamespace(
        user=SimpleNamespace(id=USER_ID, email="a@example.com"),
        session=SimpleNamespace(access_token="jwt"),
    )
    response = client.post("/api/auth/login", json={"email": "a@example.com", "password": "secret123"})
    assert response.status_code == 200
    assert response.json()["access_token"] == "jwt"


def test_login_invalid_credentials(client, supabase):
    supabase.auth.error = Exception("Invalid login credentials")
    response = client.post("/api/auth/login", json={"email": "a@example.com", "password": "wrong"})
    assert response.status_code == 401


def test_me_requires_token(client):
    assert client.get("/api/auth/me").status_code == 401
    bad = client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Unauthorized"


def test_me_returns_caller(client):
    response = client.get("/api/auth/me", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["id"] == USER_ID


def test_logout_revokes_the_callers_own_session(client, supabase):
    response = client.post("/api/auth/logout", headers=AUTH)
    assert response.status_code == 200
    assert supabase.auth.revoked == ["valid-token"]


def test_logout_after_another_user_signed_in(client, supabase):
    def session_for(credentials):
        token = "valid-token" if credentials["email"] == "a@example.com" else "other-token"
        return SimpleNamespace(
            user=SimpleNamespace(id=TOKENS[token], email=credentials["email"]),
            session=SimpleNamespace(access_token=token),
        )

    supabase.auth.sign_in_response = session_for
    token_a = client.post("/api/auth/login", json={"email": "a@example.com", "password": "secret123"}).json()
    client.post("/api/auth/login", json={"email": "b@example.com", "password": "secret123"})

    client.post("/api/auth/logout", headers={"Authorization": f"Bearer {token_a['access_token']}"})
    assert supabase.auth.revoked == ["valid-token"]


def test_login_leaves_the_shared_client_anonymous(client, supabase):
    login_client = FakeSupabase()
    login_client.auth.sign_in_response = SimpleNamespace(
        user=SimpleNamespace(id=USER_ID, email="a@example.com"),
        session=SimpleNamespace(access_token="valid-token"),
    )
    app.dependency_overrides[get_session_supabase] = lambda: login_client

    assert client.post("/api/auth/login", json={"email": "a@example.com", "password": "secret123"}).status_code == 200
    assert login_client.auth.session.access_token == "valid-token"
    assert supabase.auth.session is None


def test_login_unconfirmed_email(client, supabase):
    supabase.auth.error = Exception("Email not confirmed")
    response = client.post("/api/auth/login", json={"email": "a@example.com", "password": "secret123"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Email not confirmed"


def test_token_lookups_are_cached(client, supabase, monkeypatch):
    calls = []
    original = supabase.auth.get_user

    def counting_get_user(jwt=None):
        calls.append(jwt)
        return original(jwt=jwt)

    monkeypatch.setattr(supabase.auth, "get_user", counting_get_user)
    client.get("/api/auth/me", headers=AUTH)
    client.get("/api/auth/me", headers=AUTH)
    assert calls == ["valid-token"]


def test_full_token_cache_still_accepts_new_tokens(monkeypatch):
    monkeypatch.setattr(auth_service, "_AUTH_CACHE_MAX_SIZE", 2)
    clear_auth_cache()
    auth_service._remember_user("a", {"id": "a"})
    auth_service._remember_user("b", {"id": "b"})
    auth_service._remember_user("c", {"id": "c"})
    assert auth_service._cached_user("c") == {"id": "c"}
    assert auth_service._cached_user("a") is None
    clear_auth_cache()


def test_expired_tokens_are_purged_when_the_cache_is_full(monkeypatch):
    now = [1000.0]
    monkeypatch.setattr(auth_service, "_AUTH_CACHE_MAX_SIZE", 2)
    monkeypatch.setattr(auth_service.time, "monotonic", lambda: now[0])
    clear_auth_cache()
    auth_service._remember_user("a", {"id": "a"})
    now[0] += 30
    auth_service._remember_user("b", {"id": "b"})
    now[0] += 31
    auth_service._remember_user("c", {"id": "c"})
    assert set(auth_service._AUTH_USER_CACHE) == {"b", "c"}
    clear_auth_cache()
