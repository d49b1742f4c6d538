from app.config import settings
from tests.conftest import AUTH, USER_ID, api_error


def test_env_report_hides_key(client):
    body = client.get("/api/debug/env").json()
    assert body["supabaseUrl"] == settings.supabase_url
    assert body["supabaseKey"] == "SET"
    assert "supabase_key" in body["configuredKeys"]


def test_env_report_hidden_in_production(client, monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")
    response = client.get("/api/debug/env")
    assert response.status_code == 404


def test_supabase_probe_without_session(client):
    body = client.get("/api/debug/supabase").json()
    assert body["success"] is True
    assert body["auth"] == {"connected": False, "error": "Auth session missing", "user": None}
    assert body["database"]["connected"] is True
    assert body["environment"] == {"supabaseUrl": "Set", "supabaseKey": "Set"}


def test_supabase_probe_with_token(client):
    body = client.get("/api/debug/supabase", headers=AUTH).json()
    assert body["auth"]["connected"] is True
    assert body["auth"]["user"]["id"] == USER_ID


def test_supabase_probe_reports_database_error(client, supabase):
    supabase.queue("profiles", error=api_error("42P01", "relation does not exist"))
    body = client.get("/api/debug/supabase").json()
    assert body["database"] == {"connected": False, "error": "relation does not exist"}
