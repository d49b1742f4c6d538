from app.modules.profiles.schemas import ProfileUpdate
from app.modules.profiles.service import build_profile_update, sanitize_search_term
from tests.conftest import AUTH, USER_ID, OTHER_USER_ID


def test_get_own_profile(client, supabase):
    supabase.queue("profiles", [{"id": USER_ID, "username": "alice"}])
    response = client.get("/api/profile", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["profile"]["username"] == "alice"


def test_get_own_profile_missing(client, supabase):
    supabase.queue("profiles", [])
    response = client.get("/api/profile", headers=AUTH)
    assert response.status_code == 404


def test_update_profile_rejects_taken_username(client, supabase):
    supabase.queue("profiles", [{"id": OTHER_USER_ID}])
    response = client.put("/api/profile", headers=AUTH, json={"username": "bob"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Username is already taken"


def test_update_profile_writes_trimmed_fields(client, supabase):
    supabase.queue("profiles", [])
    supabase.queue("profiles", [{"id": USER_ID, "username": "alice", "profile_completed": True}])
    response = client.put("/api/profile", headers=AUTH, json={
        "username": " alice ",
        "full_name": "Alice Liddell ",
        "bio": "Down the rabbit hole",
    })
    assert response.status_code == 200

    update_query = supabase.queries_for("profiles")[-1]
    (payload,), _ = update_query.called("update")[0]
    assert payload["username"] == "alice"
    assert payload["full_name"] == "Alice Liddell"
    assert payload["profile_completed"] is True
    assert "avatar_url" not in payload


def test_update_profile_rejects_invalid_enum(client):
    response = client.put("/api/profile", headers=AUTH, json={"status": "sleeping"})
    assert response.status_code == 400


def test_build_profile_update_below_completion_threshold():
    update = build_profile_update(ProfileUpdate(username="alice", bio="hi"))
    assert "profile_completed" not in update


def test_friends_only_profile_hidden_from_strangers(client, supabase):
    supabase.queue("profiles", [{"id": OTHER_USER_ID, "profile_visibility": "friends"}])
    supabase.queue("friendships", [])
    response = client.get(f"/api/users/{OTHER_USER_ID}", headers=AUTH)
    assert response.status_code == 403


def test_friends_only_profile_visible_to_friends(client, supabase):
    supabase.queue("profiles", [{"id": OTHER_USER_ID, "profile_visibility": "friends"}])
    supabase.queue("friendships", [{"id": "f1"}])
    response = client.get(f"/api/users/{OTHER_USER_ID}", headers=AUTH)
    assert response.status_code == 200


def test_private_profile_visible_to_owner(client, supabase):
    supabase.queue("profiles", [{"id": USER_ID, "profile_visibility": "private"}])
    response = client.get(f"/api/users/{USER_ID}", headers=AUTH)
    assert response.status_code == 200


def test_status_update_only_for_self(client):
    response = client.put(f"/api/users/{OTHER_USER_ID}/status", headers=AUTH, json={"status": "busy"})
    assert response.status_code == 403


def test_status_update_refreshes_last_seen(client, supabase):
    supabase.queue("profiles", [{"id": USER_ID, "status": "busy", "last_seen": "2024-01-01T00:00:00+00:00"}])
    response = client.put(f"/api/users/{USER_ID}/status", headers=AUTH, json={"status": "busy"})
    assert response.status_code == 200

    (payload,), _ = supabase.queries_for("profiles")[0].called("update")[0]
    assert payload["status"] == "busy"
    assert "last_seen" in payload


def test_online_users_filters_public_recent(client, supabase):
    supabase.queue("profiles", [{"id": OTHER_USER_ID, "username": "bob", "status": "active"}])
    response = client.get("/api/users/online", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["users"][0]["username"] == "bob"

    query = supabase.queries_for("profiles")[0]
    assert query.called("in_")[0][0] == ("status", ["active", "busy"])
    assert query.called("eq")[0][0] == ("profile_visibility", "public")
    assert query.called("gte")


def test_search_requires_query(client):
    response = client.get("/api/users/search?q=%20", headers=AUTH)
    assert response.status_code == 400


def test_search_strips_filter_characters(client, supabase):
    supabase.queue("profiles", [])
    response = client.get("/api/users/search?q=a,(b)", headers=AUTH)
    assert response.status_code == 200
    (filter_text,), _ = supabase.queries_for("profiles")[0].called("or_")[0]
    assert filter_text == "username.ilike.%ab%,full_name.ilike.%ab%"
    assert sanitize_search_term(" x,y ") == "xy"
