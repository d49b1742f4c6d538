from tests.conftest import AUTH, USER_ID


def test_members_require_membership(client, supabase):
    supabase.queue("group_chat_members", [])
    response = client.get("/api/group-chats/gc1/members", headers=AUTH)
    assert response.status_code == 403


def test_members_flattened(client, supabase):
    supabase.queue("group_chat_members", [{"role": "member"}])
    supabase.queue("group_chat_members", [
        {"user_id": USER_ID, "role": "admin", "user": {"id": USER_ID, "username": "alice"}},
    ])
    response = client.get("/api/group-chats/gc1/members", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["members"][0] == {
        "id": USER_ID, "username": "alice", "full_name": None,
        "avatar_url": None, "role": "admin", "joined_at": None,
    }


def test_adding_members_needs_admin(client, supabase):
    supabase.queue("group_chat_members", [{"role": "member"}])
    response = client.post("/api/group-chats/gc1/members", headers=AUTH, json={"user_ids": ["u3"]})
    assert response.status_code == 403
    assert response.json()["detail"] == "Admin access required"


def test_adding_members_needs_ids(client):
    response = client.post("/api/group-chats/gc1/members", headers=AUTH, json={"user_ids": []})
    assert response.status_code == 400


def test_unknown_users_are_reported(client, supabase):
    supabase.queue("group_chat_members", [{"role": "admin"}])
    supabase.queue("profiles", [{"id": "u3"}])
    response = client.post("/api/group-chats/gc1/members", headers=AUTH, json={"user_ids": ["u3", "u4"]})
    assert response.status_code == 400
    assert response.json()["detail"] == {"message": "Some users not found", "invalid_user_ids": ["u4"]}


def test_all_already_members(client, supabase):
    supabase.queue("group_chat_members", [{"role": "admin"}])
    supabase.queue("profiles", [{"id": "u3"}])
    supabase.queue("group_chat_members", [{"user_id": "u3"}])
    response = client.post("/api/group-chats/gc1/members", headers=AUTH, json={"user_ids": ["u3"]})
    assert response.status_code == 400
    assert response.json()["detail"]["already_members"] == ["u3"]


def test_add_new_members_only(client, supabase):
    supabase.queue("group_chat_members", [{"role": "admin"}])
    supabase.queue("profiles", [{"id": "u3"}, {"id": "u4"}])
    supabase.queue("group_chat_members", [{"user_id": "u3"}])
    response = client.post(
        "/api/group-chats/gc1/members", headers=AUTH, json={"user_ids": ["u3", "u4", "u4"]}
    )
    assert response.status_code == 200
    assert response.json() == {"success": True, "added_members": ["u4"], "already_members": ["u3"]}

    (rows,), _ = supabase.queries_for("group_chat_members")[2].called("insert")[0]
    assert rows == [{"group_chat_id": "gc1", "user_id": "u4", "role": "member"}]


def test_messages_come_back_chronological(client, supabase):
    supabase.queue("group_chat_members", [{"role": "member"}])
    supabase.queue("group_chat_messages", [{"id": "m3"}, {"id": "m2"}])
    response = client.get("/api/group-chats/gc1/messages?limit=2", headers=AUTH)
    body = response.json()
    assert [m["id"] for m in body["messages"]] == ["m2", "m3"]
    assert body["pagination"] == {"page": 1, "limit": 2, "hasMore": True}

    query = supabase.queries_for("group_chat_messages")[0]
    assert query.called("range")[0][0] == (0, 1)


def test_blank_message_rejected(client):
    response = client.post("/api/group-chats/gc1/messages", headers=AUTH, json={"content": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Content is required"


def test_send_message_bumps_chat(client, supabase):
    supabase.queue("group_chat_members", [{"role": "member"}])
    supabase.queue("group_chat_messages", [{"id": "m1", "content": "hi"}])
    supabase.queue("group_chat_messages", [{"id": "m1", "content": "hi", "author": {"username": "alice"}}])
    response = client.post("/api/group-chats/gc1/messages", headers=AUTH, json={"content": " hi "})
    assert response.status_code == 201
    assert response.json()["author"]["username"] == "alice"

    (payload,), _ = supabase.queries_for("group_chat_messages")[0].called("insert")[0]
    assert payload == {"group_chat_id": "gc1", "author_id": USER_ID, "content": "hi"}
    assert supabase.queries_for("group_chats")[0].called("update")
