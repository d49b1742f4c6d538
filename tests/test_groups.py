from tests.conftest import AUTH, USER_ID, OTHER_USER_ID, api_error


def test_list_user_groups_uses_view(client, supabase):
    supabase.queue("user_groups", [{"id": "g1", "name": "Team"}])
    response = client.get("/api/groups", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["groups"][0]["id"] == "g1"


def test_list_public_groups(client, supabase):
    supabase.queue("group_details", [])
    client.get("/api/groups?type=public", headers=AUTH)
    query = supabase.queries_for("group_details")[0]
    assert query.called("eq")[0][0] == ("is_private", False)
    assert query.called("order")[0] == (("created_at",), {"desc": True})


def test_list_rejects_unknown_type(client):
    assert client.get("/api/groups?type=secret", headers=AUTH).status_code == 400


def test_create_requires_name(client):
    response = client.post("/api/groups", headers=AUTH, json={"name": "  "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Group name is required"


def test_create_group(client, supabase):
    supabase.queue_rpc("create_group", "g1")
    supabase.queue("group_details", [{"id": "g1", "name": "Team", "is_private": False}])
    response = client.post("/api/groups", headers=AUTH, json={"name": " Team ", "description": ""})
    assert response.status_code == 201
    assert response.json()["message"] == "Group created successfully"
    assert response.json()["group"]["id"] == "g1"

    name, params = supabase.rpc_calls[0]
    assert name == "create_group"
    assert params["p_name"] == "Team"
    assert params["p_description"] is None
    assert params["p_creator_id"] == USER_ID
    assert params["p_initial_members"] is None
    assert params["p_require_approval"] is True


def test_create_group_surfaces_function_error(client, supabase):
    supabase.queue_rpc("create_group", error=api_error("P0001", "Too many groups"))
    response = client.post("/api/groups", headers=AUTH, json={"name": "Team"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Too many groups"


def test_get_missing_group(client, supabase):
    supabase.queue("group_details", [])
    assert client.get("/api/groups/g1", headers=AUTH).status_code == 404


def test_private_group_hidden_from_non_members(client, supabase):
    supabase.queue("group_details", [{"id": "g1", "name": "Secret", "is_private": True}])
    supabase.queue("group_members", [])
    response = client.get("/api/groups/g1", headers=AUTH)
    assert response.status_code == 403
    assert response.json()["detail"] == "Access denied to private group"


def test_private_group_includes_membership(client, supabase):
    supabase.queue("group_details", [{"id": "g1", "name": "Secret", "is_private": True}])
    supabase.queue("group_members", [{"role": "admin", "can_add_members": True}])
    response = client.get("/api/groups/g1", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["group"]["user_membership"]["role"] == "admin"


def test_update_group_sends_all_fields(client, supabase):
    supabase.queue("group_details", [{"id": "g1", "name": "Renamed"}])
    response = client.put("/api/groups/g1", headers=AUTH, json={"name": "Renamed"})
    assert response.status_code == 200
    name, params = supabase.rpc_calls[0]
    assert name == "update_group_info"
    assert params["p_group_id"] == "g1"
    assert params["p_updated_by"] == USER_ID
    assert params["p_name"] == "Renamed"
    assert params["p_description"] is None


def test_only_creator_deletes(client, supabase):
    supabase.queue("groups", [{"creator_id": OTHER_USER_ID}])
    response = client.delete("/api/groups/g1", headers=AUTH)
    assert response.status_code == 403


def test_creator_deletes(client, supabase):
    supabase.queue("groups", [{"creator_id": USER_ID}])
    response = client.delete("/api/groups/g1", headers=AUTH)
    assert response.json() == {"message": "Group deleted successfully"}
    assert supabase.queries_for("groups")[1].called("delete")


def test_members_require_membership(client, supabase):
    supabase.queue("group_members", [])
    assert client.get("/api/groups/g1/members", headers=AUTH).status_code == 403


def test_members_listed_for_members(client, supabase):
    supabase.queue("group_members", [{"role": "member"}])
    supabase.queue("group_members", [{"user_id": USER_ID, "user": {"username": "alice"}}])
    response = client.get("/api/groups/g1/members", headers=AUTH)
    assert response.status_code == 200
    assert response.json()["members"][0]["user"]["username"] == "alice"


def test_add_member_maps_function_error(client, supabase):
    supabase.queue_rpc("add_friend_to_group", error=api_error("P0001", "User is not your friend"))
    response = client.post("/api/groups/g1/members", headers=AUTH, json={"friend_id": OTHER_USER_ID})
    assert response.status_code == 400
    assert response.json()["detail"] == "User is not your friend"


def test_permission_update_sends_only_given_flags(client, supabase):
    response = client.put(
        f"/api/groups/g1/members/{OTHER_USER_ID}",
        headers=AUTH,
        json={"can_pin_messages": True},
    )
    assert response.status_code == 200
    _, params = supabase.rpc_calls[0]
    assert params["p_permissions"] == {"can_pin_messages": True}


def test_join_requests_need_reviewer(client, supabase):
    supabase.queue("group_members", [{"role": "member", "can_add_members": False}])
    assert client.get("/api/groups/g1/join-requests", headers=AUTH).status_code == 403


def test_join_requests_for_member_who_can_add(client, supabase):
    supabase.queue("group_members", [{"role": "member", "can_add_members": True}])
    supabase.queue("pending_join_requests", [{"id": "r1"}])
    response = client.get("/api/groups/g1/join-requests", headers=AUTH)
    assert response.json() == {"requests": [{"id": "r1"}]}


def test_request_to_join(client, supabase):
    supabase.queue_rpc("request_to_join_group", "r1")
    response = client.post("/api/groups/g1/join-requests", headers=AUTH, json={"message": "hi"})
    assert response.json() == {"message": "Join request submitted successfully", "request_id": "r1"}


def test_reject_join_request(client, supabase):
    response = client.put("/api/groups/g1/join-requests/r1", headers=AUTH, json={"action": "reject"})
    assert response.json() == {"message": "Join request rejected successfully"}
    assert supabase.rpc_calls[0] == (
        "reject_group_join_request", {"p_request_id": "r1", "p_rejected_by": USER_ID}
    )


def test_cancel_someone_elses_request(client, supabase):
    supabase.queue("group_join_requests", [{"user_id": OTHER_USER_ID, "status": "pending"}])
    response = client.delete("/api/groups/g1/join-requests/r1", headers=AUTH)
    assert response.status_code == 403


def test_cancel_processed_request(client, supabase):
    supabase.queue("group_join_requests", [{"user_id": USER_ID, "status": "approved"}])
    response = client.delete("/api/groups/g1/join-requests/r1", headers=AUTH)
    assert response.status_code == 400


def test_cancel_own_request(client, supabase):
    supabase.queue("group_join_requests", [{"user_id": USER_ID, "status": "pending"}])
    response = client.delete("/api/groups/g1/join-requests/r1", headers=AUTH)
    assert response.status_code == 200
    (payload,), _ = supabase.queries_for("group_join_requests")[1].called("update")[0]
    assert payload == {"status": "cancelled"}


def test_own_join_requests(client, supabase):
    supabase.queue("group_join_requests", [{"id": "r1", "group": {"name": "Team"}}])
    response = client.get("/api/join-requests", headers=AUTH)
    assert response.json()["requests"][0]["group"]["name"] == "Team"
