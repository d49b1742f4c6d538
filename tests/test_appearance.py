from tests.conftest import AUTH, USER_ID


def test_defaults_when_nothing_stored(client, supabase):
    supabase.queue("appearance_settings", [])
    response = client.get("/api/appearance", headers=AUTH)
    assert response.status_code == 200
    assert response.json() == {
        "theme": "light",
        "color_palette": "blue",
        "glass_effect": "translucent",
        "language": "en",
    }


def test_stored_settings(client, supabase):
    supabase.queue("appearance_settings", [{
        "theme": "dark", "color_palette": "green", "glass_effect": None, "language": "fr"
    }])
    body = client.get("/api/appearance", headers=AUTH).json()
    assert body["theme"] == "dark"
    assert body["glass_effect"] == "translucent"


def test_save_calls_upsert_function(client, supabase):
    supabase.queue_rpc("upsert_user_appearance_settings", [{"theme": "dark"}])
    response = client.post("/api/appearance", headers=AUTH, json={
        "theme": "dark", "color_palette": "purple", "glass_effect": "opaque", "language": "es"
    })
    assert response.status_code == 200
    assert response.json()["success"] is True

    name, params = supabase.rpc_calls[0]
    assert name == "upsert_user_appearance_settings"
    assert params["user_uuid"] == USER_ID
    assert params["new_theme"] == "dark"


def test_save_rejects_unknown_theme(client):
    response = client.post("/api/appearance", headers=AUTH, json={
        "theme": "neon", "color_palette": "blue", "glass_effect": "translucent", "language": "en"
    })
    assert response.status_code == 400


def test_unknown_stored_values_fall_back_to_defaults(client, supabase):
    supabase.queue("appearance_settings", [{
        "theme": "sepia", "color_palette": "green", "glass_effect": "frosted", "language": "fr"
    }])
    response = client.get("/api/appearance", headers=AUTH)
    assert response.status_code == 200
    assert response.json() == {
        "theme": "light",
        "color_palette": "green",
        "glass_effect": "translucent",
        "language": "fr",
    }
