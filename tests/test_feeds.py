from tests.conftest import AUTH, USER_ID


def test_list_posts_with_counts_and_likes(client, supabase):
    supabase.queue("posts", [
        {"id": "p1", "content": "one", "likes_count": [{"count": 2}], "comments_count": [{"count": 1}]},
        {"id": "p2", "content": "two", "likes_count": [], "comments_count": [{"count": 0}]},
    ])
    supabase.queue("post_likes", [{"post_id": "p1"}])
    body = client.get("/api/feeds", headers=AUTH).json()

    first, second = body["posts"]
    assert (first["likes_count"], first["comments_count"], first["is_liked"]) == (2, 1, True)
    assert (second["likes_count"], second["is_liked"]) == (0, False)
    assert body["pagination"] == {"page": 1, "limit": 20, "hasMore": False}

    likes_queries = supabase.queries_for("post_likes")
    assert len(likes_queries) == 1
    assert likes_queries[0].called("in_")[0][0] == ("post_id", ["p1", "p2"])


def test_create_post(client, supabase):
    supabase.queue("posts", [{"id": "p1"}])
    supabase.queue("posts", [{"id": "p1", "content": "hello", "author_id": USER_ID}])
    response = client.post("/api/feeds", headers=AUTH, json={"content": " hello "})
    assert response.status_code == 201
    body = response.json()
    assert (body["likes_count"], body["comments_count"], body["is_liked"]) == (0, 0, False)

    (payload,), _ = supabase.queries_for("posts")[0].called("insert")[0]
    assert payload == {"content": "hello", "author_id": USER_ID, "media_urls": [], "post_type": "text"}


def test_create_post_rejects_unknown_type(client):
    response = client.post("/api/feeds", headers=AUTH, json={"content": "x", "post_type": "poll"})
    assert response.status_code == 400


def test_create_post_requires_content(client):
    response = client.post("/api/feeds", headers=AUTH, json={"content": ""})
    assert response.json()["detail"] == "Content is required"


def test_comment_on_missing_post(client, supabase):
    supabase.queue("posts", [])
    response = client.post("/api/feeds/p9/comments", headers=AUTH, json={"content": "nice"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Post not found"


def test_comment(client, supabase):
    supabase.queue("posts", [{"id": "p1"}])
    supabase.queue("post_comments", [{"id": "c1"}])
    supabase.queue("post_comments", [{"id": "c1", "content": "nice", "author": {"id": USER_ID}}])
    response = client.post("/api/feeds/p1/comments", headers=AUTH, json={"content": "nice"})
    assert response.status_code == 201
    assert response.json()["author"]["id"] == USER_ID


def test_comments_oldest_first(client, supabase):
    supabase.queue("post_comments", [{"id": "c1"}])
    body = client.get("/api/feeds/p1/comments", headers=AUTH).json()
    assert body["pagination"]["limit"] == 10
    assert supabase.queries_for("post_comments")[0].called("order")[0] == (("created_at",), {})


def test_like_missing_post(client, supabase):
    supabase.queue("posts", [])
    assert client.post("/api/feeds/p9/like", headers=AUTH).status_code == 404


def test_like_twice(client, supabase):
    supabase.queue("posts", [{"id": "p1"}])
    supabase.queue("post_likes", [{"id": "l1"}])
    response = client.post("/api/feeds/p1/like", headers=AUTH)
    assert response.status_code == 400
    assert response.json()["detail"] == "Post already liked"


def test_like_and_unlike(client, supabase):
    supabase.queue("posts", [{"id": "p1"}])
    assert client.post("/api/feeds/p1/like", headers=AUTH).json() == {"success": True}
    assert client.delete("/api/feeds/p1/like", headers=AUTH).json() == {"success": True}
    inserts = supabase.queries_for("post_likes")[1].called("insert")
    assert inserts[0][0][0] == {"post_id": "p1", "user_id": USER_ID}
    assert supabase.queries_for("post_likes")[2].called("delete")
