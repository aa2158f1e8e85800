def test_docs_crud(admin_client, client):
    r = admin_client.post("/api/admin/docs", json={"title": "Getting Started!", "body": "# Hi", "sort_order": 1})
    assert r.status_code == 201
    doc = r.get_json()["doc"]
    assert doc["slug"] == "getting-started"

    admin_client.post("/api/admin/docs", json={"title": "Overview", "slug": "Intro Page", "sort_order": 0})

    listed = client.get("/api/docs").get_json()["docs"]
    assert [d["slug"] for d in listed] == ["intro-page", "getting-started"]

    r = client.get("/api/docs/getting-started")
    assert r.status_code == 200
    assert r.get_json()["doc"]["body"] == "# Hi"

    r = admin_client.patch(f"/api/admin/docs/{doc['id']}", json={"slug": "start", "body": None})
    assert r.status_code == 200
    assert r.get_json()["doc"]["slug"] == "start"
    assert r.get_json()["doc"]["body"] == ""
    assert client.get("/api/docs/getting-started").status_code == 404

    assert admin_client.delete(f"/api/admin/docs/{doc['id']}").status_code == 204
    r = admin_client.delete(f"/api/admin/docs/{doc['id']}")
    assert r.status_code == 404
    assert r.get_json() == {"error": "Doc not found"}


def test_doc_slug_conflict(admin_client):
    assert admin_client.post("/api/admin/docs", json={"title": "Setup"}).status_code == 201
    r = admin_client.post("/api/admin/docs", json={"title": "Other", "slug": "setup"})
    assert r.status_code == 400
    assert r.get_json() == {"error": "Slug already in use"}


def test_doc_requires_title(admin_client):
    r = admin_client.post("/api/admin/docs", json={"body": "x"})
    assert r.status_code == 400
    assert r.get_json() == {"error": "Title is required"}


def test_cms_admin_is_guarded(client, user_client):
    assert client.post("/api/admin/docs", json={"title": "x"}).status_code == 401
    assert user_client.post("/api/admin/blog", json={"title": "x"}).status_code == 403


def test_blog_ordering_and_drafts(admin_client, client):
    admin_client.post("/api/admin/blog", json={"title": "Draft"})
    admin_client.post("/api/admin/blog", json={"title": "Older", "published_at": "2024-01-05T10:00:00Z"})
    admin_client.post("/api/admin/blog", json={"title": "Newer", "published_at": "2024-03-01"})

    posts = client.get("/api/blog").get_json()["posts"]
    assert [p["title"] for p in posts] == ["Newer", "Older", "Draft"]
    assert posts[2]["published_at"] is None


def test_blog_post_crud(admin_client, client):
    r = admin_client.post(
        "/api/admin/blog",
        json={"title": "Launch Day", "excerpt": "We shipped", "author_name": "Ana", "body": "..."},
    )
    assert r.status_code == 201
    post = r.get_json()["post"]
    assert post["slug"] == "launch-day"
    assert post["author_name"] == "Ana"

    r = client.get("/api/blog/launch-day")
    assert r.get_json()["post"]["excerpt"] == "We shipped"

    r = admin_client.patch(f"/api/admin/blog/{post['id']}", json={"published_at": "not a date"})
    assert r.status_code == 400

    r = admin_client.patch(f"/api/admin/blog/{post['id']}", json={"published_at": "2024-06-01T12:00:00+02:00"})
    assert r.status_code == 200
    assert r.get_json()["post"]["published_at"].startswith("2024-06-01T10:00:00")

    assert admin_client.delete(f"/api/admin/blog/{post['id']}").status_code == 204
    assert client.get("/api/blog/launch-day").status_code == 404
    r = admin_client.patch(f"/api/admin/blog/{post['id']}", json={"title": "x"})
    assert r.get_json() == {"error": "Post not found"}


def test_blog_rejects_bad_publish_date(admin_client):
    r = admin_client.post("/api/admin/blog", json={"title": "x", "published_at": "yesterday"})
    assert r.status_code == 400
    assert r.get_json() == {"error": "published_at must be an ISO 8601 date"}
