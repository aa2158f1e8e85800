from tests.conftest import ADMIN_EMAIL, USER_EMAIL


def _submit(client, title="Dark mode", description="Please"):
    return client.post("/api/ideas", json={"title": title, "description": description})


def test_ideas_require_login(client):
    assert client.get("/api/ideas").status_code == 401
    assert _submit(client).status_code == 401


def test_submit_idea(user_client):
    r = _submit(user_client, title="  Webhooks  ", description="")
    assert r.status_code == 201
    idea = r.get_json()["idea"]
    assert idea["title"] == "Webhooks"
    assert idea["description"] is None
    assert idea["status"] == "pending"
    assert idea["admin_notes"] is None
    assert idea["user_email"] == USER_EMAIL


def test_submit_requires_title(user_client):
    r = _submit(user_client, title="   ")
    assert r.status_code == 400
    assert r.get_json() == {"error": "Title is required"}


def test_users_only_see_their_own_ideas(app, user_client, admin_client):
    _submit(user_client, title="Mine")
    _submit(admin_client, title="Admin's")

    mine = user_client.get("/api/ideas").get_json()["ideas"]
    assert [i["title"] for i in mine] == ["Mine"]

    everything = admin_client.get("/api/ideas").get_json()["ideas"]
    assert sorted(i["title"] for i in everything) == ["Admin's", "Mine"]
    assert {i["user_email"] for i in everything} == {USER_EMAIL, ADMIN_EMAIL}


def test_admin_reviews_idea(user_client, admin_client):
    idea = _submit(user_client).get_json()["idea"]

    r = admin_client.patch(f"/api/ideas/{idea['id']}", json={"status": "approved", "admin_notes": "Q3"})
    assert r.status_code == 200
    reviewed = r.get_json()["idea"]
    assert reviewed["status"] == "approved"
    assert reviewed["admin_notes"] == "Q3"

    r = admin_client.patch(f"/api/ideas/{idea['id']}", json={"admin_notes": ""})
    assert r.get_json()["idea"]["admin_notes"] is None
    assert r.get_json()["idea"]["status"] == "approved"


def test_status_filter(user_client, admin_client):
    first = _submit(user_client, title="One").get_json()["idea"]
    _submit(user_client, title="Two")
    admin_client.patch(f"/api/ideas/{first['id']}", json={"status": "rejected"})

    rejected = admin_client.get("/api/ideas?status=rejected").get_json()["ideas"]
    assert [i["title"] for i in rejected] == ["One"]

    pending = user_client.get("/api/ideas?status=pending").get_json()["ideas"]
    assert [i["title"] for i in pending] == ["Two"]

    # unknown filter values are ignored
    assert len(user_client.get("/api/ideas?status=bogus").get_json()["ideas"]) == 2


def test_invalid_status(user_client, admin_client):
    idea = _submit(user_client).get_json()["idea"]
    r = admin_client.patch(f"/api/ideas/{idea['id']}", json={"status": "maybe"})
    assert r.status_code == 400
    assert r.get_json() == {"error": "Invalid status. Use pending, approved, or rejected."}


def test_only_admin_reviews(user_client, admin_client):
    idea = _submit(user_client).get_json()["idea"]
    assert user_client.patch(f"/api/ideas/{idea['id']}", json={"status": "approved"}).status_code == 403
    assert admin_client.patch("/api/ideas/999", json={"status": "approved"}).status_code == 404
