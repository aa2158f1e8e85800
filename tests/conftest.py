import pytest
from werkzeug.security import generate_password_hash

from app.argus import create_app
from app.argus.auth import reset_rate_limits
from app.argus.db import close_db, session_scope
from app.argus.models import Base, User

ADMIN_EMAIL = "admin@example.com"
USER_EMAIL = "user@example.com"
PASSWORD = "correct-horse"


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path/'test.db'}")
    monkeypatch.setenv("ENV", "test")
    monkeypatch.setenv("UPLOADS_PATH", str(tmp_path / "uploads"))
    monkeypatch.setenv("STATIC_ROOT", str(tmp_path / "public"))
    for k in ("SESSION_COOKIE_NAME", "SESSION_TTL_DAYS", "MAX_UPLOAD_MB", "LOGIN_RATE_LIMIT", "LOGIN_RATE_WINDOW"):
        monkeypatch.delenv(k, raising=False)

    public = tmp_path / "public"
    public.mkdir()
    (public / "index.html").write_text("<h1>home</h1>")
    (public / "admin.html").write_text("<h1>admin</h1>")
    (public / "features.html").write_text("<h1>features</h1>")
    (public / "style.css").write_text("body{}")
    (public / "notes.txt").write_text("not served")

    reset_rate_limits()
    app = create_app()

    engine = app.extensions["sqlalchemy_engine"]
    Base.metadata.create_all(bind=engine)

    with session_scope(app) as s:
        s.add_all(
            [
                User(
                    email=ADMIN_EMAIL,
                    name="Admin",
                    password_hash=generate_password_hash(PASSWORD),
                    role="admin",
                    plan="pro",
                ),
                User(email=USER_EMAIL, name="Regular", password_hash=generate_password_hash(PASSWORD)),
            ]
        )

    yield app
    close_db(app)


@pytest.fixture()
def client(app):
    return app.test_client()


def login(client, email=ADMIN_EMAIL, password=PASSWORD):
    r = client.post("/api/login", json={"email": email, "password": password})
    assert r.status_code == 200, r.get_json()
    return r


@pytest.fixture()
def admin_client(client):
    login(client, ADMIN_EMAIL)
    return client


@pytest.fixture()
def user_client(app):
    c = app.test_client()
    login(c, USER_EMAIL)
    return c
