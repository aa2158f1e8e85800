import os
from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class Settings:
    secret_key: str
    env: str
    database_url: str

    uploads_path: str
    static_root: str

    session_cookie_name: str
    session_ttl_days: int
    max_upload_mb: int

    login_rate_limit: int
    login_rate_window: int


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer (got {raw!r}).")


def load_settings() -> Settings:
    cwd = os.getcwd()
    return Settings(
        secret_key=_getenv("SECRET_KEY", "change-me"),
        env=_getenv("ENV", "development"),
        database_url=_getenv("DATABASE_URL", "sqlite:///arguspage.db"),
        uploads_path=os.path.abspath(_getenv("UPLOADS_PATH", os.path.join(cwd, "uploads", "documents"))),
        static_root=os.path.abspath(_getenv("STATIC_ROOT", os.path.join(cwd, "public"))),
        session_cookie_name=_getenv("SESSION_COOKIE_NAME", "arguspage.sid"),
        session_ttl_days=_getenv_int("SESSION_TTL_DAYS", 7),
        max_upload_mb=_getenv_int("MAX_UPLOAD_MB", 20),
        login_rate_limit=_getenv_int("LOGIN_RATE_LIMIT", 20),
        login_rate_window=_getenv_int("LOGIN_RATE_WINDOW", 15 * 60),
    )


def load_config() -> dict:
    s = load_settings()
    is_production = s.env in ("prod", "production")
    return {
        "SECRET_KEY": s.secret_key,
        "ENV": s.env,
        "DATABASE_URL": s.database_url,
        "UPLOADS_PATH": s.uploads_path,
        "STATIC_ROOT": s.static_root,
        # session cookie (id only; payload lives in the sessions table)
        "SESSION_COOKIE_NAME": s.session_cookie_name,
        "SESSION_COOKIE_HTTPONLY": True,
        "SESSION_COOKIE_SAMESITE": "Lax",
        "SESSION_COOKIE_SECURE": is_production,
        "PERMANENT_SESSION_LIFETIME": timedelta(days=s.session_ttl_days),
        "SESSION_REFRESH_EACH_REQUEST": True,
        # auth rate limiting
        "LOGIN_RATE_LIMIT": s.login_rate_limit,
        "LOGIN_RATE_WINDOW": s.login_rate_window,
        # file upload limits
        "MAX_UPLOAD_MB": s.max_upload_mb,
        "MAX_CONTENT_LENGTH": s.max_upload_mb * 1024 * 1024,
    }
