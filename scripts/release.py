"""
Release-phase helper: migrate, prepare storage, seed.

- DATABASE_URL must be set explicitly.
- In production a SQLite database must be an absolute path (a mounted
  volume); a relative path lands in the ephemeral working directory and every
  account disappears on the next deploy.
- The uploads directory is created up front so the first upload cannot fail on it.
- Homepage content and the ADMIN_EMAIL account are seeded idempotently.

Usage:
  python scripts/release.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from sqlalchemy.engine import make_url

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.argus.config import load_settings  # noqa: E402
from app.argus.storage import LocalStorage  # noqa: E402


def _require_env(name: str) -> str:
    v = (os.environ.get(name) or "").strip()
    if not v:
        raise RuntimeError(f"Missing required environment variable {name}.")
    return v


def _prepare_sqlite(db_url: str, *, production: bool) -> None:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return
    database = url.database or ""
    if not database or database == ":memory:":
        raise RuntimeError("DATABASE_URL points at an in-memory SQLite database; nothing would persist.")
    path = Path(database)
    if production and not path.is_absolute():
        raise RuntimeError(
            f"Refusing to release on relative SQLite path {database!r} in production. "
            "Use an absolute path on a persistent volume, e.g. sqlite:////data/arguspage.db."
        )
    path.parent.mkdir(parents=True, exist_ok=True)


def _alembic_config(db_url: str):
    from alembic.config import Config

    cfg = Config(str(ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(ROOT / "migrations"))
    cfg.set_main_option("sqlalchemy.url", db_url)
    return cfg


def run_release() -> None:
    db_url = _require_env("DATABASE_URL")
    settings = load_settings()
    production = settings.env.lower() in ("prod", "production")

    print(f"=== ArgusPage release (ENV={settings.env}) ===", flush=True)
    _prepare_sqlite(db_url, production=production)

    from alembic import command

    command.upgrade(_alembic_config(db_url), "head")
    print("Migrations at head.", flush=True)

    uploads = LocalStorage(root=Path(settings.uploads_path))
    uploads.ensure_root()
    print(f"Uploads directory: {uploads.root}", flush=True)

    from scripts import init_db

    init_db.seed_only(database_url=db_url)
    print("=== ArgusPage release done ===", flush=True)


def main() -> None:
    run_release()


if __name__ == "__main__":
    main()
