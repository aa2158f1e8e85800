import sys
from pathlib import Path
import os

from werkzeug.security import generate_password_hash
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from contextlib import contextmanager

# Ensure repo root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.argus.models import User
from app.argus.modules.site_content.service import seed_site_content


@contextmanager
def _session_scope(database_url: str):
    engine = create_engine(database_url)
    sm = sessionmaker(bind=engine, class_=Session, autoflush=False, expire_on_commit=False)
    s: Session = sm()
    try:
        yield s
        s.commit()
    except Exception:
        s.rollback()
        raise
    finally:
        s.close()
        engine.dispose()


def seed_only(*, database_url: str | None = None) -> None:
    """
    Seed the admin user and homepage content in an idempotent way.
    Does NOT overwrite an existing admin user's password.
    """
    admin_email = (os.environ.get("ADMIN_EMAIL") or "").strip().lower()
    admin_password = os.environ.get("ADMIN_PASSWORD") or ""
    admin_name = (os.environ.get("ADMIN_NAME") or "Administrator").strip()

    db_url = (database_url or os.environ.get("DATABASE_URL") or "sqlite:///arguspage.db").strip()

    with _session_scope(db_url) as s:
        companies, testimonials = seed_site_content(s)
        if companies or testimonials:
            print(f"Seeded homepage content: {companies} companies, {testimonials} testimonials.")

        if not admin_email:
            print("ADMIN_EMAIL not set; skipping admin user.")
            return
        user = s.query(User).filter(User.email == admin_email).one_or_none()
        if not user:
            if len(admin_password) < 8:
                raise RuntimeError("ADMIN_PASSWORD must be at least 8 characters to create the admin user.")
            user = User(email=admin_email, name=admin_name, password_hash=generate_password_hash(admin_password))
            s.add(user)
        user.role = "admin"
        user.plan = "pro"

    print("Initialized database (seed_only).")
    print(f"Admin email: {admin_email}")
    print("Admin password: (from ADMIN_PASSWORD)")


def main() -> None:
    seed_only(database_url=None)


if __name__ == "__main__":
    main()
