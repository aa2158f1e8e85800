"""
Give an existing account full access (role=admin, plan=pro).

Usage:
  python scripts/promote_user.py someone@example.com
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from sqlalchemy import func, update  # noqa: E402

from app.argus.models import User  # noqa: E402
from scripts.init_db import _session_scope  # noqa: E402


def promote_user(database_url: str, email: str, *, role: str = "admin", plan: str = "pro") -> bool:
    """Returns False when no account matches `email` (case/whitespace-insensitive)."""
    with _session_scope(database_url) as s:
        result = s.execute(
            update(User)
            .where(func.lower(func.trim(User.email)) == email.strip().lower())
            .values(role=role, plan=plan)
        )
        return result.rowcount > 0


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("email")
    parser.add_argument("--database-url", default=os.environ.get("DATABASE_URL") or "sqlite:///arguspage.db")
    args = parser.parse_args()

    if promote_user(args.database_url, args.email):
        print(f"Promoted: {args.email} -> role: admin, plan: pro (full access)")
        return 0
    print(f"No user found with email: {args.email}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
