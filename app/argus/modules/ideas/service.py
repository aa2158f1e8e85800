from __future__ import annotations

from sqlalchemy.orm import Session

from app.argus.models import isoformat
from app.argus.modules.ideas.models import Idea


def list_ideas(
    s: Session,
    *,
    user_id: int | None = None,
    admin_view: bool = False,
    status: str | None = None,
) -> list[Idea]:
    """
    Newest first. Non-admins only ever see their own ideas; admins see all.
    """
    q = s.query(Idea)
    if not admin_view and user_id is not None:
        q = q.filter(Idea.user_id == user_id)
    if status:
        q = q.filter(Idea.status == status)
    return q.order_by(Idea.created_at.desc(), Idea.id.desc()).all()


def idea_to_dict(i: Idea) -> dict:
    return {
        "id": i.id,
        "user_id": i.user_id,
        "title": i.title,
        "description": i.description,
        "status": i.status,
        "admin_notes": i.admin_notes,
        "user_email": i.user.email if i.user else None,
        "user_name": i.user.name if i.user else None,
        "created_at": isoformat(i.created_at),
        "updated_at": isoformat(i.updated_at),
    }
