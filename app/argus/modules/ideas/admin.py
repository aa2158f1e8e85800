from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request

from app.argus.db import db_session
from app.argus.modules.ideas.models import IDEA_STATUSES, Idea
from app.argus.modules.ideas.service import idea_to_dict, list_ideas
from app.argus.rbac import require_admin, require_login, user_is_admin
from app.argus.utils import clean_text

bp = Blueprint("ideas", __name__)


@bp.post("")
@require_login
def create_idea():
    body = request.get_json(silent=True) or {}
    title = clean_text(body.get("title"))
    if not title:
        return jsonify(error="Title is required"), 400

    s = db_session()
    idea = Idea(
        user_id=g.current_user.id,
        title=title,
        description=clean_text(body.get("description")),
        status="pending",
    )
    s.add(idea)
    s.commit()
    current_app.logger.info("Idea submitted: id=%s user_id=%s", idea.id, idea.user_id)
    return jsonify(idea=idea_to_dict(idea)), 201


@bp.get("")
@require_login
def get_ideas():
    status = request.args.get("status")
    if status not in IDEA_STATUSES:
        status = None
    user = g.current_user
    ideas = list_ideas(
        db_session(),
        user_id=user.id,
        admin_view=user_is_admin(user),
        status=status,
    )
    return jsonify(ideas=[idea_to_dict(i) for i in ideas])


@bp.patch("/<int:idea_id>")
@require_admin
def update_idea(idea_id: int):
    s = db_session()
    idea = s.get(Idea, idea_id)
    if not idea:
        return jsonify(error="Idea not found"), 404

    body = request.get_json(silent=True) or {}
    if "status" in body:
        status = str(body["status"])
        if status not in IDEA_STATUSES:
            return jsonify(error="Invalid status. Use pending, approved, or rejected."), 400
        idea.status = status
    if "admin_notes" in body:
        notes = body["admin_notes"]
        idea.admin_notes = None if notes in (None, "") else str(notes)
    s.commit()
    return jsonify(idea=idea_to_dict(idea))
