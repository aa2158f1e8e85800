from flask import Blueprint, current_app, jsonify, request

from app.argus.db import db_session
from app.argus.models import PLANS, ROLES, User, isoformat, user_to_dict
from app.argus.rbac import require_admin

bp = Blueprint("admin", __name__)


def _user_row(u: User) -> dict:
    row = user_to_dict(u)
    row["created_at"] = isoformat(u.created_at)
    return row


@bp.get("/users")
@require_admin
def list_users():
    s = db_session()
    users = s.query(User).order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify(users=[_user_row(u) for u in users])


@bp.patch("/users/<int:user_id>")
@require_admin
def update_user(user_id: int):
    s = db_session()
    user = s.get(User, user_id)
    if not user:
        return jsonify(error="User not found"), 404

    body = request.get_json(silent=True) or {}
    role = body.get("role")
    plan = body.get("plan")
    if role is not None and str(role) not in ROLES:
        return jsonify(error="Invalid role. Use user or admin."), 400
    if plan is not None and str(plan) not in PLANS:
        return jsonify(error="Invalid plan. Use free or pro."), 400

    if role is not None:
        user.role = str(role)
    if plan is not None:
        user.plan = str(plan)
    s.commit()
    current_app.logger.info("User %s updated: role=%s plan=%s", user.id, user.role, user.plan)
    return jsonify(user=_user_row(user))
