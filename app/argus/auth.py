from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, timedelta

from flask import Blueprint, current_app, g, jsonify, request, session
from werkzeug.security import check_password_hash, generate_password_hash

from app.argus.db import db_session
from app.argus.models import User, user_to_dict

bp = Blueprint("auth", __name__)
_auth_attempts: dict[str, list[datetime]] = defaultdict(list)

MIN_PASSWORD_LENGTH = 8


def _check_rate_limit(ip: str) -> bool:
    window = current_app.config.get("LOGIN_RATE_WINDOW", 900)
    limit = current_app.config.get("LOGIN_RATE_LIMIT", 20)
    cutoff = datetime.utcnow() - timedelta(seconds=window)
    _auth_attempts[ip] = [t for t in _auth_attempts[ip] if t > cutoff]
    return len(_auth_attempts[ip]) >= limit


def _record_attempt(ip: str) -> None:
    _auth_attempts[ip].append(datetime.utcnow())


def reset_rate_limits() -> None:
    _auth_attempts.clear()


def _rate_limited():
    ip = request.remote_addr or "unknown"
    if _check_rate_limit(ip):
        return jsonify(error="Too many attempts. Please try again later."), 429
    _record_attempt(ip)
    return None


def load_current_user() -> None:
    """
    Loads g.current_user from the server-side session.
    Also assigns a simple per-request request_id (for log correlation).

    A session pointing at a deleted user is cleared, which destroys its row.
    """
    if not getattr(g, "request_id", None):
        g.request_id = uuid.uuid4().hex
    g.current_user = None

    user_id = session.get("user_id")
    if not user_id:
        return

    user = db_session().get(User, int(user_id))
    if user is None:
        session.clear()
        return
    g.current_user = user


def _login(user: User) -> None:
    session.clear()
    session["user_id"] = user.id
    session.permanent = True


@bp.post("/register")
def register():
    limited = _rate_limited()
    if limited:
        return limited

    body = request.get_json(silent=True) or {}
    name = str(body.get("name") or "").strip()
    email = str(body.get("email") or "").strip().lower()
    password = body.get("password") or ""

    if not name or not email or not password:
        return jsonify(error="Name, email, and password are required."), 400
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        return jsonify(error=f"Password must be at least {MIN_PASSWORD_LENGTH} characters."), 400

    s = db_session()
    try:
        if s.query(User).filter(User.email == email).one_or_none():
            return jsonify(error="An account with this email already exists."), 409

        user = User(email=email, name=name, password_hash=generate_password_hash(password))
        s.add(user)
        s.commit()
    except Exception:
        s.rollback()
        current_app.logger.exception("Register failed (email=%s request_id=%s)", email, g.get("request_id"))
        return jsonify(error="Something went wrong. Please try again."), 500

    _login(user)
    current_app.logger.info("User registered: id=%s", user.id)
    return jsonify(user=user_to_dict(user)), 201


@bp.post("/login")
def login():
    limited = _rate_limited()
    if limited:
        return limited

    body = request.get_json(silent=True) or {}
    email = str(body.get("email") or "").strip().lower()
    password = body.get("password") or ""
    if not email or not password:
        return jsonify(error="Email and password are required."), 400

    user = db_session().query(User).filter(User.email == email).one_or_none()
    if not user or not check_password_hash(user.password_hash, str(password)):
        current_app.logger.info("Login failed (email=%s)", email)
        return jsonify(error="Invalid email or password."), 401

    _auth_attempts[request.remote_addr or "unknown"].clear()
    _login(user)
    return jsonify(user=user_to_dict(user))


@bp.post("/logout")
def logout():
    session.clear()
    return "", 204


@bp.get("/me")
def me():
    user = getattr(g, "current_user", None)
    if user is None:
        return jsonify(error="Not logged in"), 401
    return jsonify(user=user_to_dict(user))
