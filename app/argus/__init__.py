import logging
import os

from dotenv import load_dotenv
from flask import Flask, g, jsonify, request
from sqlalchemy import func, select
from werkzeug.exceptions import HTTPException

from app.argus.config import load_config
from app.argus.db import init_db, session_scope, teardown_db_session
from app.argus.models import User
from app.argus.routes import bp as routes_bp
from app.argus.auth import bp as auth_bp, load_current_user
from app.argus.admin import bp as admin_bp
from app.argus.modules.documents.admin import bp as documents_bp
from app.argus.modules.ideas.admin import bp as ideas_bp
from app.argus.modules.site_content.admin import bp as site_content_bp
from app.argus.modules.cms.admin import bp as cms_bp
from app.argus.session_store import SessionStore
from app.argus.sessions import StoreSessionInterface
from app.argus.storage import storage_from_config

logger = logging.getLogger(__name__)

_SKIP_USER_PATHS = ("/health", "/healthz")


def _warn_if_no_users(app: Flask) -> None:
    """
    An empty users table in production usually means the database file lives on
    ephemeral container storage and was wiped by a redeploy.
    """
    try:
        with session_scope(app) as s:
            count = s.scalar(select(func.count()).select_from(User)) or 0
    except Exception as e:
        app.logger.warning("Startup user check failed: %s", e)
        return
    if count == 0:
        app.logger.warning(
            "Database has no users. If this host replaces the filesystem on deploy, mount a persistent "
            "volume and point DATABASE_URL at it, or every account will be lost on redeploy."
        )


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__, static_folder=None)
    app.config.from_mapping(load_config())

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError(
                "SECRET_KEY must be set to a strong random value in production "
                "(generate one with: python -c 'import secrets; print(secrets.token_hex(32))')."
            )

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    store = SessionStore(
        app.extensions["sqlalchemy_sessionmaker"],
        default_ttl=app.config["PERMANENT_SESSION_LIFETIME"],
    )
    app.extensions["session_store"] = store
    app.session_interface = StoreSessionInterface(store)

    storage_from_config(app.config).ensure_root()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
    app.register_blueprint(documents_bp, url_prefix="/api/documents")
    app.register_blueprint(ideas_bp, url_prefix="/api/ideas")
    app.register_blueprint(site_content_bp, url_prefix="/api")
    app.register_blueprint(cms_bp, url_prefix="/api")

    @app.before_request
    def _load_user_wrapper():
        if request.path in _SKIP_USER_PATHS:
            g.current_user = None
            return None
        return load_current_user()

    app.teardown_appcontext(teardown_db_session)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):  # type: ignore[no-redef]
        if e.code == 413:
            return jsonify(error=f"File too large (max {app.config['MAX_UPLOAD_MB']} MB)"), 400
        if request.path.startswith("/api/"):
            return jsonify(error=e.name), e.code
        return e

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        app.logger.exception("Unhandled 500 (request_id=%s)", getattr(g, "request_id", None))
        return jsonify(error="Internal server error"), 500

    if env in ("prod", "production"):
        _warn_if_no_users(app)

    logger.info("create_app() complete; app ready to serve")
    return app
