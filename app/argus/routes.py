from flask import Blueprint, abort, current_app, jsonify, send_file

from app.argus.security import InvalidPathError, resolve_static

bp = Blueprint("routes", __name__)


def _send_page(name: str):
    try:
        path = resolve_static(current_app.config["STATIC_ROOT"], name)
    except InvalidPathError:
        abort(403)
    if path is None or not path.is_file():
        abort(404)
    return send_file(path)


@bp.get("/")
def index():
    return _send_page("index.html")


@bp.get("/admin")
def admin_page():
    return _send_page("admin.html")


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON."""
    return {"ok": True}


@bp.get("/healthz")
def healthz():
    """
    Fast health check for container probes. No DB access, minimal overhead.
    """
    return "ok", 200


@bp.get("/<path:req_path>")
def static_catch_all(req_path: str):
    """
    Serve a file from STATIC_ROOT. Extension-less paths map to "<path>.html";
    extensions off the allow-list are 404; anything escaping the root is 403.
    """
    try:
        path = resolve_static(current_app.config["STATIC_ROOT"], req_path)
    except InvalidPathError:
        current_app.logger.warning("Blocked static path outside root: %r", req_path)
        return jsonify(error="Forbidden"), 403
    if path is None or not path.is_file():
        abort(404)
    return send_file(path)
