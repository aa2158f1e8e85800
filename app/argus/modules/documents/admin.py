from __future__ import annotations

from flask import Blueprint, current_app, g, jsonify, request, send_file
from sqlalchemy.orm import Session

from app.argus.db import db_session
from app.argus.modules.documents.models import Document
from app.argus.modules.documents.service import document_to_dict
from app.argus.rbac import require_admin, require_login
from app.argus.security import InvalidPathError, safe_disposition_filename
from app.argus.storage import generate_stored_name, storage_from_config
from app.argus.utils import clean_text

bp = Blueprint("documents", __name__)


def _get_doc(s: Session, doc_id: int) -> Document | None:
    return s.get(Document, doc_id)


@bp.get("")
@require_login
def list_documents():
    s = db_session()
    docs = s.query(Document).order_by(Document.created_at.desc(), Document.id.desc()).all()
    return jsonify(documents=[document_to_dict(d) for d in docs])


@bp.get("/<int:doc_id>/download")
@require_login
def download_document(doc_id: int):
    s = db_session()
    d = _get_doc(s, doc_id)
    if not d:
        return jsonify(error="Document not found"), 404

    storage = storage_from_config(current_app.config)
    try:
        if not storage.exists(d.file_name):
            return jsonify(error="File not found"), 404
        fh = storage.open(d.file_name)
    except InvalidPathError:
        current_app.logger.warning(
            "Blocked document download outside uploads root (doc_id=%s file_name=%r request_id=%s)",
            d.id,
            d.file_name,
            g.get("request_id"),
        )
        return jsonify(error="Invalid document path"), 403

    return send_file(
        fh,
        mimetype=d.mime_type or None,
        as_attachment=True,
        download_name=safe_disposition_filename(d.original_name or d.file_name),
        max_age=0,
    )


@bp.post("")
@require_admin
def upload_document():
    f = request.files.get("file")
    if not f or not f.filename:
        return jsonify(error="No file uploaded"), 400

    original_name = f.filename
    stored_name = generate_stored_name(original_name)
    storage = storage_from_config(current_app.config)
    storage.put_bytes(stored_name, f.read())

    s = db_session()
    try:
        d = Document(
            title=clean_text(request.form.get("title")) or original_name or "Untitled",
            description=clean_text(request.form.get("description")),
            file_name=stored_name,
            original_name=original_name or stored_name,
            mime_type=f.mimetype or None,
        )
        s.add(d)
        s.commit()
    except Exception:
        s.rollback()
        current_app.logger.exception("Failed to save document record (file=%s)", stored_name)
        storage.delete(stored_name)
        return jsonify(error="Failed to save document"), 500

    current_app.logger.info("Document uploaded: id=%s file=%s", d.id, stored_name)
    return jsonify(document=document_to_dict(d)), 201


@bp.patch("/<int:doc_id>")
@require_admin
def update_document(doc_id: int):
    s = db_session()
    d = _get_doc(s, doc_id)
    if not d:
        return jsonify(error="Document not found"), 404

    body = request.get_json(silent=True) or {}
    if "title" in body:
        title = clean_text(body["title"])
        if not title:
            return jsonify(error="Title cannot be empty"), 400
        d.title = title
    if "description" in body:
        d.description = clean_text(body["description"])
    s.commit()
    return jsonify(document=document_to_dict(d))


@bp.delete("/<int:doc_id>")
@require_admin
def delete_document(doc_id: int):
    s = db_session()
    d = _get_doc(s, doc_id)
    if not d:
        return jsonify(error="Document not found"), 404

    storage = storage_from_config(current_app.config)
    try:
        storage.delete(d.file_name)
    except InvalidPathError:
        # The row is still removed; the escaping path is never touched.
        current_app.logger.warning(
            "Refused to unlink document file outside uploads root (doc_id=%s file_name=%r)",
            d.id,
            d.file_name,
        )

    s.delete(d)
    s.commit()
    return "", 204
