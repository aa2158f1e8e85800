from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError

from app.argus.db import db_session
from app.argus.modules.cms.models import BlogPost, Doc
from app.argus.modules.cms.service import (
    blog_post_to_dict,
    doc_to_dict,
    get_blog_post_by_slug,
    get_doc_by_slug,
    list_blog_posts,
    list_docs,
    resolve_slug,
)
from app.argus.rbac import require_admin
from app.argus.utils import clean_text, parse_datetime, parse_sort_order

bp = Blueprint("cms", __name__)

SLUG_IN_USE = "Slug already in use"


def _commit_or_slug_conflict(what: str):
    """Commit; a unique-slug violation becomes a 400 response, anything else propagates."""
    s = db_session()
    try:
        s.commit()
    except IntegrityError:
        s.rollback()
        current_app.logger.info("%s rejected: slug conflict", what)
        return jsonify(error=SLUG_IN_USE), 400
    return None


# --- Docs ---


@bp.get("/docs")
def public_docs():
    return jsonify(docs=[doc_to_dict(d) for d in list_docs(db_session())])


@bp.get("/docs/<slug>")
def public_doc(slug: str):
    d = get_doc_by_slug(db_session(), slug)
    if not d:
        return jsonify(error="Not found"), 404
    return jsonify(doc=doc_to_dict(d))


@bp.post("/admin/docs")
@require_admin
def create_doc():
    body = request.get_json(silent=True) or {}
    title = clean_text(body.get("title"))
    if not title:
        return jsonify(error="Title is required"), 400

    s = db_session()
    d = Doc(
        title=title,
        slug=resolve_slug(body.get("slug"), title),
        body="" if body.get("body") is None else str(body["body"]),
        sort_order=parse_sort_order(body.get("sort_order")),
    )
    s.add(d)
    conflict = _commit_or_slug_conflict("Create doc")
    if conflict:
        return conflict
    return jsonify(doc=doc_to_dict(d)), 201


@bp.patch("/admin/docs/<int:doc_id>")
@require_admin
def update_doc(doc_id: int):
    s = db_session()
    d = s.get(Doc, doc_id)
    if not d:
        return jsonify(error="Doc not found"), 404

    body = request.get_json(silent=True) or {}
    if "title" in body:
        title = clean_text(body["title"])
        if not title:
            return jsonify(error="Title is required"), 400
        d.title = title
    if "slug" in body:
        d.slug = resolve_slug(body["slug"], d.title)
    if "body" in body:
        d.body = "" if body["body"] is None else str(body["body"])
    if "sort_order" in body:
        d.sort_order = parse_sort_order(body["sort_order"])
    conflict = _commit_or_slug_conflict("Update doc")
    if conflict:
        return conflict
    return jsonify(doc=doc_to_dict(d))


@bp.delete("/admin/docs/<int:doc_id>")
@require_admin
def delete_doc(doc_id: int):
    s = db_session()
    d = s.get(Doc, doc_id)
    if not d:
        return jsonify(error="Doc not found"), 404
    s.delete(d)
    s.commit()
    return "", 204


# --- Blog ---


@bp.get("/blog")
def public_blog():
    return jsonify(posts=[blog_post_to_dict(p) for p in list_blog_posts(db_session())])


@bp.get("/blog/<slug>")
def public_blog_post(slug: str):
    p = get_blog_post_by_slug(db_session(), slug)
    if not p:
        return jsonify(error="Not found"), 404
    return jsonify(post=blog_post_to_dict(p))


@bp.post("/admin/blog")
@require_admin
def create_blog_post():
    body = request.get_json(silent=True) or {}
    title = clean_text(body.get("title"))
    if not title:
        return jsonify(error="Title is required"), 400
    try:
        published_at = parse_datetime(body.get("published_at"))
    except ValueError:
        return jsonify(error="published_at must be an ISO 8601 date"), 400

    s = db_session()
    p = BlogPost(
        title=title,
        slug=resolve_slug(body.get("slug"), title),
        excerpt=clean_text(body.get("excerpt")),
        body="" if body.get("body") is None else str(body["body"]),
        author_name=clean_text(body.get("author_name")) or "",
        published_at=published_at,
    )
    s.add(p)
    conflict = _commit_or_slug_conflict("Create blog post")
    if conflict:
        return conflict
    return jsonify(post=blog_post_to_dict(p)), 201


@bp.patch("/admin/blog/<int:post_id>")
@require_admin
def update_blog_post(post_id: int):
    s = db_session()
    p = s.get(BlogPost, post_id)
    if not p:
        return jsonify(error="Post not found"), 404

    body = request.get_json(silent=True) or {}
    if "title" in body:
        title = clean_text(body["title"])
        if not title:
            return jsonify(error="Title is required"), 400
        p.title = title
    if "slug" in body:
        p.slug = resolve_slug(body["slug"], p.title)
    if "excerpt" in body:
        p.excerpt = clean_text(body["excerpt"])
    if "body" in body:
        p.body = "" if body["body"] is None else str(body["body"])
    if "author_name" in body:
        p.author_name = clean_text(body["author_name"]) or ""
    if "published_at" in body:
        try:
            p.published_at = parse_datetime(body["published_at"])
        except ValueError:
            return jsonify(error="published_at must be an ISO 8601 date"), 400
    conflict = _commit_or_slug_conflict("Update blog post")
    if conflict:
        return conflict
    return jsonify(post=blog_post_to_dict(p))


@bp.delete("/admin/blog/<int:post_id>")
@require_admin
def delete_blog_post(post_id: int):
    s = db_session()
    p = s.get(BlogPost, post_id)
    if not p:
        return jsonify(error="Post not found"), 404
    s.delete(p)
    s.commit()
    return "", 204
