from __future__ import annotations

from flask import Blueprint, jsonify, request

from app.argus.db import db_session
from app.argus.modules.site_content.models import Company, Testimonial
from app.argus.modules.site_content.service import (
    company_to_dict,
    list_companies,
    list_testimonials,
    testimonial_to_dict,
)
from app.argus.rbac import require_admin
from app.argus.utils import clean_text, parse_sort_order

bp = Blueprint("site_content", __name__)


# --- Public (homepage) ---


@bp.get("/companies")
def public_companies():
    return jsonify(companies=[company_to_dict(c) for c in list_companies(db_session())])


@bp.get("/testimonials")
def public_testimonials():
    return jsonify(testimonials=[testimonial_to_dict(t) for t in list_testimonials(db_session())])


# --- Admin: companies ---


@bp.get("/admin/companies")
@require_admin
def admin_list_companies():
    return jsonify(companies=[company_to_dict(c) for c in list_companies(db_session())])


@bp.post("/admin/companies")
@require_admin
def create_company():
    body = request.get_json(silent=True) or {}
    name = clean_text(body.get("name"))
    if not name:
        return jsonify(error="Name is required"), 400

    s = db_session()
    c = Company(
        name=name,
        logo_url=clean_text(body.get("logo_url")),
        sort_order=parse_sort_order(body.get("sort_order")),
    )
    s.add(c)
    s.commit()
    return jsonify(company=company_to_dict(c)), 201


@bp.put("/admin/companies/<int:company_id>")
@require_admin
def update_company(company_id: int):
    s = db_session()
    c = s.get(Company, company_id)
    if not c:
        return jsonify(error="Company not found"), 404

    body = request.get_json(silent=True) or {}
    if "name" in body:
        name = clean_text(body["name"])
        if not name:
            return jsonify(error="Name is required"), 400
        c.name = name
    if "logo_url" in body:
        c.logo_url = clean_text(body["logo_url"])
    if "sort_order" in body:
        c.sort_order = parse_sort_order(body["sort_order"])
    s.commit()
    return jsonify(company=company_to_dict(c))


@bp.delete("/admin/companies/<int:company_id>")
@require_admin
def delete_company(company_id: int):
    s = db_session()
    c = s.get(Company, company_id)
    if not c:
        return jsonify(error="Company not found"), 404
    s.delete(c)
    s.commit()
    return "", 204


# --- Admin: testimonials ---


@bp.get("/admin/testimonials")
@require_admin
def admin_list_testimonials():
    return jsonify(testimonials=[testimonial_to_dict(t) for t in list_testimonials(db_session())])


@bp.post("/admin/testimonials")
@require_admin
def create_testimonial():
    body = request.get_json(silent=True) or {}
    quote = clean_text(body.get("quote"))
    author_name = clean_text(body.get("author_name"))
    if not quote:
        return jsonify(error="Quote is required"), 400
    if not author_name:
        return jsonify(error="Author name is required"), 400

    s = db_session()
    t = Testimonial(
        quote=quote,
        author_name=author_name,
        author_title=clean_text(body.get("author_title")) or "",
        avatar_url=clean_text(body.get("avatar_url")),
        sort_order=parse_sort_order(body.get("sort_order")),
    )
    s.add(t)
    s.commit()
    return jsonify(testimonial=testimonial_to_dict(t)), 201


@bp.put("/admin/testimonials/<int:testimonial_id>")
@require_admin
def update_testimonial(testimonial_id: int):
    s = db_session()
    t = s.get(Testimonial, testimonial_id)
    if not t:
        return jsonify(error="Testimonial not found"), 404

    body = request.get_json(silent=True) or {}
    if "quote" in body:
        quote = clean_text(body["quote"])
        if not quote:
            return jsonify(error="Quote is required"), 400
        t.quote = quote
    if "author_name" in body:
        author_name = clean_text(body["author_name"])
        if not author_name:
            return jsonify(error="Author name is required"), 400
        t.author_name = author_name
    if "author_title" in body:
        t.author_title = clean_text(body["author_title"]) or ""
    if "avatar_url" in body:
        t.avatar_url = clean_text(body["avatar_url"])
    if "sort_order" in body:
        t.sort_order = parse_sort_order(body["sort_order"])
    s.commit()
    return jsonify(testimonial=testimonial_to_dict(t))


@bp.delete("/admin/testimonials/<int:testimonial_id>")
@require_admin
def delete_testimonial(testimonial_id: int):
    s = db_session()
    t = s.get(Testimonial, testimonial_id)
    if not t:
        return jsonify(error="Testimonial not found"), 404
    s.delete(t)
    s.commit()
    return "", 204
