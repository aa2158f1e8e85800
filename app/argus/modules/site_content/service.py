from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.argus.modules.site_content.models import Company, Testimonial

SEED_COMPANIES = ("Nextra", "Arclight", "Voltera", "Streamline", "Pylon", "Cubist")

SEED_TESTIMONIALS = (
    (
        "ArgusPage cut our support tickets during outages by 80%. Our users know what's happening "
        "before they even think to reach out. It's been a game-changer.",
        "Sarah Chen",
        "VP Engineering, Streamline",
    ),
    (
        "We launched our status page in literally 90 seconds. The API integration with our monitoring "
        "was seamless. This is how developer tools should work.",
        "Marcus Rodriguez",
        "CTO, Arclight",
    ),
    (
        "Our customers love the transparency. When issues happen, they see we're on it immediately. "
        "It's turned outages from trust-breakers into trust-builders.",
        "Emily Nakamura",
        "Head of Customer Success, Voltera",
    ),
)


def list_companies(s: Session) -> list[Company]:
    return list(s.scalars(select(Company).order_by(Company.sort_order.asc(), Company.id.asc())))


def list_testimonials(s: Session) -> list[Testimonial]:
    return list(s.scalars(select(Testimonial).order_by(Testimonial.sort_order.asc(), Testimonial.id.asc())))


def seed_site_content(s: Session) -> tuple[int, int]:
    """
    Insert the default homepage logos/testimonials into empty tables.
    Idempotent: a table with any rows is left alone. Returns (companies, testimonials) added.
    """
    added_companies = added_testimonials = 0
    if not s.scalar(select(func.count()).select_from(Company)):
        s.add_all(Company(name=name, sort_order=i) for i, name in enumerate(SEED_COMPANIES))
        added_companies = len(SEED_COMPANIES)
    if not s.scalar(select(func.count()).select_from(Testimonial)):
        s.add_all(
            Testimonial(quote=quote, author_name=author, author_title=title, sort_order=i)
            for i, (quote, author, title) in enumerate(SEED_TESTIMONIALS)
        )
        added_testimonials = len(SEED_TESTIMONIALS)
    return added_companies, added_testimonials


def company_to_dict(c: Company) -> dict:
    return {"id": c.id, "name": c.name, "logo_url": c.logo_url, "sort_order": c.sort_order}


def testimonial_to_dict(t: Testimonial) -> dict:
    return {
        "id": t.id,
        "quote": t.quote,
        "author_name": t.author_name,
        "author_title": t.author_title,
        "avatar_url": t.avatar_url,
        "sort_order": t.sort_order,
    }
