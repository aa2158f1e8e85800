from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.argus.models import isoformat
from app.argus.modules.cms.models import BlogPost, Doc
from app.argus.utils import slugify


def resolve_slug(slug: object, title: str) -> str:
    """Explicit slug wins (normalized); otherwise derived from the title."""
    out = slugify(str(slug)) if slug else ""
    return out or slugify(title) or "untitled"


def list_docs(s: Session) -> list[Doc]:
    return list(s.scalars(select(Doc).order_by(Doc.sort_order.asc(), Doc.id.asc())))


def get_doc_by_slug(s: Session, slug: str) -> Doc | None:
    return s.scalar(select(Doc).where(Doc.slug == slug))


def list_blog_posts(s: Session) -> list[BlogPost]:
    # Published posts newest first, drafts (NULL published_at) last.
    return list(
        s.scalars(
            select(BlogPost).order_by(
                BlogPost.published_at.is_(None),
                BlogPost.published_at.desc(),
                BlogPost.created_at.desc(),
                BlogPost.id.desc(),
            )
        )
    )


def get_blog_post_by_slug(s: Session, slug: str) -> BlogPost | None:
    return s.scalar(select(BlogPost).where(BlogPost.slug == slug))


def doc_to_dict(d: Doc) -> dict:
    return {
        "id": d.id,
        "title": d.title,
        "slug": d.slug,
        "body": d.body,
        "sort_order": d.sort_order,
        "created_at": isoformat(d.created_at),
        "updated_at": isoformat(d.updated_at),
    }


def blog_post_to_dict(p: BlogPost) -> dict:
    return {
        "id": p.id,
        "title": p.title,
        "slug": p.slug,
        "excerpt": p.excerpt,
        "body": p.body,
        "author_name": p.author_name,
        "published_at": isoformat(p.published_at),
        "created_at": isoformat(p.created_at),
        "updated_at": isoformat(p.updated_at),
    }
