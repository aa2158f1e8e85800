from __future__ import annotations

from app.argus.models import isoformat
from app.argus.modules.documents.models import Document


def document_to_dict(d: Document) -> dict:
    return {
        "id": d.id,
        "title": d.title,
        "description": d.description,
        "file_name": d.file_name,
        "original_name": d.original_name,
        "mime_type": d.mime_type,
        "created_at": isoformat(d.created_at),
        "updated_at": isoformat(d.updated_at),
    }
