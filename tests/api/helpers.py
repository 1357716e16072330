"""
Response-shaped row builders for API tests.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from uuid import uuid4

from salesdesk.boundary.db.models.document_model import DocumentContext, DocumentStatus
from salesdesk.boundary.db.models.entity_model import EntityStatus


def make_document(**overrides) -> SimpleNamespace:
    """Attribute bag shaped like UploadedDocumentModel."""
    now = datetime(2024, 5, 1, tzinfo=timezone.utc)
    fields = {
        "id": uuid4(),
        "name": "catalog.txt",
        "owner": "jane@example.com",
        "media_type": "text/plain",
        "size_bytes": 12,
        "status": DocumentStatus.UPLOADED,
        "context": DocumentContext.SALES_AI,
        "error_message": None,
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


def make_entity(**overrides) -> SimpleNamespace:
    """Attribute bag shaped like ExtractedEntityModel."""
    fields = {
        "id": uuid4(),
        "position": 0,
        "name": "Phone X1",
        "entity_type": "Smartphone",
        "price": "$499",
        "discounted_price": None,
        "features": ["OLED display"],
        "pros": ["Bright screen"],
        "cons": ["No charger"],
        "rationale": "Great value",
        "summary": "Solid mid-range phone",
        "source_snippet": "Phone X1 $499",
        "status": EntityStatus.ANALYZED,
        "error_message": None,
        "has_embedding": True,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)
