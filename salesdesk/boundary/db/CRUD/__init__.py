"""
CRUD singletons for the ORM models.
"""

from salesdesk.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from salesdesk.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from salesdesk.boundary.db.CRUD.entity_crud import EntityCRUD, entity_crud

__all__ = [
    "ChunkCRUD",
    "DocumentCRUD",
    "EntityCRUD",
    "chunk_crud",
    "document_crud",
    "entity_crud",
]
