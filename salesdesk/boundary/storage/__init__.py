"""
Blob storage boundary.
"""

from salesdesk.boundary.storage.blob_store import BlobStore
from salesdesk.boundary.storage.s3_blob_store import S3BlobStore

__all__ = ["BlobStore", "S3BlobStore"]
