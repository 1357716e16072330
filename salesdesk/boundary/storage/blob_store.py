"""
Blob store protocol.

Dependencies: typing
System role: Storage seam used by the pipeline and document service
"""

from typing import Protocol, Sequence


class BlobStore(Protocol):
    """Object storage keyed by bucket and path."""

    async def get(self, bucket: str, path: str) -> bytes:
        """Return object bytes. Raises BlobNotFoundError when missing, BlobStoreError otherwise."""
        ...

    async def put(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store bytes and return the stored path."""
        ...

    async def delete(self, bucket: str, paths: Sequence[str]) -> None:
        """Remove objects; missing paths are not an error."""
        ...
