"""
Exception hierarchy for the salesdesk application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SalesDeskException(Exception):
    """Base exception for all salesdesk application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(SalesDeskException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class DocumentNotFoundError(SalesDeskException):
    """Raised when an uploaded document row does not exist."""

    def __init__(self, document_id: Any, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = str(document_id)
        super().__init__(f"Document {document_id} not found", details)


class PermissionDeniedError(SalesDeskException):
    """Raised when a user acts on a document they do not own."""


class StageConflictError(SalesDeskException):
    """Raised when a pipeline stage is re-entered while the document is in flight."""

    def __init__(self, document_id: Any, status: str, stage: str) -> None:
        """
        Initialize stage conflict error.

        Args:
            document_id: ID of the document
            status: Current persisted status
            stage: Stage that was refused
        """
        super().__init__(
            f"Document {document_id} is {status}; refusing to start {stage}",
            {"document_id": str(document_id), "status": status, "stage": stage},
        )


class DocumentProcessingError(SalesDeskException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        document_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            document_id: ID of the document that failed
            details: Additional context
        """
        details = details or {}
        if document_id:
            details["document_id"] = document_id
        super().__init__(message, details)


class GenerationError(DocumentProcessingError):
    """Raised when the generative model call itself fails (network, quota, 5xx)."""


class ModelOutputError(DocumentProcessingError):
    """Raised when generated output is not the JSON shape that was asked for."""


class EmbeddingError(DocumentProcessingError):
    """Raised when embedding generation fails or returns a malformed vector."""


class BlobStoreError(SalesDeskException):
    """Raised when blob store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize blob store error.

        Args:
            message: Error message
            operation: Operation that failed (get, put, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class BlobNotFoundError(BlobStoreError):
    """Raised when the requested object does not exist."""

    def __init__(self, bucket: str, path: str) -> None:
        super().__init__(
            f"Object not found: {bucket}/{path}",
            operation="get",
            details={"bucket": bucket, "path": path},
        )


class DispatchError(SalesDeskException):
    """Raised when a stage message cannot be handed to the next stage."""

    def __init__(self, message: str, stage: str | None = None) -> None:
        super().__init__(message, {"stage": stage} if stage else None)


class RetrievalError(SalesDeskException):
    """Raised when similarity search cannot be completed."""
