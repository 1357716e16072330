"""
Domain exception to HTTP error mapping.

Dependencies: fastapi, salesdesk.core.exceptions
System role: Consistent status codes across routers
"""

from fastapi import HTTPException, status

from salesdesk.core.exceptions import (
    DispatchError,
    DocumentNotFoundError,
    GenerationError,
    ModelOutputError,
    PermissionDeniedError,
    SalesDeskException,
    StageConflictError,
    ValidationError,
)

_STATUS_CODES: tuple[tuple[type[SalesDeskException], int], ...] = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (PermissionDeniedError, status.HTTP_403_FORBIDDEN),
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND),
    (StageConflictError, status.HTTP_409_CONFLICT),
    (DispatchError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (GenerationError, status.HTTP_502_BAD_GATEWAY),
    (ModelOutputError, status.HTTP_502_BAD_GATEWAY),
)


def to_http_exception(exc: SalesDeskException) -> HTTPException:
    """
    HTTPException for a domain exception.

    Unmapped exceptions become 500 with the exception message.
    """
    for exc_type, status_code in _STATUS_CODES:
        if isinstance(exc, exc_type):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=exc.message)
