"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .sales_ai import router as sales_ai_router
from .support_ai import router as support_ai_router

__all__ = [
    "documents_router",
    "health_router",
    "sales_ai_router",
    "support_ai_router",
]
