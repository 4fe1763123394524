"""API route modules."""

from invoice_analytics.api.routes.analytics import router as analytics_router
from invoice_analytics.api.routes.chat import router as chat_router
from invoice_analytics.api.routes.health import router as health_router
from invoice_analytics.api.routes.invoices import router as invoices_router

__all__ = [
    "health_router",
    "analytics_router",
    "invoices_router",
    "chat_router",
]
