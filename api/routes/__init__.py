"""
API route modules.
"""

from api.routes.messages import router as messages_router
from api.routes.health import router as health_router

__all__ = ["messages_router", "health_router"]
