"""
FastAPI dependencies for dependency injection.

Provides the per-application service instances (created during the app
lifespan and kept on app.state) to route handlers.
"""

from fastapi import Request

from core.storage import BaseRecordStore
from manager.message_service import MessageService


async def get_message_service(request: Request) -> MessageService:
    """
    Dependency that provides the message service.

    Usage:
        @router.get("/messages")
        async def list_messages(
            service: MessageService = Depends(get_message_service)
        ):
            ...
    """
    service = getattr(request.app.state, "message_service", None)
    if service is None:
        raise RuntimeError("Message service not initialized")
    return service


async def get_record_store(request: Request) -> BaseRecordStore:
    """
    Dependency that provides the open record store.
    """
    store = getattr(request.app.state, "record_store", None)
    if store is None:
        raise RuntimeError("Record store not initialized")
    return store
