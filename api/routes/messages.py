"""
Message board endpoints.

Provides CRUD and search operations for messages:
- POST /messages - Post a new message
- GET /messages - List all messages
- GET /messages/search?query=... - Case-insensitive search
- GET /messages/{message_id} - Get one message
- PUT /messages/{message_id} - Partially update a message
- DELETE /messages/{message_id} - Delete a message
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from api.dependencies import get_message_service
from api.schemas.message import (
    MessageCreateRequest,
    MessageResponse,
    MessageUpdateRequest,
)
from core.logging import get_logger
from manager.errors import InvalidInputError
from manager.message_service import MessageService


logger = get_logger(__name__)
router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=MessageResponse)
async def create_message(
    request: MessageCreateRequest = Body(default_factory=MessageCreateRequest),
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """
    Post a new message.

    The server assigns the id and createdAt; updatedAt starts out null.
    """
    message = await service.create(request.to_fields())
    return MessageResponse.from_record(message)


@router.get("", response_model=list[MessageResponse])
async def list_messages(
    service: MessageService = Depends(get_message_service),
) -> list[MessageResponse]:
    """List every message in ascending id order."""
    messages = await service.list()
    return [MessageResponse.from_record(message) for message in messages]


# Registered before /{message_id} so "search" is never taken for an id
@router.get("/search", response_model=list[MessageResponse])
async def search_messages(
    query: Optional[str] = Query(
        default=None,
        description="Text to look for in titles and bodies (case-insensitive)",
    ),
    service: MessageService = Depends(get_message_service),
) -> list[MessageResponse]:
    """
    Search messages by title or body.

    Returns matches in ascending id order. An empty or missing query
    is rejected with 400.
    """
    try:
        messages = await service.search(query)
    except InvalidInputError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return [MessageResponse.from_record(message) for message in messages]


@router.get("/{message_id}", response_model=MessageResponse)
async def get_message(
    message_id: str,
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """Get a single message by id."""
    message = await service.get(message_id)

    if message is None:
        raise HTTPException(
            status_code=404,
            detail=f"the message with id={message_id} not found",
        )

    return MessageResponse.from_record(message)


@router.put("/{message_id}", response_model=MessageResponse)
async def update_message(
    message_id: str,
    request: MessageUpdateRequest = Body(default_factory=MessageUpdateRequest),
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """
    Partially update a message.

    Fields left out of the body keep their stored values. updatedAt is
    always set by the server.
    """
    logger.debug(
        "Updating message",
        message_id=message_id,
        fields=sorted(request.model_fields_set),
    )

    message = await service.update(message_id, request.to_fields())

    if message is None:
        raise HTTPException(
            status_code=400,
            detail=f"couldn't update a message with id={message_id}. message not found",
        )

    return MessageResponse.from_record(message)


@router.delete("/{message_id}", response_model=MessageResponse)
async def delete_message(
    message_id: str,
    service: MessageService = Depends(get_message_service),
) -> MessageResponse:
    """Delete a message and return what was removed."""
    message = await service.delete(message_id)

    if message is None:
        raise HTTPException(
            status_code=400,
            detail=f"couldn't delete a message with id={message_id}. message not found",
        )

    return MessageResponse.from_record(message)
