"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.message import (
    MessageCreateRequest,
    MessageResponse,
    MessageUpdateRequest,
)

__all__ = [
    "MessageCreateRequest",
    "MessageResponse",
    "MessageUpdateRequest",
]
