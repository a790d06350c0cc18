"""
Message-related request and response schemas.

These Pydantic models define the API contract and provide
automatic validation and documentation. Field names on the wire are
camelCase (attachmentURL, createdAt, updatedAt).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from core.storage import MessageRecord
from manager.message_service import MessageFields


class MessageCreateRequest(BaseModel):
    """
    Request body for posting a new message.

    Same rule as updates: an omitted or null field is "not provided"
    and the default (empty string) is used.
    """

    title: Optional[str] = Field(
        default=None,
        description="Message title (empty when omitted or null)",
        examples=["Board update"],
    )
    body: Optional[str] = Field(
        default=None,
        description="Message text (empty when omitted or null)",
        examples=["Meeting at noon"],
    )
    attachment_url: Optional[str] = Field(
        default=None,
        alias="attachmentURL",
        description="Reference to external content (not validated)",
        examples=["https://example.com/agenda.pdf"],
    )

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "title": "Board update",
                    "body": "Meeting at noon",
                    "attachmentURL": "https://example.com/agenda.pdf",
                }
            ]
        },
    )

    def to_fields(self) -> MessageFields:
        return MessageFields(
            title=self.title,
            body=self.body,
            attachment_url=self.attachment_url,
        )


class MessageUpdateRequest(BaseModel):
    """
    Partial update body.

    Omitted fields keep their stored values. id, createdAt and updatedAt
    are not accepted from callers and are dropped if sent.
    """

    title: Optional[str] = Field(default=None, description="New title")
    body: Optional[str] = Field(default=None, description="New message text")
    attachment_url: Optional[str] = Field(
        default=None,
        alias="attachmentURL",
        description="New attachment reference",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={"examples": [{"body": "Meeting at 1pm"}]},
    )

    def to_fields(self) -> MessageFields:
        return MessageFields(
            title=self.title,
            body=self.body,
            attachment_url=self.attachment_url,
        )


class MessageResponse(BaseModel):
    """A stored message as returned to clients."""

    id: str = Field(..., description="Server-assigned message identifier")
    title: str = Field(..., description="Message title")
    body: str = Field(..., description="Message text")
    attachment_url: str = Field(..., alias="attachmentURL")
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: Optional[datetime] = Field(
        default=None,
        alias="updatedAt",
        description="Last update timestamp, null until the first update",
    )

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "3f0f1c52-8a5e-4a4b-9a57-0b1d7f1b6f8e",
                    "title": "Board update",
                    "body": "Meeting at 1pm",
                    "attachmentURL": "",
                    "createdAt": "2024-01-15T10:00:00Z",
                    "updatedAt": "2024-01-15T10:02:30Z",
                }
            ]
        }
    )

    @classmethod
    def from_record(cls, record: MessageRecord) -> "MessageResponse":
        return cls(
            id=record.id,
            title=record.title,
            body=record.body,
            attachment_url=record.attachment_url,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
