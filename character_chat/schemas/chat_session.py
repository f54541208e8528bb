from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

class ChatSessionCreateSchema(BaseModel):
    character_id: str = Field(..., min_length=1, example="5d3bfc49-6472-4c9a-966f-21afe51a8697")
    title: Optional[str] = Field(None, max_length=200, example="Career advice with Stoic Mentor")

class ChatSessionUpdateSchema(BaseModel):
    """Partial update; title and context_summary may be sent as null to clear them."""
    title: Optional[str] = Field(None, max_length=200)
    context_summary: Optional[str] = None
    is_pinned: Optional[bool] = None
    is_archived: Optional[bool] = None

    @field_validator('is_pinned', 'is_archived')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null; omit it to leave it unchanged.")
        return v

class ChatSessionResponseSchema(BaseModel):
    id: str
    character_id: str
    user_id: str
    title: Optional[str] = None
    context_summary: Optional[str] = None
    is_pinned: bool
    is_archived: bool
    message_count: int
    created_at: datetime
    updated_at: datetime
    last_message_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ChatSessionListResponseSchema(BaseModel):
    items: List[ChatSessionResponseSchema]
    total: int
