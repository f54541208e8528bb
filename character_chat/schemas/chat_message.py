import enum
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

class SenderRole(str, enum.Enum):
    user = "user"
    character = "character"
    system = "system"

class ChatMessageCreateSchema(BaseModel):
    sender_role: SenderRole = Field(..., example="user")
    content: str = Field(..., min_length=1, example="Hi! How do I stay focused?")
    metadata: Optional[Dict[str, Any]] = Field(
        None,
        description="Optional structured payload, stored serialized as JSON text.",
        example={"client": "web"}
    )

class ChatMessageResponseSchema(BaseModel):
    id: str
    session_id: str
    seq: int
    user_id: Optional[str] = None
    sender_role: SenderRole
    content: str
    metadata_json: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True

class ChatMessageListResponseSchema(BaseModel):
    items: List[ChatMessageResponseSchema]
    total: int
