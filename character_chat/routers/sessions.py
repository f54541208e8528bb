import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from character_chat.core.dependencies import (
    get_chat_message_service,
    get_chat_session_service,
    get_optional_identity,
)
from character_chat.core.security import Identity
from character_chat.schemas.chat_message import (
    ChatMessageCreateSchema,
    ChatMessageListResponseSchema,
    ChatMessageResponseSchema,
)
from character_chat.schemas.chat_session import (
    ChatSessionCreateSchema,
    ChatSessionListResponseSchema,
    ChatSessionResponseSchema,
    ChatSessionUpdateSchema,
)
from character_chat.services.chat_messages import ChatMessageService
from character_chat.services.chat_sessions import ChatSessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

@router.post("/", response_model=ChatSessionResponseSchema, status_code=status.HTTP_201_CREATED)
def create_chat_session(
    session_data: ChatSessionCreateSchema,
    identity: Optional[Identity] = Depends(get_optional_identity),
    session_service: ChatSessionService = Depends(get_chat_session_service),
):
    """Open a chat session with a public, system or own character."""
    return session_service.create_session(identity, session_data)

@router.patch("/{session_id}", response_model=ChatSessionResponseSchema)
def update_chat_session(
    session_id: str,
    session_update_data: ChatSessionUpdateSchema,
    identity: Optional[Identity] = Depends(get_optional_identity),
    session_service: ChatSessionService = Depends(get_chat_session_service),
):
    return session_service.update_session(identity, session_id, session_update_data)

@router.get("/", response_model=ChatSessionListResponseSchema)
def list_my_chat_sessions(
    include_archived: bool = False,
    identity: Optional[Identity] = Depends(get_optional_identity),
    session_service: ChatSessionService = Depends(get_chat_session_service),
):
    sessions = session_service.list_my_sessions(identity, include_archived=include_archived)
    return ChatSessionListResponseSchema(items=sessions, total=len(sessions))

@router.post(
    "/{session_id}/messages",
    response_model=ChatMessageResponseSchema,
    status_code=status.HTTP_201_CREATED,
)
def create_chat_message(
    session_id: str,
    message_data: ChatMessageCreateSchema,
    identity: Optional[Identity] = Depends(get_optional_identity),
    message_service: ChatMessageService = Depends(get_chat_message_service),
):
    """
    Append a message to one of your sessions.
    - **sender_role**: one of `user`, `character`, `system`.
    - **content**: must not be empty.
    """
    return message_service.create_message(identity, session_id, message_data)

@router.get("/{session_id}/messages", response_model=ChatMessageListResponseSchema)
def list_chat_messages(
    session_id: str,
    identity: Optional[Identity] = Depends(get_optional_identity),
    message_service: ChatMessageService = Depends(get_chat_message_service),
):
    """Return the session's message history, oldest first."""
    messages = message_service.list_messages(identity, session_id)
    return ChatMessageListResponseSchema(items=messages, total=len(messages))
