import json
import logging
from typing import List, Optional

from sqlalchemy import and_

from character_chat.core.exceptions import ConstraintViolationError
from character_chat.core.security import Identity, require_identity
from character_chat.models.characters import utcnow
from character_chat.models.chat_message import CharacterChatMessage
from character_chat.models.chat_session import CharacterChatSession
from character_chat.schemas.chat_message import (
    ChatMessageCreateSchema,
    ChatMessageResponseSchema,
    SenderRole,
)
from character_chat.services.chat_sessions import ChatSessionService
from character_chat.services.record_store import RecordStore

logger = logging.getLogger(__name__)

class ChatMessageService:
    """
    Appends messages to a session and reads its history back in order.
    """
    def __init__(self, store: RecordStore):
        self.store = store
        self.sessions = ChatSessionService(store)

    def create_message(
        self,
        identity: Optional[Identity],
        session_id: str,
        message_data: ChatMessageCreateSchema,
    ) -> ChatMessageResponseSchema:
        """
        Appends a message to a session owned by the caller.

        The message row and the session's updated_at/last_message_at are
        written in one transaction, both stamped with the message's
        created_at. Each message takes the next seq of its session, so
        messages sharing a timestamp still list in insertion order. Only
        "user" messages record the caller as sender.

        Args:
            identity: The acting user
            session_id: Target session
            message_data: Already validated role, content and optional metadata

        Returns:
            ChatMessageResponseSchema: The stored message

        Raises:
            UnauthenticatedError: If there is no identity
            NotFoundOrForbiddenError: If the session is absent or not the caller's
            ConstraintViolationError: If another message claimed the same seq first
        """
        user = require_identity(identity)
        session = self.sessions.get_owned_session(user, session_id)
        previous_count = session.message_count

        now = utcnow()
        record = {
            "session_id": session_id,
            "seq": previous_count + 1,
            "user_id": user.user_id if message_data.sender_role == SenderRole.user else None,
            "sender_role": message_data.sender_role.value,
            "content": message_data.content,
            "metadata_json": json.dumps(message_data.metadata) if message_data.metadata is not None else None,
            "created_at": now,
        }

        with self.store.unit_of_work():
            message = self.store.insert(CharacterChatMessage, record)
            matched = self.store.update_where(
                CharacterChatSession,
                and_(
                    CharacterChatSession.id == session_id,
                    CharacterChatSession.user_id == user.user_id,
                    CharacterChatSession.message_count == previous_count,
                ),
                {"updated_at": now, "last_message_at": now, "message_count": record["seq"]},
            )
            if matched != 1:
                logger.warning(f"Session {session_id} received a concurrent message; seq {record['seq']} taken")
                raise ConstraintViolationError("Session was modified concurrently, retry the message.")
        self.store.refresh(message)

        logger.info(f"Stored {record['sender_role']} message {message.id} (seq {message.seq}) in session {session_id}")
        return ChatMessageResponseSchema.model_validate(message, from_attributes=True)

    def list_messages(
        self, identity: Optional[Identity], session_id: str
    ) -> List[ChatMessageResponseSchema]:
        """Returns the session's messages, oldest first, ties in insertion order."""
        user = require_identity(identity)
        self.sessions.get_owned_session(user, session_id)

        messages = self.store.select_where(
            CharacterChatMessage,
            CharacterChatMessage.session_id == session_id,
            order_by=(CharacterChatMessage.created_at, CharacterChatMessage.seq),
        )
        logger.debug(f"Retrieved {len(messages)} messages for session {session_id}")
        return [ChatMessageResponseSchema.model_validate(m, from_attributes=True) for m in messages]
