import logging
from typing import List, Optional

from sqlalchemy import and_

from character_chat.core.exceptions import ForbiddenError, NotFoundError, NotFoundOrForbiddenError
from character_chat.core.security import Identity, require_identity
from character_chat.models.characters import AiCharacter, utcnow
from character_chat.models.chat_session import CharacterChatSession
from character_chat.schemas.chat_session import (
    ChatSessionCreateSchema,
    ChatSessionUpdateSchema,
    ChatSessionResponseSchema,
)
from character_chat.services.record_store import RecordStore

logger = logging.getLogger(__name__)

class ChatSessionService:
    """
    Opens, updates and lists a user's chat sessions with characters.

    Access to a session is decided only by its owner. Once a session exists,
    later visibility changes on its character do not revoke it.
    """
    def __init__(self, store: RecordStore):
        self.store = store

    def get_owned_session(self, user: Identity, session_id: str) -> CharacterChatSession:
        """
        Loads a session owned by the user.

        Raises:
            NotFoundOrForbiddenError: If the session is absent or owned by someone else
        """
        matches = self.store.select_where(CharacterChatSession, CharacterChatSession.id == session_id)
        session = matches[0] if matches else None
        if session is None or session.user_id != user.user_id:
            logger.warning(f"Session {session_id} not found or not owned by user {user.user_id}")
            raise NotFoundOrForbiddenError("Session")
        return session

    def create_session(
        self, identity: Optional[Identity], session_data: ChatSessionCreateSchema
    ) -> ChatSessionResponseSchema:
        """
        Opens a session between the caller and a character.

        Raises:
            UnauthenticatedError: If there is no identity
            NotFoundError: If the character does not exist
            ForbiddenError: If the character is private and not the caller's
        """
        user = require_identity(identity)
        character_id = session_data.character_id
        logger.info(f"User {user.user_id} opening chat session with character {character_id}")

        matches = self.store.select_where(AiCharacter, AiCharacter.id == character_id)
        if not matches:
            logger.warning(f"Character {character_id} not found for session creation.")
            raise NotFoundError("Character not found.")

        character = matches[0]
        if not character.is_public and not character.is_system and character.user_id != user.user_id:
            logger.warning(f"User {user.user_id} denied access to private character {character_id}")
            raise ForbiddenError("You do not have access to this character.")

        now = utcnow()
        with self.store.unit_of_work():
            session = self.store.insert(
                CharacterChatSession,
                {
                    "character_id": character_id,
                    "user_id": user.user_id,
                    "title": session_data.title,
                    "context_summary": None,
                    "is_pinned": False,
                    "is_archived": False,
                    "message_count": 0,
                    "created_at": now,
                    "updated_at": now,
                    "last_message_at": None,
                },
            )
        self.store.refresh(session)

        logger.info(f"Created chat session {session.id} for user {user.user_id}")
        return ChatSessionResponseSchema.model_validate(session, from_attributes=True)

    def update_session(
        self,
        identity: Optional[Identity],
        session_id: str,
        session_update_data: ChatSessionUpdateSchema,
    ) -> ChatSessionResponseSchema:
        """Partial update of title, context summary and the pinned/archived flags."""
        user = require_identity(identity)
        session = self.get_owned_session(user, session_id)

        update_data = session_update_data.model_dump(exclude_unset=True)
        update_data["updated_at"] = utcnow()
        logger.debug(f"Update data for session {session_id}: {sorted(update_data)}")

        with self.store.unit_of_work():
            self.store.update_where(
                CharacterChatSession,
                and_(CharacterChatSession.id == session_id, CharacterChatSession.user_id == user.user_id),
                update_data,
            )
        self.store.refresh(session)

        logger.info(f"Updated chat session {session_id}")
        return ChatSessionResponseSchema.model_validate(session, from_attributes=True)

    def list_my_sessions(
        self, identity: Optional[Identity], include_archived: bool = False
    ) -> List[ChatSessionResponseSchema]:
        user = require_identity(identity)

        predicate = CharacterChatSession.user_id == user.user_id
        if not include_archived:
            predicate = and_(predicate, CharacterChatSession.is_archived.is_(False))

        sessions = self.store.select_where(
            CharacterChatSession,
            predicate,
            order_by=(CharacterChatSession.created_at, CharacterChatSession.id),
        )
        logger.info(f"Retrieved {len(sessions)} sessions for user {user.user_id} (include_archived={include_archived})")
        return [ChatSessionResponseSchema.model_validate(s, from_attributes=True) for s in sessions]
