from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from character_chat.core.security import Identity, identity_from_token, require_identity
from character_chat.database import get_db
from character_chat.services.characters import CharacterService
from character_chat.services.chat_messages import ChatMessageService
from character_chat.services.chat_sessions import ChatSessionService
from character_chat.services.record_store import SqlAlchemyRecordStore

# auto_error=False so anonymous callers reach endpoints that allow them
bearer_scheme = HTTPBearer(auto_error=False)

def get_optional_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[Identity]:
    """
    Resolves the caller from the bearer token, or None when no token is sent.

    A token that is present but invalid raises UnauthenticatedError rather
    than silently downgrading the caller to anonymous.
    """
    if credentials is None:
        return None
    return identity_from_token(credentials.credentials)

def get_current_identity(
    identity: Optional[Identity] = Depends(get_optional_identity),
) -> Identity:
    return require_identity(identity)

def get_record_store(db: Session = Depends(get_db)) -> SqlAlchemyRecordStore:
    """Provides a record store bound to the request's database session."""
    return SqlAlchemyRecordStore(db)

def get_character_service(store: SqlAlchemyRecordStore = Depends(get_record_store)) -> CharacterService:
    """
    Provides an instance of CharacterService for FastAPI dependency injection.

    A new instance is created for each request so it always uses that
    request's database session.
    """
    return CharacterService(store=store)

def get_chat_session_service(store: SqlAlchemyRecordStore = Depends(get_record_store)) -> ChatSessionService:
    return ChatSessionService(store=store)

def get_chat_message_service(store: SqlAlchemyRecordStore = Depends(get_record_store)) -> ChatMessageService:
    return ChatMessageService(store=store)
