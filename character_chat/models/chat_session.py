# character_chat/models/chat_session.py
import uuid
from sqlalchemy import Column, Integer, String, TEXT, Boolean, DateTime, ForeignKey, Index
from character_chat.database import Base
from character_chat.models.characters import utcnow

class CharacterChatSession(Base):
    """
    SQLAlchemy model for a conversation thread between one user and one character.
    """
    __tablename__ = "character_chat_sessions"

    id: str = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    character_id: str = Column(String(36), ForeignKey("ai_characters.id"), nullable=False, index=True)
    user_id: str = Column(String, nullable=False, index=True)

    title: str = Column(String(200), nullable=True)
    context_summary: str = Column(TEXT, nullable=True) # Older turns summarized outside the message log

    is_pinned: bool = Column(Boolean, nullable=False, default=False)
    is_archived: bool = Column(Boolean, nullable=False, default=False)
    message_count: int = Column(Integer, nullable=False, default=0) # Last assigned message seq

    # Timestamps
    created_at: DateTime = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at: DateTime = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    last_message_at: DateTime = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('idx_chat_sessions_user_id_archived', user_id, is_archived),
    )

    def __repr__(self):
        return f"<CharacterChatSession(id={self.id}, user_id='{self.user_id}', character_id='{self.character_id}')>"
