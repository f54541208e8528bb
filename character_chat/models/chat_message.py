# character_chat/models/chat_message.py
import uuid
from sqlalchemy import Column, Index, Integer, String, TEXT, DateTime, CheckConstraint, ForeignKey, UniqueConstraint
from character_chat.database import Base
from character_chat.models.characters import utcnow

class CharacterChatMessage(Base):
    """
    SQLAlchemy model for one turn within a chat session. Rows are never updated.
    """
    __tablename__ = "character_chat_messages"

    id: str = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    session_id: str = Column(String(36), ForeignKey("character_chat_sessions.id"), nullable=False, index=True)
    # Position within the session, 1-based, taken from the session's message_count
    seq: int = Column(Integer, nullable=False)
    user_id: str = Column(String, nullable=True) # Null for character and system messages

    sender_role: str = Column(String(10), nullable=False) # 'user', 'character', 'system'
    content: str = Column(TEXT, nullable=False)
    metadata_json: str = Column(TEXT, nullable=True)

    # Timestamp
    created_at: DateTime = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    __table_args__ = (
        CheckConstraint("sender_role IN ('user', 'character', 'system')", name="chat_message_sender_role_check"),
        UniqueConstraint("session_id", "seq", name="uq_chat_messages_session_id_seq"),
        # History is read per session in creation order, ties broken by insertion order
        Index('idx_chat_messages_session_id_created_at_seq', session_id, created_at, seq),
    )

    def __repr__(self):
        return f"<CharacterChatMessage(id={self.id}, session_id={self.session_id}, seq={self.seq}, role='{self.sender_role}')>"
