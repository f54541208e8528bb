from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, String, Text, Boolean, DateTime
from character_chat.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AiCharacter(Base):
    """
    A persona definition. A null user_id marks a system/global character.
    """
    __tablename__ = "ai_characters"

    id = Column(String(36), primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=True, index=True)

    name = Column(String(200), nullable=False)
    slug = Column(String(200), nullable=True)
    short_description = Column(Text, nullable=True)
    full_description = Column(Text, nullable=True)

    system_prompt = Column(Text, nullable=True)
    speaking_style = Column(String(200), nullable=True)
    domain = Column(String(200), nullable=True)

    avatar_url = Column(String(500), nullable=True)
    is_system = Column(Boolean, nullable=False, default=False)
    is_public = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    def __repr__(self):
        return f"<AiCharacter(id={self.id}, name='{self.name}', user_id='{self.user_id}', public={self.is_public})>"
