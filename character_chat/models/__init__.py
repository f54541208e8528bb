# character_chat/models/__init__.py

# Import the Base object so every model registers on the same metadata
from character_chat.database import Base

from .characters import AiCharacter
from .chat_session import CharacterChatSession
from .chat_message import CharacterChatMessage

__all__ = ["Base", "AiCharacter", "CharacterChatSession", "CharacterChatMessage"]
