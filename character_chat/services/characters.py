import logging
from typing import List, Optional

from sqlalchemy import and_, or_

from character_chat.core.exceptions import NotFoundOrForbiddenError
from character_chat.core.security import Identity, require_identity
from character_chat.models.characters import AiCharacter, utcnow
from character_chat.schemas.character import (
    CharacterCreateSchema,
    CharacterUpdateSchema,
    CharacterResponseSchema,
)
from character_chat.services.record_store import RecordStore

logger = logging.getLogger(__name__)

__all__ = ["CharacterService"]

class CharacterService:
    def __init__(self, store: RecordStore):
        """
        Initializes the CharacterService with a record store.

        Args:
            store (RecordStore): Persistence port scoped to the current request.
        """
        self.store = store
        logger.debug(f"CharacterService initialized with store: {store}")

    def create_character(
        self, identity: Optional[Identity], character_data: CharacterCreateSchema
    ) -> CharacterResponseSchema:
        """
        Creates a new character owned by the caller.

        The character is never a system character, and stays private unless
        the caller explicitly asks for it to be public.

        Args:
            identity: The acting user
            character_data: The character data to create

        Returns:
            CharacterResponseSchema: The created character

        Raises:
            UnauthenticatedError: If there is no identity
        """
        user = require_identity(identity)
        logger.info(f"User {user.user_id} creating character: {character_data.name}")

        now = utcnow()
        record = character_data.model_dump(exclude={"is_public", "avatar_url"})
        record.update(
            user_id=user.user_id,
            avatar_url=str(character_data.avatar_url) if character_data.avatar_url else None,
            is_public=bool(character_data.is_public),
            is_system=False,
            created_at=now,
            updated_at=now,
        )

        with self.store.unit_of_work():
            db_character = self.store.insert(AiCharacter, record)
        self.store.refresh(db_character)

        logger.info(f"Successfully created character '{db_character.name}' with ID: {db_character.id}")
        return CharacterResponseSchema.model_validate(db_character, from_attributes=True)

    def update_character(
        self,
        identity: Optional[Identity],
        character_id: str,
        character_update_data: CharacterUpdateSchema,
    ) -> CharacterResponseSchema:
        """
        Applies a partial update to a character owned by the caller.

        Only fields present in the request are written; updated_at is always
        refreshed. A missing character and one owned by someone else raise
        the same error.

        Raises:
            UnauthenticatedError: If there is no identity
            NotFoundOrForbiddenError: If the character is absent or not the caller's
        """
        user = require_identity(identity)
        logger.info(f"User {user.user_id} updating character {character_id}")

        owned = and_(AiCharacter.id == character_id, AiCharacter.user_id == user.user_id)
        matches = self.store.select_where(AiCharacter, AiCharacter.id == character_id)
        db_character = matches[0] if matches else None
        if db_character is None or db_character.user_id != user.user_id:
            logger.warning(f"Character {character_id} not found or not owned by user {user.user_id}")
            raise NotFoundOrForbiddenError("Character")

        update_data = character_update_data.model_dump(exclude_unset=True)
        if update_data.get("avatar_url") is not None:
            update_data["avatar_url"] = str(update_data["avatar_url"])
        update_data["updated_at"] = utcnow()
        logger.debug(f"Update data for character {character_id}: {sorted(update_data)}")

        with self.store.unit_of_work():
            self.store.update_where(AiCharacter, owned, update_data)
        self.store.refresh(db_character)

        logger.info(f"Successfully updated character '{db_character.name}' (ID: {character_id}).")
        return CharacterResponseSchema.model_validate(db_character, from_attributes=True)

    def list_characters(
        self, identity: Optional[Identity], include_private: bool = False
    ) -> List[CharacterResponseSchema]:
        """
        Lists the characters visible to the caller.

        Public and system characters are always included. With
        include_private and a signed-in caller, the caller's own private
        characters are added. No identity is required.
        """
        visible = or_(AiCharacter.is_public.is_(True), AiCharacter.is_system.is_(True))
        if include_private and identity is not None:
            visible = or_(visible, AiCharacter.user_id == identity.user_id)

        db_characters = self.store.select_where(
            AiCharacter, visible, order_by=(AiCharacter.created_at, AiCharacter.id)
        )
        logger.info(
            f"Retrieved {len(db_characters)} characters "
            f"(include_private={include_private}, user={identity.user_id if identity else None})."
        )
        return [
            CharacterResponseSchema.model_validate(char, from_attributes=True) for char in db_characters
        ]
