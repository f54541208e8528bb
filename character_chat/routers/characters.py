import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from character_chat.core.dependencies import get_character_service, get_optional_identity
from character_chat.core.security import Identity
from character_chat.schemas.character import (
    CharacterCreateSchema,
    CharacterUpdateSchema,
    CharacterResponseSchema,
    CharacterListResponseSchema,
)
from character_chat.services.characters import CharacterService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/characters", tags=["characters"])


@router.post(
    "/",
    response_model=CharacterResponseSchema,
    status_code=status.HTTP_201_CREATED,
    summary="Create a character"
)
def create_new_character(
    character_data: CharacterCreateSchema,
    identity: Optional[Identity] = Depends(get_optional_identity),
    char_service: CharacterService = Depends(get_character_service)
):
    """
    Create a new character owned by the caller.
    - **is_public**: defaults to false.
    - The character is never a system character.
    """
    return char_service.create_character(identity, character_data)

@router.patch(
    "/{character_id}",
    response_model=CharacterResponseSchema,
    summary="Update a character"
)
def update_existing_character(
    character_id: str,
    character_update_data: CharacterUpdateSchema,
    identity: Optional[Identity] = Depends(get_optional_identity),
    char_service: CharacterService = Depends(get_character_service)
):
    """
    Update a character you own.
    Only fields provided in the request body will be updated.
    """
    return char_service.update_character(identity, character_id, character_update_data)

@router.get(
    "/",
    response_model=CharacterListResponseSchema,
    summary="List visible characters"
)
def read_all_characters(
    include_private: bool = False,
    identity: Optional[Identity] = Depends(get_optional_identity),
    char_service: CharacterService = Depends(get_character_service)
):
    """
    List public and system characters, plus your own private ones when
    `include_private` is set and you are signed in.
    """
    characters = char_service.list_characters(identity, include_private=include_private)
    return CharacterListResponseSchema(items=characters, total=len(characters))
