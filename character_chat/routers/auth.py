from fastapi import APIRouter, Depends

from character_chat.core.dependencies import get_current_identity
from character_chat.core.security import Identity
from character_chat.schemas.auth import IdentityResponse

router = APIRouter(prefix="/auth", tags=["auth"])

@router.get("/me", response_model=IdentityResponse)
async def get_current_user(identity: Identity = Depends(get_current_identity)):
    """
    Get the identity carried by the bearer token.
    """
    return IdentityResponse(user_id=identity.user_id, email=identity.email)
