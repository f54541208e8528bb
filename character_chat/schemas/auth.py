from typing import Optional

from pydantic import BaseModel

class IdentityResponse(BaseModel):
    user_id: str
    email: Optional[str] = None
