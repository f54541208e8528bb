from pydantic import BaseModel, Field, HttpUrl, field_validator
from typing import Optional, List
from datetime import datetime

class CharacterBaseSchema(BaseModel):
    slug: Optional[str] = Field(
        default=None,
        min_length=1,
        max_length=200,
        example="stoic-mentor",
        description="Optional URL-friendly identifier."
    )
    short_description: Optional[str] = Field(
        default=None,
        example="A calm mentor who answers with Stoic wisdom.",
        description="One-line summary shown in character lists."
    )
    full_description: Optional[str] = Field(
        default=None,
        description="Longer description for the character page."
    )
    system_prompt: Optional[str] = Field(
        default=None,
        example="You are a Stoic mentor. Answer briefly and kindly.",
        description="Instructions defining the persona for the model."
    )
    speaking_style: Optional[str] = Field(
        default=None,
        max_length=200,
        example="formal",
        description="How the character talks, e.g. 'formal', 'playful', 'sarcastic'."
    )
    domain: Optional[str] = Field(
        default=None,
        max_length=200,
        example="productivity",
        description="Topic area such as 'productivity' or 'storytelling'."
    )
    avatar_url: Optional[HttpUrl] = Field(
        default=None,
        example="https://example.com/avatars/mentor.png",
        description="A valid URL pointing to an image of the character."
    )

    @field_validator('avatar_url', mode='before')
    @classmethod
    def empty_url_to_none(cls, v):
        """Convert empty string to None for URL fields."""
        if v == "":
            return None
        return v

class CharacterCreateSchema(CharacterBaseSchema):
    name: str = Field(..., min_length=1, max_length=200, example="Stoic Mentor")
    is_public: Optional[bool] = Field(
        default=None,
        description="Visible to other users. Defaults to private."
    )

class CharacterUpdateSchema(CharacterBaseSchema):
    """
    Partial update. Only fields present in the request body are applied;
    optional text fields may be sent as null to clear them.
    """
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    is_public: Optional[bool] = None

    @field_validator('name', 'is_public')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null; omit it to leave it unchanged.")
        return v

class CharacterResponseSchema(BaseModel):
    id: str
    user_id: Optional[str] = None
    name: str
    slug: Optional[str] = None
    short_description: Optional[str] = None
    full_description: Optional[str] = None
    system_prompt: Optional[str] = None
    speaking_style: Optional[str] = None
    domain: Optional[str] = None
    avatar_url: Optional[str] = None
    is_system: bool
    is_public: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class CharacterListResponseSchema(BaseModel):
    items: List[CharacterResponseSchema]
    total: int
