"""Data models for validated extraction output."""

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class CharacterRecord(BaseModel):
    """A character extracted from the document."""

    # Strict: the model's strings are taken as-is, nothing is coerced.
    # Extra keys the model emits are kept and returned with the record.
    model_config = ConfigDict(strict=True, frozen=True, extra="allow")

    name: StrictStr = Field(..., min_length=1, description="Character name")
    description: StrictStr = Field(
        ..., min_length=1, description="Brief description of the character"
    )
    personality: StrictStr = Field(
        ..., min_length=1, description="Personality traits of the character"
    )
