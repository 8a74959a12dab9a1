"""Response validator component.

The single point where the LLM's free text becomes typed CharacterRecords.
"""

from .models import CharacterRecord
from .response_validator import (
    JSON_PARSE_MESSAGE,
    SCHEMA_MESSAGE,
    CharacterResponseValidator,
    validate_characters,
)

__all__ = [
    "CharacterRecord",
    "CharacterResponseValidator",
    "JSON_PARSE_MESSAGE",
    "SCHEMA_MESSAGE",
    "validate_characters",
]
