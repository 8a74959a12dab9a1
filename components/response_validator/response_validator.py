"""Promotes untrusted model text to validated CharacterRecords."""

import json
import logging
from typing import Any, List

from pydantic import TypeAdapter, ValidationError
from shared.errors import ParseError

from .models import CharacterRecord

logger = logging.getLogger(__name__)

JSON_PARSE_MESSAGE = (
    "Failed to parse AI response into JSON. Please ensure the AI response is "
    "in correct JSON format."
)
SCHEMA_MESSAGE = (
    "The AI response did not match the expected list of characters with "
    "name, description and personality."
)

_CHARACTER_LIST = TypeAdapter(List[CharacterRecord])


def _describe_errors(error: ValidationError, limit: int = 5) -> str:
    problems = []
    for item in error.errors()[:limit]:
        location = ".".join(str(part) for part in item["loc"])
        problems.append(f"{location}: {item['msg']}")
    remaining = error.error_count() - limit
    if remaining > 0:
        problems.append(f"... and {remaining} more")
    return "; ".join(problems)


class CharacterResponseValidator:
    """Strict JSON + schema check for the extraction model's raw output.

    Malformed output is reported, never repaired: no code-fence stripping,
    no trimming, no type coercion.
    """

    def parse_json(self, raw: str) -> Any:
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"AI response is not valid JSON: {e}")
            raise ParseError(JSON_PARSE_MESSAGE, detail=str(e)) from e

    def validate(self, raw: str) -> List[CharacterRecord]:
        """
        Parse and validate the raw model output.

        Args:
            raw: The model's text response.

        Returns:
            The characters, in the order the model produced them.

        Raises:
            ParseError: If the text is not JSON, not an array, or any element
                is missing a field or has a non-string field.
        """
        parsed = self.parse_json(raw)

        if not isinstance(parsed, list):
            logger.warning(
                f"AI response is JSON but not an array: {type(parsed).__name__}"
            )
            raise ParseError(
                SCHEMA_MESSAGE, detail=f"expected an array, got {type(parsed).__name__}"
            )

        try:
            characters = _CHARACTER_LIST.validate_python(parsed)
        except ValidationError as e:
            detail = _describe_errors(e)
            logger.warning(f"AI response failed schema validation: {detail}")
            raise ParseError(SCHEMA_MESSAGE, detail=detail) from e

        logger.debug(f"Validated {len(characters)} characters")
        return characters


def validate_characters(raw: str) -> List[CharacterRecord]:
    """Module-level shortcut for ``CharacterResponseValidator().validate``."""
    return CharacterResponseValidator().validate(raw)
