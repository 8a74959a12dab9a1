"""Extraction Engine Component

Composes the fixed character-extraction instruction with retrieved context and
sends a single grounded completion request to the configured LLM.

Key Classes:
- CharacterExtractionEngine: Prompt building and the LLM call
- ExtractionParams: Per-request top_k / temperature / top_p
- create_generation_model: LiteLLM factory honouring the decoding parameters
"""

from .extraction_engine import (
    DEFAULT_EXTRACTION_INSTRUCTION,
    CharacterExtractionEngine,
)
from .llm_factory import create_generation_model
from .logging_handler import LLMDebugHandler
from .models import ExtractionParams

__all__ = [
    "DEFAULT_EXTRACTION_INSTRUCTION",
    "CharacterExtractionEngine",
    "ExtractionParams",
    "LLMDebugHandler",
    "create_generation_model",
]
