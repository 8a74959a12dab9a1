"""Test fixtures and configuration."""

import logging
import sys
from pathlib import Path
from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest
from llama_index.core.base.llms.types import CompletionResponse
from llama_index.core.embeddings import BaseEmbedding
from llama_index.core.llms import LLM
from pydantic import Field
from shared.config import (
    Config,
    EmbeddingModelConfig,
    ExtractionConfig,
    IndexingConfig,
    ServerConfig,
)

ALICE_JSON = '[{"name":"Alice","description":"A tea lover","personality":"calm"}]'


# --- This function enables logging visibility during tests ---
def pytest_configure(config):
    """Configure logging to be visible for all tests."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stdout,
    )


# -----------------------------------------------------------


class KeywordEmbedding(BaseEmbedding):
    """
    Deterministic embedding for tests.

    Each keyword owns one axis; a text's vector counts keyword hits. The query
    vector is fixed so tests decide which chunks should rank first.
    """

    keywords: List[str] = Field(default_factory=lambda: ["alice", "bob"])
    query_vector: List[float] = Field(default_factory=lambda: [1.0, 0.0])

    def _get_query_embedding(self, query: str) -> List[float]:
        return list(self.query_vector)

    async def _aget_query_embedding(self, query: str) -> List[float]:
        return self._get_query_embedding(query)

    def _get_text_embedding(self, text: str) -> List[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in self.keywords]


@pytest.fixture
def test_config() -> Config:
    """Create a test configuration."""
    return Config(
        server=ServerConfig(host="127.0.0.1", port=8000),
        indexing=IndexingConfig(chunk_size=64, chunk_overlap=8),
        extraction=ExtractionConfig(top_k=2, temperature=0.1, top_p=1.0),
    )


@pytest.fixture
def test_embedding_config() -> EmbeddingModelConfig:
    """Create a test embedding configuration."""
    return EmbeddingModelConfig(
        provider="sentence_transformers", model_name="all-MiniLM-L6-v2"
    )


@pytest.fixture
def keyword_embedding() -> KeywordEmbedding:
    return KeywordEmbedding()


@pytest.fixture
def mock_llm() -> MagicMock:
    """An LLM whose completion is the Alice character list."""
    mock = MagicMock(spec=LLM)
    mock.acomplete = AsyncMock(return_value=CompletionResponse(text=ALICE_JSON))
    return mock


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """A config folder holding app.toml and prompts.toml."""
    (tmp_path / "app.toml").write_text(
        """
[server]
host = "0.0.0.0"
port = 9000

[indexing]
chunk_size = 512
chunk_overlap = 32

[extraction]
top_k = 3
temperature = 0.2
top_p = 0.9

[embedding_model]
provider = "sentence_transformers"
model_name = "all-MiniLM-L6-v2"

[generation_model]
model_name = "gpt-4"
max_retries = 2

[generation_model.parameters]
max_tokens = 512
"""
    )
    (tmp_path / "prompts.toml").write_text(
        """
[character_extraction]
instruction = "List every character as JSON."
"""
    )
    return tmp_path
