"""Data models for the retrieval component."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ChunkRecord(BaseModel):
    """A text chunk plus its embedding, as produced by the embedding service."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="The chunk text")
    embedding: List[float] = Field(..., description="Embedding vector of the chunk")
    ordinal: int = Field(..., description="Position of the chunk in the request")


class ScoredChunk(BaseModel):
    """A single search hit: the stored record and its similarity to the query."""

    model_config = ConfigDict(frozen=True)

    node_id: str = Field(..., description="Index-assigned node identifier")
    record: ChunkRecord
    score: float = Field(..., description="Cosine similarity to the query")
