"""Wire models for the character extraction service."""

from typing import List, Optional

from components.extraction_engine.models import ExtractionParams
from components.response_validator.models import CharacterRecord
from components.retrieval.models import ChunkRecord
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from shared.config import ExtractionConfig, IndexingConfig


class ChunkPayload(BaseModel):
    """A chunk and its embedding as exchanged with the client."""

    text: str = Field(..., description="The chunk text")
    embedding: List[float] = Field(..., description="Embedding vector of the chunk")


class ExtractionRequest(BaseModel):
    """Request model for character extraction."""

    model_config = ConfigDict(populate_by_name=True)

    chunks: List[ChunkPayload] = Field(
        ...,
        validation_alias=AliasChoices("chunks", "nodesWithEmbedding"),
        description="Chunks with embeddings from the split-and-embed step",
    )
    top_k: Optional[int] = Field(
        default=None, ge=1, alias="topK", description="Number of chunks to retrieve"
    )
    temperature: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, description="LLM sampling temperature"
    )
    top_p: Optional[float] = Field(
        default=None, ge=0.0, le=1.0, alias="topP", description="LLM top_p"
    )

    def to_params(self, defaults: ExtractionConfig) -> ExtractionParams:
        """Fill unset parameters from the configured defaults."""
        return ExtractionParams(
            top_k=self.top_k if self.top_k is not None else defaults.top_k,
            temperature=(
                self.temperature
                if self.temperature is not None
                else defaults.temperature
            ),
            top_p=self.top_p if self.top_p is not None else defaults.top_p,
        )

    def to_records(self) -> List[ChunkRecord]:
        return [
            ChunkRecord(text=chunk.text, embedding=chunk.embedding, ordinal=i)
            for i, chunk in enumerate(self.chunks)
        ]


class ExtractionPayload(BaseModel):
    characters: List[CharacterRecord] = Field(default_factory=list)


class ExtractionResponse(BaseModel):
    """Either a payload of characters or an error message, never both."""

    error: Optional[str] = Field(default=None, description="Soft failure message")
    payload: Optional[ExtractionPayload] = None


class SplitAndEmbedRequest(BaseModel):
    """Request model for splitting and embedding a document."""

    model_config = ConfigDict(populate_by_name=True)

    document: str = Field(..., description="Full plain-text document")
    chunk_size: Optional[int] = Field(
        default=None, alias="chunkSize", description="Chunk size in tokens"
    )
    chunk_overlap: Optional[int] = Field(
        default=None, alias="chunkOverlap", description="Overlap in tokens"
    )

    def resolve_sizes(self, defaults: IndexingConfig) -> tuple[int, int]:
        chunk_size = self.chunk_size if self.chunk_size is not None else defaults.chunk_size
        chunk_overlap = (
            self.chunk_overlap
            if self.chunk_overlap is not None
            else defaults.chunk_overlap
        )
        return chunk_size, chunk_overlap


class SplitAndEmbedPayload(BaseModel):
    chunks: List[ChunkPayload] = Field(default_factory=list)


class SplitAndEmbedResponse(BaseModel):
    error: Optional[str] = Field(default=None, description="Soft failure message")
    payload: Optional[SplitAndEmbedPayload] = None


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str
