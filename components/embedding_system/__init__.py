"""Embedding system component.

Creates LlamaIndex embedding models from configuration. The same provider is
used to embed document chunks and the extraction query, so both live in one
embedding space.
"""

from .custom_embedding import CustomEmbeddingWrapperBase
from .embedding_factory import (
    OpenAIEndpointEmbedding,
    SentenceTransformersEmbedding,
    create_embedding_model,
)

__all__ = [
    "CustomEmbeddingWrapperBase",
    "OpenAIEndpointEmbedding",
    "SentenceTransformersEmbedding",
    "create_embedding_model",
]
