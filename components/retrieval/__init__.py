"""Retrieval component.

Builds a request-scoped similarity index from pre-computed chunk embeddings and
retrieves the chunks most relevant to a query.

Key Classes:
- ChunkRecord: A chunk's text, embedding and ordinal
- SimilarityIndex: Flat cosine-similarity index with deterministic top-k
- ChunkRetriever: LlamaIndex retriever that embeds the query and searches the index
"""

from .models import ChunkRecord, ScoredChunk
from .retriever import ChunkRetriever
from .similarity_index import SimilarityIndex

__all__ = [
    "ChunkRecord",
    "ScoredChunk",
    "ChunkRetriever",
    "SimilarityIndex",
]
