"""In-memory similarity index over the chunk embeddings of a single request."""

import logging
from typing import Dict, List, Sequence

import numpy as np
from llama_index.core.schema import TextNode
from shared.errors import ConfigurationError

from .models import ChunkRecord, ScoredChunk

logger = logging.getLogger(__name__)


class SimilarityIndex:
    """Flat cosine-similarity index built fresh for every extraction request.

    Records are stored in the order given. Each record gets a LlamaIndex
    ``TextNode`` with a generated node id so the retriever can hand nodes to
    the rest of the LlamaIndex machinery. Nothing is persisted; the index is
    dropped together with the request that built it.
    """

    def __init__(
        self,
        node_ids: List[str],
        nodes: Dict[str, TextNode],
        records: List[ChunkRecord],
        matrix: np.ndarray,
    ):
        self._node_ids = node_ids
        self._nodes = nodes
        self._records = records
        self._matrix = matrix
        self._norms = np.linalg.norm(matrix, axis=1)

    @classmethod
    def build(cls, records: Sequence[ChunkRecord]) -> "SimilarityIndex":
        """Build an index from chunk records.

        Args:
            records: Chunk records sharing one embedding dimension.

        Returns:
            A new SimilarityIndex.

        Raises:
            ConfigurationError: If there are no records, a record has no text,
                or the embedding dimensions are empty or inconsistent.
        """
        if not records:
            raise ConfigurationError(
                "No chunks were provided. Split and embed a document before "
                "extracting characters."
            )

        dimension = len(records[0].embedding)
        if dimension == 0:
            raise ConfigurationError("Chunk embeddings must not be empty.")

        for record in records:
            if not record.text:
                raise ConfigurationError(
                    "Every chunk must contain text.",
                    detail=f"chunk {record.ordinal} is empty",
                )
            if len(record.embedding) != dimension:
                raise ConfigurationError(
                    "All chunk embeddings must have the same dimension.",
                    detail=(
                        f"chunk {record.ordinal} has {len(record.embedding)} "
                        f"values, expected {dimension}"
                    ),
                )

        matrix = np.asarray([record.embedding for record in records], dtype=float)
        if not np.all(np.isfinite(matrix)):
            raise ConfigurationError("Chunk embeddings must contain finite numbers.")

        node_ids: List[str] = []
        nodes: Dict[str, TextNode] = {}
        for record in records:
            node = TextNode(
                text=record.text,
                embedding=list(record.embedding),
                metadata={"ordinal": record.ordinal},
                excluded_embed_metadata_keys=["ordinal"],
                excluded_llm_metadata_keys=["ordinal"],
            )
            node_ids.append(node.node_id)
            nodes[node.node_id] = node

        logger.debug(f"Built similarity index: {len(records)} chunks, dim={dimension}")
        return cls(node_ids, nodes, list(records), matrix)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def dimension(self) -> int:
        return int(self._matrix.shape[1])

    @property
    def node_ids(self) -> List[str]:
        return list(self._node_ids)

    def get_node(self, node_id: str) -> TextNode:
        return self._nodes[node_id]

    def search(self, query_embedding: Sequence[float], k: int) -> List[ScoredChunk]:
        """Return the k records most similar to the query embedding.

        ``k`` is clamped to ``[1, len(self)]``. Results are sorted by
        descending cosine similarity; ties go to the lower ordinal.

        Raises:
            ConfigurationError: If the query embedding does not match the
                index dimension or contains non-finite values.
        """
        query = np.asarray(query_embedding, dtype=float)
        if query.shape != (self.dimension,):
            raise ConfigurationError(
                "Query embedding dimension does not match the chunk embeddings.",
                detail=f"got {query.size}, expected {self.dimension}",
            )
        if not np.all(np.isfinite(query)):
            raise ConfigurationError("Query embedding must contain finite numbers.")

        k = max(1, min(k, len(self)))
        scores = self._cosine_scores(query)
        ranked = sorted(
            range(len(self._records)),
            key=lambda i: (-scores[i], self._records[i].ordinal),
        )

        return [
            ScoredChunk(
                node_id=self._node_ids[i],
                record=self._records[i],
                score=float(scores[i]),
            )
            for i in ranked[:k]
        ]

    def _cosine_scores(self, query: np.ndarray) -> np.ndarray:
        # Zero-norm vectors have no direction; they score 0.0.
        denominators = self._norms * np.linalg.norm(query)
        dots = self._matrix @ query
        return np.divide(
            dots,
            denominators,
            out=np.zeros_like(dots),
            where=denominators > 0,
        )
