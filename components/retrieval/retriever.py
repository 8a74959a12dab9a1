"""Retriever that turns a natural-language query into ranked chunk texts."""

import logging
from typing import List, Optional

from llama_index.core.base.base_retriever import BaseRetriever
from llama_index.core.callbacks import CallbackManager
from llama_index.core.embeddings import BaseEmbedding
from llama_index.core.schema import MetadataMode, NodeWithScore, QueryBundle
from shared.errors import UpstreamError

from .models import ScoredChunk
from .similarity_index import SimilarityIndex

logger = logging.getLogger(__name__)


class ChunkRetriever(BaseRetriever):
    """LlamaIndex retriever backed by a request-scoped SimilarityIndex."""

    def __init__(
        self,
        index: SimilarityIndex,
        embed_model: BaseEmbedding,
        similarity_top_k: int = 2,
        callback_manager: Optional[CallbackManager] = None,
    ):
        """
        Args:
            index: The similarity index built for the current request.
            embed_model: Embedding provider matching the chunk embeddings.
            similarity_top_k: Number of chunks to return; clamped by the index.
            callback_manager: Optional LlamaIndex callback manager.
        """
        super().__init__(callback_manager=callback_manager)
        self._index = index
        self._embed_model = embed_model
        self._similarity_top_k = similarity_top_k

    @property
    def similarity_top_k(self) -> int:
        return self._similarity_top_k

    def _embed_query(self, query_bundle: QueryBundle) -> List[float]:
        if query_bundle.embedding is not None:
            return list(query_bundle.embedding)
        try:
            return self._embed_model.get_query_embedding(query_bundle.query_str)
        except Exception as e:
            logger.error(f"Embedding provider failed for query: {e}")
            raise UpstreamError(
                "The embedding provider could not embed the query.", detail=str(e)
            ) from e

    async def _aembed_query(self, query_bundle: QueryBundle) -> List[float]:
        if query_bundle.embedding is not None:
            return list(query_bundle.embedding)
        try:
            return await self._embed_model.aget_query_embedding(query_bundle.query_str)
        except Exception as e:
            logger.error(f"Embedding provider failed for query: {e}")
            raise UpstreamError(
                "The embedding provider could not embed the query.", detail=str(e)
            ) from e

    def _to_nodes(self, hits: List[ScoredChunk]) -> List[NodeWithScore]:
        return [
            NodeWithScore(node=self._index.get_node(hit.node_id), score=hit.score)
            for hit in hits
        ]

    def _retrieve(self, query_bundle: QueryBundle) -> List[NodeWithScore]:
        query_embedding = self._embed_query(query_bundle)
        hits = self._index.search(query_embedding, self._similarity_top_k)
        logger.debug(f"Retrieved {len(hits)} chunks (top_k={self._similarity_top_k})")
        return self._to_nodes(hits)

    async def _aretrieve(self, query_bundle: QueryBundle) -> List[NodeWithScore]:
        query_embedding = await self._aembed_query(query_bundle)
        hits = self._index.search(query_embedding, self._similarity_top_k)
        logger.debug(f"Retrieved {len(hits)} chunks (top_k={self._similarity_top_k})")
        return self._to_nodes(hits)

    def retrieve_texts(self, query: str) -> List[str]:
        """Return the texts of the top-ranked chunks for the query, in rank order."""
        nodes = self.retrieve(query)
        return [n.node.get_content(metadata_mode=MetadataMode.NONE) for n in nodes]

    async def aretrieve_texts(self, query: str) -> List[str]:
        """Async variant of ``retrieve_texts``."""
        nodes = await self.aretrieve(query)
        return [n.node.get_content(metadata_mode=MetadataMode.NONE) for n in nodes]
