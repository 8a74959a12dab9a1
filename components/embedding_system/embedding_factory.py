import asyncio
import importlib
import logging
from typing import Any, List, cast

from llama_index.core.embeddings import BaseEmbedding
from pydantic import Field
from shared.config import EmbeddingModelConfig

logger = logging.getLogger(__name__)


class SentenceTransformersEmbedding(BaseEmbedding):
    """Wrapper for SentenceTransformers embedding models."""

    model_config = {"arbitrary_types_allowed": True}

    def __init__(self, model_name: str, **kwargs: Any):
        """Initialize SentenceTransformers model.

        Args:
            model_name: Name of the SentenceTransformers model
            **kwargs: Additional arguments for BaseEmbedding
        """
        try:
            from sentence_transformers import SentenceTransformer

            _model = SentenceTransformer(model_name)
            logger.info(f"Loaded SentenceTransformers model: {model_name}")
        except ImportError as e:
            raise ImportError(
                "sentence-transformers is required for this provider. "
                "Install with: pip install sentence-transformers"
            ) from e

        super().__init__(model_name=model_name, **kwargs)
        # Stored outside pydantic validation
        object.__setattr__(self, "_sentence_model", _model)
        self._sentence_model: Any = _model

    def _get_query_embedding(self, query: str) -> List[float]:
        """Get query embedding."""
        return cast(List[float], self._sentence_model.encode([query]).tolist()[0])

    def _get_text_embedding(self, text: str) -> List[float]:
        """Get text embedding."""
        return cast(List[float], self._sentence_model.encode([text]).tolist()[0])

    def _get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts in one encoder call."""
        return cast(List[List[float]], self._sentence_model.encode(texts).tolist())

    # Encoding is CPU-bound; run it off the event loop.
    async def _aget_query_embedding(self, query: str) -> List[float]:
        """Get query embedding asynchronously."""
        return await asyncio.to_thread(self._get_query_embedding, query)

    async def _aget_text_embedding(self, text: str) -> List[float]:
        return await asyncio.to_thread(self._get_text_embedding, text)

    async def _aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts in one encoder call, off the event loop."""
        return await asyncio.to_thread(self._get_text_embeddings, texts)


class OpenAIEndpointEmbedding(BaseEmbedding):
    """Wrapper for OpenAI-compatible API endpoints.

    Errors from the endpoint are not masked; callers decide how to report them.
    """

    model_config = {"arbitrary_types_allowed": True}

    client: Any = Field(default=None, exclude=True)
    api_model_name: str = Field(default="", exclude=True)

    def __init__(self, model_name: str, endpoint_url: str, api_key: str, **kwargs: Any):
        """Initialize OpenAI-compatible embedding client.

        Args:
            model_name: Name of the embedding model
            endpoint_url: API endpoint URL
            api_key: API key for authentication
            **kwargs: Additional arguments for BaseEmbedding
        """
        try:
            from openai import OpenAI

            client = OpenAI(api_key=api_key, base_url=endpoint_url)
            logger.info(
                f"Initialized OpenAI-compatible client for {model_name} "
                f"at {endpoint_url}"
            )
        except ImportError as e:
            raise ImportError(
                "openai is required for this provider. Install with: pip install openai"
            ) from e

        super().__init__(model_name=model_name, **kwargs)
        object.__setattr__(self, "client", client)
        object.__setattr__(self, "api_model_name", model_name)

    def _embed(self, texts: List[str]) -> List[List[float]]:
        response = self.client.embeddings.create(model=self.api_model_name, input=texts)
        return [cast(List[float], item.embedding) for item in response.data]

    def _get_query_embedding(self, query: str) -> List[float]:
        """Get query embedding."""
        return self._embed([query])[0]

    def _get_text_embedding(self, text: str) -> List[float]:
        """Get text embedding."""
        return self._embed([text])[0]

    def _get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts in one API request."""
        return self._embed(texts)

    # The client is synchronous; requests run in a worker thread.
    async def _aget_query_embedding(self, query: str) -> List[float]:
        """Get query embedding asynchronously."""
        return await asyncio.to_thread(self._get_query_embedding, query)

    async def _aget_text_embedding(self, text: str) -> List[float]:
        return await asyncio.to_thread(self._get_text_embedding, text)

    async def _aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Embed a batch of texts in one API request, off the event loop."""
        return await asyncio.to_thread(self._get_text_embeddings, texts)


def create_embedding_model(config: EmbeddingModelConfig) -> BaseEmbedding:
    """Factory function to create embedding models based on configuration."""
    if config.wrapper_class:
        try:
            module_path, class_name = config.wrapper_class.rsplit(".", 1)
            module = importlib.import_module(module_path)
            wrapper_class = getattr(module, class_name)
            validate = getattr(wrapper_class, "validate_config", None)
            if callable(validate):
                validate(config)
            return cast(BaseEmbedding, wrapper_class(config))
        except (ImportError, AttributeError) as e:
            logger.error(f"Failed to load wrapper class '{config.wrapper_class}': {e}")
            raise ValueError(
                f"Could not load wrapper class '{config.wrapper_class}'"
            ) from e

    provider = config.provider.lower()

    if provider == "sentence_transformers":
        return SentenceTransformersEmbedding(
            config.model_name, embed_batch_size=config.embed_batch_size
        )

    elif provider == "openai_endpoint":
        if not config.endpoint_url or not config.api_key:
            raise ValueError(
                "endpoint_url and api_key are required for openai_endpoint provider"
            )
        return OpenAIEndpointEmbedding(
            config.model_name,
            config.endpoint_url,
            config.api_key,
            embed_batch_size=config.embed_batch_size,
        )

    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            f"Supported providers: sentence_transformers, openai_endpoint"
        )
