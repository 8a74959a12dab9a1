import logging
from typing import Any, ClassVar, List, Tuple

from components.embedding_system import (
    CustomEmbeddingWrapperBase,
    OpenAIEndpointEmbedding,
)
from shared.config import EmbeddingModelConfig

logger = logging.getLogger(__name__)

DEFAULT_TASK = (
    "Given an instruction to extract the characters of a story, retrieve the "
    "passages that introduce or describe those characters."
)


class E5InstructWrapper(OpenAIEndpointEmbedding):
    """
    Custom wrapper for E5 instruction-tuned models accessed via an
    OpenAI-compatible endpoint.

    Only queries get the ``Instruct:/Query:`` prefix; document chunks are
    embedded as-is, which is what E5-instruct models expect.
    """

    required_fields: ClassVar[Tuple[str, ...]] = (
        "model_name",
        "endpoint_url",
        "api_key",
    )

    def __init__(self, config: EmbeddingModelConfig, **kwargs: Any):
        super().__init__(
            model_name=config.model_name,
            endpoint_url=config.endpoint_url or "",
            api_key=config.api_key or "",
            embed_batch_size=config.embed_batch_size,
            **kwargs,
        )

    @classmethod
    def validate_config(cls, config: EmbeddingModelConfig) -> None:
        missing = [name for name in cls.required_fields if not getattr(config, name)]
        if missing:
            raise ValueError(
                f"{cls.__name__} requires embedding_model fields: {', '.join(missing)}"
            )

    @staticmethod
    def format_query(query: str, task: str = DEFAULT_TASK) -> str:
        return f"Instruct: {task}\nQuery: {query.strip()}"

    def _get_query_embedding(self, query: str) -> List[float]:
        formatted_query = self.format_query(query)
        logger.debug("Embedding query with E5 instruction prefix")
        return super()._get_query_embedding(formatted_query)


# Virtual subclass: the pydantic base already fixes the metaclass.
CustomEmbeddingWrapperBase.register(E5InstructWrapper)
