from abc import ABC, abstractmethod
from typing import Any, Tuple

from shared.config import EmbeddingModelConfig


class CustomEmbeddingWrapperBase(ABC):
    """
    Abstract base class for pluggable embedding model wrappers.

    Wrappers are loaded through ``embedding_model.wrapper_class`` and receive
    the whole ``[embedding_model]`` section. Whatever they return must behave
    like a LlamaIndex ``BaseEmbedding``, since the same object embeds the
    document chunks and the extraction query.
    """

    #: Config fields that must be set for this wrapper to work.
    required_fields: Tuple[str, ...] = ("model_name",)

    @abstractmethod
    def __init__(self, config: EmbeddingModelConfig, **kwargs: Any):
        """
        Initializes the custom wrapper.
        Args:
            config: The embedding model configuration from app.toml.
            **kwargs: Additional arguments for the LlamaIndex BaseEmbedding.
        """
        pass

    @classmethod
    def validate_config(cls, config: EmbeddingModelConfig) -> None:
        """Raise ValueError if a required config field is missing."""
        missing = [name for name in cls.required_fields if not getattr(config, name)]
        if missing:
            raise ValueError(
                f"{cls.__name__} requires embedding_model fields: {', '.join(missing)}"
            )
