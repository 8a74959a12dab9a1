"""Configuration management for the character extractor service."""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class ServerConfig(BaseModel):
    """Configuration for the server."""

    host: str = Field(default="127.0.0.1", description="Server host")
    port: int = Field(default=8000, description="Server port")


class IndexingConfig(BaseModel):
    """Defaults for splitting a document into chunks."""

    chunk_size: int = Field(default=1024, gt=0, description="Size of text chunks")
    chunk_overlap: int = Field(
        default=20, ge=0, description="Overlap between chunks"
    )

    @model_validator(mode="after")
    def check_overlap(self) -> "IndexingConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class ExtractionConfig(BaseModel):
    """Default retrieval and decoding parameters for extraction requests."""

    top_k: int = Field(default=2, ge=1, description="Number of chunks to retrieve")
    temperature: float = Field(
        default=0.1, ge=0.0, le=1.0, description="LLM sampling temperature"
    )
    top_p: float = Field(
        default=1.0, ge=0.0, le=1.0, description="LLM nucleus sampling cutoff"
    )


class EmbeddingModelConfig(BaseModel):
    """Configuration for embedding models."""

    provider: str = Field(
        default="sentence_transformers",
        description="Embedding provider: sentence_transformers or openai_endpoint",
    )
    model_name: str = Field(
        default="all-MiniLM-L6-v2", description="Model name or identifier"
    )
    endpoint_url: Optional[str] = Field(
        default=None, description="API endpoint URL for openai_endpoint provider"
    )
    api_key: Optional[str] = Field(
        default=None, description="API key for openai_endpoint provider"
    )
    wrapper_class: Optional[str] = Field(
        default=None,
        description="Dotted path of a custom embedding wrapper class",
    )
    embed_batch_size: int = Field(
        default=100,
        gt=0,
        le=2048,
        description="Texts sent to the provider per embedding call",
    )


class GenerationModelConfig(BaseModel):
    """Configuration for the completion model."""

    model_name: str = Field(default="gpt-4", description="LiteLLM model identifier")
    api_base: Optional[str] = Field(
        default=None, description="Override for the provider base URL"
    )
    api_key: Optional[str] = Field(default=None, description="Provider API key")
    max_retries: int = Field(
        default=1,
        ge=1,
        description="Total attempts per completion; 1 means no retry",
    )
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Extra parameters passed to litellm.completion()",
    )
    llamaindex_debugging: bool = Field(
        default=False, description="Log LLM prompts and responses"
    )


class Config(BaseModel):
    """Main configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    indexing: IndexingConfig = Field(default_factory=IndexingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    embedding_model: EmbeddingModelConfig = Field(default_factory=EmbeddingModelConfig)
    generation_model: GenerationModelConfig = Field(
        default_factory=GenerationModelConfig
    )
    prompts: Dict[str, Any] = Field(
        default_factory=dict, description="Loaded prompts from prompts.toml"
    )

    @classmethod
    def load_from_file(cls, config_path: str) -> "Config":
        """Load configuration from a TOML file."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_file, "r") as f:
            config_data = toml.load(f)

        return cls(**config_data)

    def get_prompt(self, section: str, key: str) -> Optional[str]:
        """Return a prompt string from prompts.toml, or None if it is not set."""
        value = self.prompts.get(section, {}).get(key)
        if value is None:
            return None
        return str(value)


def load_config(
    config_dir: Optional[str] = None,
    app_config_path: Optional[str] = None,
    prompts_config_path: Optional[str] = None,
) -> Config:
    """Load all configurations, handling CLI overrides."""
    base_dir = Path(config_dir) if config_dir else Path("config")

    app_path = Path(app_config_path) if app_config_path else base_dir / "app.toml"
    prompts_path = (
        Path(prompts_config_path) if prompts_config_path else base_dir / "prompts.toml"
    )

    try:
        logger.info(f"Loading app config from: {app_path}")
        with open(app_path, "r") as f:
            app_data = toml.load(f)
    except FileNotFoundError:
        logger.error(f"Application config file not found at {app_path}. Aborting.")
        raise

    try:
        logger.info(f"Loading prompts from: {prompts_path}")
        with open(prompts_path, "r") as f:
            prompts_data = toml.load(f)
    except FileNotFoundError:
        logger.warning(
            f"Prompts config file not found at {prompts_path}. Using default prompts."
        )
        prompts_data = {}

    config = Config(**app_data)
    config.prompts = prompts_data

    return config
