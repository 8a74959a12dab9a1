"""Factory for the completion model used by the extraction engine."""

import logging
from typing import Optional

from llama_index.core.callbacks import CallbackManager
from llama_index.core.llms import LLM
from llama_index.llms.litellm import LiteLLM
from shared.config import GenerationModelConfig

from .models import ExtractionParams

logger = logging.getLogger(__name__)


def create_generation_model(
    config: GenerationModelConfig,
    params: ExtractionParams,
    callback_manager: Optional[CallbackManager] = None,
) -> LLM:
    """
    Build a LiteLLM-backed LLM configured with the request's decoding parameters.

    ``top_p`` is not a first-class LiteLLM field in LlamaIndex, so it travels
    with the extra completion kwargs from ``generation_model.parameters``.
    """
    additional_kwargs = dict(config.parameters)
    additional_kwargs["top_p"] = params.top_p

    logger.debug(
        f"Creating LLM {config.model_name} "
        f"(temperature={params.temperature}, top_p={params.top_p})"
    )
    return LiteLLM(
        model=config.model_name,
        temperature=params.temperature,
        additional_kwargs=additional_kwargs,
        max_retries=config.max_retries,
        api_key=config.api_key,
        api_base=config.api_base,
        callback_manager=callback_manager,
    )
