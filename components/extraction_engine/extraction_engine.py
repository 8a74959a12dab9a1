from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from llama_index.core.callbacks import CallbackManager, LlamaDebugHandler
from llama_index.core.llms import LLM
from llama_index.core.prompts import PromptTemplate
from shared.config import Config
from shared.errors import UpstreamError

from .llm_factory import create_generation_model
from .logging_handler import LLMDebugHandler
from .models import ExtractionParams

logger = logging.getLogger(__name__)

DEFAULT_EXTRACTION_INSTRUCTION = (
    "You are an expert in literary analysis. Extract all the characters from "
    "the provided text. For each character, provide their name, a brief "
    "description, and their personality traits. Return the result as a JSON "
    'array of objects with the following keys: "name", "description", and '
    '"personality". Respond with the JSON array only, without any other text '
    "or formatting."
)

DEFAULT_QA_TEMPLATE = (
    "Context information is below.\n"
    "---------------------\n"
    "{context_str}\n"
    "---------------------\n"
    "Given the context information and not prior knowledge, answer the query.\n"
    "Query: {query_str}\n"
    "Answer: "
)

LLMFactory = Callable[[ExtractionParams, Optional[CallbackManager]], LLM]


class CharacterExtractionEngine:
    """Builds the grounded extraction prompt and runs a single LLM completion."""

    def __init__(self, config: Config, llm_factory: Optional[LLMFactory] = None):
        """
        Args:
            config: Application config; supplies the generation model and prompts.
            llm_factory: Builds an LLM for a request's decoding parameters.
                Defaults to a LiteLLM model from ``config.generation_model``.
        """
        self.config = config
        self._llm_factory = llm_factory or self._create_llm
        self.callback_manager = self._create_callback_manager()

    def _create_llm(
        self, params: ExtractionParams, callback_manager: Optional[CallbackManager]
    ) -> LLM:
        return create_generation_model(
            self.config.generation_model, params, callback_manager=callback_manager
        )

    def _create_callback_manager(self) -> Optional[CallbackManager]:
        if not self.config.generation_model.llamaindex_debugging:
            return None
        logging.getLogger("llama_index").setLevel(logging.DEBUG)
        logger.info("LlamaIndex debugging is enabled.")
        return CallbackManager(
            [LLMDebugHandler(), LlamaDebugHandler(print_trace_on_end=False)]
        )

    @property
    def instruction(self) -> str:
        """The fixed extraction instruction, also used as the retrieval query."""
        instruction = self.config.get_prompt("character_extraction", "instruction")
        if not instruction:
            return DEFAULT_EXTRACTION_INSTRUCTION
        return instruction.strip()

    def _get_qa_template(self) -> PromptTemplate:
        template = self.config.get_prompt("character_extraction", "qa_template")
        if not template:
            return PromptTemplate(DEFAULT_QA_TEMPLATE)
        missing = [
            var for var in ("context_str", "query_str") if f"{{{var}}}" not in template
        ]
        if missing:
            logger.warning(
                f"qa_template in prompts config lacks {missing}. Using fallback."
            )
            return PromptTemplate(DEFAULT_QA_TEMPLATE)
        return PromptTemplate(template.lstrip("\n"))

    def build_prompt(self, context_chunks: Sequence[str]) -> str:
        """Join the retrieved chunks in rank order and wrap them with the instruction."""
        context_str = "\n\n".join(context_chunks)
        return self._get_qa_template().format(
            context_str=context_str, query_str=self.instruction
        )

    async def extract(
        self, context_chunks: Sequence[str], params: ExtractionParams
    ) -> str:
        """
        Send one completion request and return the model's raw text.

        No retry happens here; a failure is reported as UpstreamError.
        """
        prompt = self.build_prompt(context_chunks)
        llm = self._llm_factory(params, self.callback_manager)

        logger.info(
            f"Requesting character extraction over {len(context_chunks)} chunks"
        )
        try:
            response = await llm.acomplete(prompt)
        except Exception as e:
            logger.error(f"LLM completion failed: {e}")
            raise UpstreamError(
                "The language model request failed.", detail=str(e)
            ) from e

        return response.text or ""
