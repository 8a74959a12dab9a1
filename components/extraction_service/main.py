"""
This service encapsulates the business logic of the character extractor.
It is completely decoupled from any web framework (like FastAPI) and wires the
retrieval, extraction and validation components together for each request.

Responsibilities:
- Splitting and embedding an uploaded document.
- Building a request-scoped similarity index from client-supplied chunks.
- Retrieving the chunks relevant to the extraction instruction.
- Running the grounded completion and validating the model output.
- Converting every failure into a soft-failure response.
"""

import logging
from enum import Enum
from typing import List, Optional, Sequence

from components.document_processing import convert_nodes_to_chunks, split_document
from components.extraction_engine import CharacterExtractionEngine
from components.response_validator import CharacterResponseValidator
from components.retrieval import ChunkRetriever, SimilarityIndex
from llama_index.core.embeddings import BaseEmbedding
from llama_index.core.schema import MetadataMode
from shared.config import Config
from shared.errors import PipelineError, UpstreamError

from .models import (
    ExtractionPayload,
    ExtractionRequest,
    ExtractionResponse,
    SplitAndEmbedPayload,
    SplitAndEmbedRequest,
    SplitAndEmbedResponse,
)

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


class ExtractionStage(str, Enum):
    """Per-request pipeline states, in the order they are reached."""

    RECEIVED = "Received"
    INDEX_BUILT = "IndexBuilt"
    RETRIEVED = "Retrieved"
    COMPLETED = "Completed"
    PARSED = "Parsed"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ExtractionService:
    """The central service for all extraction-related business logic."""

    def __init__(
        self,
        config: Config,
        embed_model: BaseEmbedding,
        engine: Optional[CharacterExtractionEngine] = None,
        validator: Optional[CharacterResponseValidator] = None,
    ):
        """
        Initializes the ExtractionService with its required dependencies.

        Args:
            config: The application's configuration object.
            embed_model: Embedding provider for documents and the query.
            engine: The extraction engine; built from config if omitted.
            validator: The response validator; a default one if omitted.
        """
        self.config = config
        self.embed_model = embed_model
        self.engine = engine or CharacterExtractionEngine(config)
        self.validator = validator or CharacterResponseValidator()

    async def extract_characters(self, request: ExtractionRequest) -> ExtractionResponse:
        """
        Runs the full retrieval-and-extraction pipeline for one request.

        No state is kept between calls: the similarity index is built from
        the request's chunks and discarded afterwards.

        Args:
            request: The client's chunks and optional parameters.

        Returns:
            An ExtractionResponse carrying either the characters or an error.
        """
        stage = ExtractionStage.RECEIVED
        logger.debug(f"Extraction {stage.value}: {len(request.chunks)} chunks")

        try:
            params = request.to_params(self.config.extraction)

            index = SimilarityIndex.build(request.to_records())
            stage = self._advance(stage, ExtractionStage.INDEX_BUILT)

            retriever = ChunkRetriever(
                index,
                self.embed_model,
                similarity_top_k=params.top_k,
                callback_manager=self.engine.callback_manager,
            )
            context_chunks = await retriever.aretrieve_texts(self.engine.instruction)
            stage = self._advance(stage, ExtractionStage.RETRIEVED)

            raw_response = await self.engine.extract(context_chunks, params)
            stage = self._advance(stage, ExtractionStage.COMPLETED)

            characters = self.validator.validate(raw_response)
            stage = self._advance(stage, ExtractionStage.PARSED)

        except PipelineError as e:
            logger.warning(
                f"Extraction {ExtractionStage.FAILED.value} after {stage.value} "
                f"[{e.stage}]: {e}"
            )
            return ExtractionResponse(error=e.message)
        except Exception as e:
            logger.error(
                f"Unexpected error during extraction after {stage.value}: {e}",
                exc_info=True,
            )
            return ExtractionResponse(error=UNEXPECTED_ERROR_MESSAGE)

        self._advance(stage, ExtractionStage.SUCCEEDED)
        logger.info(f"Extracted {len(characters)} characters")
        return ExtractionResponse(payload=ExtractionPayload(characters=characters))

    async def split_and_embed(self, request: SplitAndEmbedRequest) -> SplitAndEmbedResponse:
        """
        Splits a document into chunks and embeds each chunk.

        Args:
            request: The document and optional chunking parameters.

        Returns:
            A SplitAndEmbedResponse carrying either the chunks or an error.
        """
        chunk_size, chunk_overlap = request.resolve_sizes(self.config.indexing)

        try:
            nodes = split_document(request.document, chunk_size, chunk_overlap)
            texts = [node.get_content(metadata_mode=MetadataMode.NONE) for node in nodes]
            embeddings = await self._embed_texts(texts)
            chunks = convert_nodes_to_chunks(nodes, embeddings)
        except PipelineError as e:
            logger.warning(f"Split and embed failed [{e.stage}]: {e}")
            return SplitAndEmbedResponse(error=e.message)
        except Exception as e:
            logger.error(f"Unexpected error during split and embed: {e}", exc_info=True)
            return SplitAndEmbedResponse(error=UNEXPECTED_ERROR_MESSAGE)

        return SplitAndEmbedResponse(payload=SplitAndEmbedPayload(chunks=chunks))

    async def _embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        try:
            return await self.embed_model.aget_text_embedding_batch(list(texts))
        except Exception as e:
            logger.error(f"Embedding provider failed for {len(texts)} chunks: {e}")
            raise UpstreamError(
                "The embedding provider could not embed the document.", detail=str(e)
            ) from e

    @staticmethod
    def _advance(
        current: ExtractionStage, target: ExtractionStage
    ) -> ExtractionStage:
        logger.debug(f"Extraction {current.value} -> {target.value}")
        return target
