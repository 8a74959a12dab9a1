"""Splits an uploaded plain-text document into overlapping chunks."""

import logging
from typing import List

from llama_index.core import Document
from llama_index.core.node_parser import SentenceSplitter
from llama_index.core.schema import TextNode
from shared.errors import ConfigurationError

logger = logging.getLogger(__name__)


def split_document(text: str, chunk_size: int, chunk_overlap: int) -> List[TextNode]:
    """
    Split a document into sentence-aware chunks.

    Args:
        text: The full document text.
        chunk_size: Target chunk size in tokens.
        chunk_overlap: Token overlap between consecutive chunks.

    Returns:
        The chunks as TextNodes, in document order.

    Raises:
        ConfigurationError: If the document is empty or the sizes are invalid.
    """
    if not text or not text.strip():
        raise ConfigurationError("The document is empty. Upload a text file first.")
    if chunk_size <= 0:
        raise ConfigurationError("chunkSize must be a positive integer.")
    if chunk_overlap < 0 or chunk_overlap >= chunk_size:
        raise ConfigurationError(
            "chunkOverlap must be non-negative and smaller than chunkSize."
        )

    splitter = SentenceSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
    nodes = splitter.get_nodes_from_documents([Document(text=text)])

    text_nodes = [node for node in nodes if isinstance(node, TextNode) and node.text]
    logger.info(
        f"Split document of {len(text)} characters into {len(text_nodes)} chunks "
        f"(chunk_size={chunk_size}, chunk_overlap={chunk_overlap})"
    )
    return text_nodes
