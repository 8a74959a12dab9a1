"""Utility functions for converting LlamaIndex nodes to chunk payloads."""

from typing import List, Sequence

from components.extraction_service.models import ChunkPayload
from llama_index.core.schema import BaseNode, MetadataMode


def convert_nodes_to_chunks(
    nodes: Sequence[BaseNode],
    embeddings: Sequence[Sequence[float]],
) -> List[ChunkPayload]:
    """
    Pair LlamaIndex nodes with their embeddings in the wire chunk format.

    Args:
        nodes: Chunks produced by the document splitter, in document order
        embeddings: One embedding per node, in the same order

    Returns:
        Chunk payloads ready to be sent back with an extraction request

    Raises:
        ValueError: If the number of embeddings does not match the nodes
    """
    if len(nodes) != len(embeddings):
        raise ValueError(
            f"Got {len(embeddings)} embeddings for {len(nodes)} chunks"
        )

    return [
        ChunkPayload(
            text=node.get_content(metadata_mode=MetadataMode.NONE),
            embedding=list(embedding),
        )
        for node, embedding in zip(nodes, embeddings)
    ]
