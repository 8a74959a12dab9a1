"""Document processing component.

This component turns an uploaded document into the chunk/embedding pairs that
extraction requests are built from: sentence-aware splitting followed by
conversion of the resulting nodes into wire chunk payloads.
"""

from .document_splitter import split_document
from .node_converter import convert_nodes_to_chunks

__all__ = [
    # Splitting
    "split_document",
    # Node conversion
    "convert_nodes_to_chunks",
]
