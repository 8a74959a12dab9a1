"""Character extraction over uploaded documents with retrieval-augmented LLM calls."""

__version__ = "0.1.0"

__all__ = ["__version__"]
