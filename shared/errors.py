"""Error taxonomy for the extraction pipeline.

Every failure inside the pipeline is raised as a ``PipelineError`` subclass.
The ``stage`` tag tells the orchestrator (and the logs) where the failure
happened; the ``message`` is what the caller ends up seeing in the soft-failure
``{"error": ...}`` payload.
"""

from typing import Optional


class PipelineError(Exception):
    """Base class for all pipeline failures."""

    stage: str = "pipeline"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message} ({self.detail})"
        return self.message


class TransportError(PipelineError):
    """Wrong method or malformed request body."""

    stage = "transport"


class ConfigurationError(PipelineError):
    """Empty chunk set, inconsistent embedding dimensions, bad parameters."""

    stage = "configuration"


class UpstreamError(PipelineError):
    """The embedding or LLM provider was unreachable or returned an error."""

    stage = "upstream"


class ParseError(PipelineError):
    """The model output was not valid JSON or did not match the schema."""

    stage = "parse"
