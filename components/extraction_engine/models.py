"""Parameter models for the extraction engine."""

from pydantic import ConfigDict
from shared.config import ExtractionConfig


class ExtractionParams(ExtractionConfig):
    """Validated retrieval and decoding parameters for one extraction request.

    Same fields, ranges and defaults as ``[extraction]`` in app.toml, but
    frozen: it is built once per request and never changed afterwards.
    """

    model_config = ConfigDict(frozen=True)
