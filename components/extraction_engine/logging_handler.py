import logging
from typing import Any, Dict, Optional

from llama_index.core.callbacks.base import BaseCallbackHandler
from llama_index.core.callbacks.schema import CBEventType, EventPayload

logger = logging.getLogger(__name__)


class LLMDebugHandler(BaseCallbackHandler):
    """Callback handler that logs the prompts sent to and text received from the LLM."""

    def __init__(self) -> None:
        super().__init__([], [])

    def start_trace(self, trace_id: Optional[str] = None) -> None:
        """Start a trace - no-op implementation."""
        pass

    def end_trace(
        self,
        trace_id: Optional[str] = None,
        trace_map: Optional[dict] = None,
    ) -> None:
        """End a trace - no-op implementation."""
        pass

    def on_event_start(
        self,
        event_type: CBEventType,
        payload: Optional[Dict[str, Any]] = None,
        event_id: str = "",
        parent_id: str = "",
        **kwargs: Any,
    ) -> str:
        if event_type == CBEventType.LLM and payload:
            prompt = payload.get(EventPayload.PROMPT) or payload.get(
                EventPayload.MESSAGES
            )
            logger.debug(f"LLM request [{event_id}]:\n{prompt}")

        if event_type == CBEventType.RETRIEVE and payload:
            logger.debug(
                f"Retrieval start [{event_id}]: "
                f"{payload.get(EventPayload.QUERY_STR)}"
            )
        return event_id or ""

    def on_event_end(
        self,
        event_type: CBEventType,
        payload: Optional[Dict[str, Any]] = None,
        event_id: str = "",
        **kwargs: Any,
    ) -> None:
        if event_type == CBEventType.LLM and payload:
            response = payload.get(EventPayload.COMPLETION) or payload.get(
                EventPayload.RESPONSE
            )
            logger.debug(f"LLM response [{event_id}]:\n{response}")

        if event_type == CBEventType.RETRIEVE and payload:
            nodes = payload.get(EventPayload.NODES) or []
            logger.debug(f"Retrieval end [{event_id}]: {len(nodes)} nodes")
