"""Tests for API App main functionality."""

from typing import List
from unittest.mock import AsyncMock, MagicMock

import pytest
from character_extractor import __version__
from components.extraction_engine import CharacterExtractionEngine
from components.extraction_service.main import ExtractionService
from fastapi.testclient import TestClient
from llama_index.core.base.llms.types import CompletionResponse
from llama_index.core.embeddings import BaseEmbedding
from llama_index.core.llms import LLM
from pydantic import Field
from shared.config import Config

from ..main import create_app

ALICE_JSON = '[{"name":"Alice","description":"A tea lover","personality":"calm"}]'


class FixedQueryEmbedding(BaseEmbedding):
    query_vector: List[float] = Field(default_factory=lambda: [0.9, 0.1])

    def _get_query_embedding(self, query: str) -> List[float]:
        return list(self.query_vector)

    async def _aget_query_embedding(self, query: str) -> List[float]:
        return self._get_query_embedding(query)

    def _get_text_embedding(self, text: str) -> List[float]:
        return [1.0, 0.0]


@pytest.fixture
def mock_llm():
    mock = MagicMock(spec=LLM)
    mock.acomplete = AsyncMock(return_value=CompletionResponse(text=ALICE_JSON))
    return mock


@pytest.fixture
def test_service(mock_llm):
    """Create a test ExtractionService instance."""
    config = Config()
    engine = CharacterExtractionEngine(
        config, llm_factory=lambda params, callback_manager: mock_llm
    )
    return ExtractionService(
        config=config, embed_model=FixedQueryEmbedding(), engine=engine
    )


@pytest.fixture
def client(test_service):
    """Create a test client for the API server."""
    app = create_app(test_service)
    with TestClient(app) as test_client:
        yield test_client


STORY_BODY = {
    "chunks": [
        {"text": "Alice loves tea.", "embedding": [1, 0]},
        {"text": "Bob is grumpy.", "embedding": [0, 1]},
    ],
    "topK": 1,
    "temperature": 0.1,
    "topP": 1,
}


@pytest.mark.parametrize("path", ["/extract", "/api/extractcharacters"])
def test_extract_endpoint_success(client, path):
    response = client.post(path, json=STORY_BODY)
    assert response.status_code == 200

    data = response.json()
    assert "error" not in data
    assert data["payload"]["characters"] == [
        {"name": "Alice", "description": "A tea lover", "personality": "calm"}
    ]


def test_extract_endpoint_accepts_original_field_name(client):
    body = {"nodesWithEmbedding": STORY_BODY["chunks"]}

    response = client.post("/api/extractcharacters", json=body)

    assert response.status_code == 200
    assert len(response.json()["payload"]["characters"]) == 1


def test_extract_endpoint_empty_chunks_soft_error(client):
    response = client.post("/extract", json={"chunks": []})
    assert response.status_code == 200

    data = response.json()
    assert "payload" not in data
    assert "No chunks were provided" in data["error"]


def test_extract_endpoint_parse_failure_soft_error(client, mock_llm):
    mock_llm.acomplete.return_value = CompletionResponse(text="I found Alice.")

    response = client.post("/extract", json=STORY_BODY)

    assert response.status_code == 200
    assert response.json() == {
        "error": (
            "Failed to parse AI response into JSON. Please ensure the AI "
            "response is in correct JSON format."
        )
    }


@pytest.mark.parametrize(
    "method", ["get", "head", "put", "patch", "delete", "options"]
)
def test_extract_endpoint_rejects_other_methods(client, method):
    response = client.request(method.upper(), "/extract")

    assert response.status_code == 405
    assert response.content == b""
    assert response.headers["allow"] == "POST"
    assert response.headers["content-length"] == "0"
    assert "content-type" not in response.headers


def test_unrouted_method_gets_empty_405(client):
    response = client.request("TRACE", "/api/splitandembed")

    assert response.status_code == 405
    assert response.content == b""
    assert "content-type" not in response.headers


def test_unknown_path_keeps_json_404(client):
    response = client.get("/nowhere")

    assert response.status_code == 404
    assert response.json() == {"detail": "Not Found"}


def test_extract_endpoint_with_invalid_data(client):
    """Missing chunks and malformed bodies are transport errors."""
    assert client.post("/extract", json={"topK": 3}).status_code == 422
    assert (
        client.post(
            "/extract",
            content="not json",
            headers={"Content-Type": "application/json"},
        ).status_code
        == 422
    )


@pytest.mark.parametrize(
    "overrides", [{"topK": 0}, {"temperature": 2}, {"topP": -0.5}]
)
def test_extract_endpoint_out_of_range_params(client, overrides):
    response = client.post("/extract", json={**STORY_BODY, **overrides})

    assert response.status_code == 422


def test_split_and_embed_endpoint(client):
    response = client.post(
        "/api/splitandembed",
        json={"document": "Alice loves tea.", "chunkSize": 1024, "chunkOverlap": 20},
    )
    assert response.status_code == 200

    data = response.json()
    assert data["payload"]["chunks"] == [
        {"text": "Alice loves tea.", "embedding": [1.0, 0.0]}
    ]


def test_split_and_embed_empty_document_soft_error(client):
    response = client.post("/splitandembed", json={"document": ""})

    assert response.status_code == 200
    assert "document is empty" in response.json()["error"]


def test_split_and_embed_rejects_get(client):
    response = client.get("/splitandembed")

    assert response.status_code == 405


def test_health_endpoint(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "version": __version__}


def test_malformed_body_is_logged_as_transport_error(client, caplog):
    with caplog.at_level("WARNING", logger="components.api_app.main"):
        response = client.post("/extract", json={"chunks": "not a list"})

    assert response.status_code == 422
    assert "detail" in response.json()
    assert "[transport]" in caplog.text


def test_extract_endpoint_returns_extra_character_keys(client, mock_llm):
    mock_llm.acomplete.return_value = CompletionResponse(
        text='[{"name":"Alice","description":"d","personality":"p","age":"30"}]'
    )

    response = client.post("/extract", json=STORY_BODY)

    assert response.json()["payload"]["characters"] == [
        {"name": "Alice", "description": "d", "personality": "p", "age": "30"}
    ]
