"""Tests for custom_embedding module."""

from abc import ABC
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from components.embedding_system import CustomEmbeddingWrapperBase
from plugins.e5_instruct_wrapper import DEFAULT_TASK, E5InstructWrapper
from shared.config import EmbeddingModelConfig


def test_custom_embedding_wrapper_base_is_abstract():
    """Test that CustomEmbeddingWrapperBase is an abstract base class."""
    # Cannot instantiate abstract class directly
    with pytest.raises(TypeError):
        CustomEmbeddingWrapperBase()


def test_custom_embedding_wrapper_base_inheritance():
    """Test that CustomEmbeddingWrapperBase inherits from ABC."""
    assert issubclass(CustomEmbeddingWrapperBase, ABC)
    assert getattr(CustomEmbeddingWrapperBase.__init__, "__isabstractmethod__", False)


def test_concrete_implementation_can_be_created():
    """Test that a concrete implementation can be created."""

    class ConcreteEmbedding(CustomEmbeddingWrapperBase):
        def __init__(self, config: EmbeddingModelConfig, **kwargs):
            self.config = config
            self.kwargs = kwargs

    config = EmbeddingModelConfig(provider="test", model_name="test-model")

    embedding = ConcreteEmbedding(config, extra_param="test")
    assert embedding.config == config
    assert embedding.kwargs == {"extra_param": "test"}


def test_subclass_must_implement_init():
    """Test that subclasses must implement __init__ method."""

    class IncompleteEmbedding(CustomEmbeddingWrapperBase):
        pass  # Missing __init__ implementation

    config = EmbeddingModelConfig(provider="test", model_name="test-model")

    with pytest.raises(TypeError):
        IncompleteEmbedding(config)


def test_validate_config_reports_missing_fields():
    class EndpointEmbedding(CustomEmbeddingWrapperBase):
        required_fields = ("model_name", "endpoint_url")

        def __init__(self, config: EmbeddingModelConfig, **kwargs):
            self.config = config

    EndpointEmbedding.validate_config(
        EmbeddingModelConfig(model_name="m", endpoint_url="http://localhost")
    )
    with pytest.raises(ValueError, match="requires embedding_model fields: endpoint_url"):
        EndpointEmbedding.validate_config(EmbeddingModelConfig(model_name="m"))


class TestE5InstructWrapper:
    @pytest.fixture
    def config(self):
        return EmbeddingModelConfig(
            provider="custom",
            model_name="e5-mistral-7b-instruct",
            endpoint_url="http://localhost:8080/v1",
            api_key="test_key",
            wrapper_class="plugins.e5_instruct_wrapper.E5InstructWrapper",
        )

    def test_is_registered_as_custom_wrapper(self, config):
        wrapper = E5InstructWrapper(config)

        assert isinstance(wrapper, CustomEmbeddingWrapperBase)

    def test_format_query(self):
        assert (
            E5InstructWrapper.format_query("  who appears?  ")
            == f"Instruct: {DEFAULT_TASK}\nQuery: who appears?"
        )

    def test_only_queries_are_prefixed(self, config):
        wrapper = E5InstructWrapper(config)
        fake_client = MagicMock()
        fake_client.embeddings.create.return_value = SimpleNamespace(
            data=[SimpleNamespace(embedding=[0.5, 0.5])]
        )
        object.__setattr__(wrapper, "client", fake_client)

        wrapper.get_query_embedding("characters")
        wrapper.get_text_embedding("Alice loves tea.")

        query_call, text_call = fake_client.embeddings.create.call_args_list
        assert query_call.kwargs["input"][0].startswith("Instruct: ")
        assert text_call.kwargs["input"] == ["Alice loves tea."]

    def test_validate_config_requires_endpoint(self):
        with pytest.raises(ValueError, match="endpoint_url, api_key"):
            E5InstructWrapper.validate_config(
                EmbeddingModelConfig(model_name="e5-mistral-7b-instruct")
            )
