"""Tests for OpenAI-backed embedding provider and classification oracle.

The AsyncOpenAI client is replaced with mocks; no network access.
"""

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from arborist.core.config.embedding_config import EmbeddingConfig
from arborist.core.exceptions import (
    ClassificationError,
    EmbeddingDimensionError,
    EmbeddingProviderError,
)
from arborist.core.models import ItemContent, PlacementDecision
from arborist.prompts.classification import HierarchyNode
from arborist.providers.embeddings import (
    DisabledEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)
from arborist.providers.llm.openai_oracle import OpenAIClassificationOracle


def embedding_response(vectors, reverse=False):
    data = [SimpleNamespace(index=i, embedding=v) for i, v in enumerate(vectors)]
    if reverse:
        data.reverse()
    return SimpleNamespace(data=data, usage=SimpleNamespace(total_tokens=7))


def embedding_client(*responses):
    client = MagicMock()
    client.embeddings.create = AsyncMock(side_effect=list(responses))
    return client


class TestOpenAIEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_orders_by_index(self):
        client = embedding_client(embedding_response([[1.0, 0.0], [0.0, 1.0]], reverse=True))
        provider = OpenAIEmbeddingProvider(dims=2, client=client)

        embeddings = await provider.embed_batch(["first", "second"])

        assert embeddings == [[1.0, 0.0], [0.0, 1.0]]
        kwargs = client.embeddings.create.call_args.kwargs
        assert kwargs["input"] == ["first", "second"]
        assert kwargs["dimensions"] == 2
        assert provider.get_usage_stats()["embeddings_generated"] == 2

    @pytest.mark.asyncio
    async def test_batches_requests(self):
        client = embedding_client(
            embedding_response([[1.0], [1.0]]), embedding_response([[0.5]])
        )
        provider = OpenAIEmbeddingProvider(dims=1, batch_size=2, client=client)

        embeddings = await provider.embed(["a", "b", "c"])

        assert len(embeddings) == 3
        assert client.embeddings.create.await_count == 2

    @pytest.mark.asyncio
    async def test_wrong_dimensions(self):
        client = embedding_client(embedding_response([[1.0, 0.0, 0.0]]))
        provider = OpenAIEmbeddingProvider(dims=2, client=client)
        with pytest.raises(EmbeddingDimensionError):
            await provider.embed_batch(["text"])

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self):
        client = MagicMock()
        client.embeddings.create = AsyncMock(side_effect=RuntimeError("503"))
        provider = OpenAIEmbeddingProvider(dims=2, client=client)
        with pytest.raises(EmbeddingProviderError, match="503"):
            await provider.embed_batch(["text"])

    @pytest.mark.asyncio
    async def test_empty_text_rejected(self):
        client = embedding_client()
        provider = OpenAIEmbeddingProvider(dims=2, client=client)
        with pytest.raises(EmbeddingProviderError):
            await provider.embed_batch(["ok", "   "])
        client.embeddings.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_texts(self):
        provider = OpenAIEmbeddingProvider(dims=2, client=embedding_client())
        assert await provider.embed([]) == []


class TestProviderFactory:
    @pytest.mark.asyncio
    async def test_disabled_provider(self, clean_environment):
        provider = create_embedding_provider(EmbeddingConfig(provider="disabled", dims=3))
        assert isinstance(provider, DisabledEmbeddingProvider)
        assert await provider.embed_batch(["a", "b"]) == [[0.0] * 3, [0.0] * 3]

    def test_openai_provider(self, clean_environment):
        provider = create_embedding_provider(EmbeddingConfig(api_key="sk-test", dims=8))
        assert isinstance(provider, OpenAIEmbeddingProvider)
        assert provider.dims == 8


def chat_client(content, finish_reason="stop"):
    response = SimpleNamespace(
        choices=[
            SimpleNamespace(message=SimpleNamespace(content=content), finish_reason=finish_reason)
        ],
        usage=SimpleNamespace(total_tokens=42),
    )
    client = MagicMock()
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


DECISION_JSON = json.dumps(
    {
        "decision": "AddAsChild",
        "parent_id": "payments",
        "confidence": 0.85,
        "reasoning": "Refunds are payments work",
        "new_parent_title": None,
        "new_parent_description": None,
    }
)


class TestOpenAIClassificationOracle:
    @pytest.mark.asyncio
    async def test_structured_request(self):
        client = chat_client(DECISION_JSON)
        oracle = OpenAIClassificationOracle(model="gpt-test", client=client)

        decision = await oracle.classify(
            ItemContent(title="Issue refunds"),
            [HierarchyNode(id="payments", title="Payments")],
            0.7,
        )

        assert decision.decision == PlacementDecision.ADD_AS_CHILD
        assert decision.parent_id == "payments"
        kwargs = client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["temperature"] == 0
        assert kwargs["response_format"]["json_schema"]["strict"] is True
        assert "Issue refunds" in kwargs["messages"][1]["content"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "content, finish_reason",
        [
            (None, "stop"),
            ("   ", "stop"),
            (DECISION_JSON, "length"),
            ("{not json", "stop"),
            ("[1, 2]", "stop"),
        ],
    )
    async def test_bad_outputs_raise(self, content, finish_reason):
        oracle = OpenAIClassificationOracle(client=chat_client(content, finish_reason))
        with pytest.raises(ClassificationError):
            await oracle.classify(ItemContent(title="x"), [], 0.7)

    @pytest.mark.asyncio
    async def test_api_error_is_wrapped(self):
        client = MagicMock()
        client.chat.completions.create = AsyncMock(side_effect=RuntimeError("timeout"))
        oracle = OpenAIClassificationOracle(client=client)
        with pytest.raises(ClassificationError, match="timeout"):
            await oracle.classify(ItemContent(title="x"), [], 0.7)
