"""Tests for TranslationClient with a mocked Anthropic client."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import anthropic
import httpx
import pytest

from clients.translation_client import TranslationClient, TranslationError


def api_response(*texts: str) -> SimpleNamespace:
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=t) for t in texts])


@pytest.fixture
def client():
    client = TranslationClient(api_key="test-key", model="test-model")
    client._client.messages.create = AsyncMock(return_value=api_response("Hello everyone"))
    return client


class TestTranslate:
    async def test_returns_single_translation(self, client):
        assert await client.translate("Hola a todos", "en") == ["Hello everyone"]

    async def test_request_names_language(self, client):
        await client.translate("Hola a todos", "en")

        kwargs = client._client.messages.create.await_args.kwargs
        assert kwargs["model"] == "test-model"
        assert "ISO 639 code en" in kwargs["system"]
        assert kwargs["messages"] == [{"role": "user", "content": "Hola a todos"}]

    async def test_joins_text_blocks(self, client):
        client._client.messages.create.return_value = api_response("Hello ", "everyone")

        assert await client.translate("Hola a todos", "en") == ["Hello everyone"]

    async def test_api_error_raises(self, client):
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        client._client.messages.create.side_effect = anthropic.APIConnectionError(request=request)

        with pytest.raises(TranslationError, match="fr"):
            await client.translate("Hola", "fr")


class TestConfig:
    def test_reads_vault_when_no_key(self):
        config = {"api_key": "vault-key", "model_name": "vault-model"}
        with patch("clients.translation_client.get_translation_config", return_value=config):
            client = TranslationClient()

        assert client.model == "vault-model"

    def test_default_model(self):
        assert TranslationClient(api_key="k").model == TranslationClient.DEFAULT_MODEL
