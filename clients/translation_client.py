"""
Machine translation backed by the Anthropic API.

Usage:
    client = TranslationClient()
    [translated] = await client.translate("Hola a todos", "en")
"""

import logging

import anthropic

from clients.vault_client import get_translation_config

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You are a translation engine inside a chat application.

Translate the user's message into the language identified by the ISO 639 code {language}.

IMPORTANT: Output the translation only. Do not add quotes, notes or explanations.
If the message is already in that language, or cannot be translated (code, URLs,
emoji), return it unchanged."""


class TranslationError(Exception):
    """Translation request failed."""


class TranslationClient:
    """Translates chat text with an Anthropic model."""

    DEFAULT_MODEL = "claude-haiku-4-5"

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        max_tokens: int = 2048,
    ):
        """
        Args:
            api_key: Anthropic API key. If None, fetched from Vault.
            model: Model name. If None, Vault's model_name or DEFAULT_MODEL.
        """
        if api_key is None:
            config = get_translation_config()
            api_key = config["api_key"]
            model = model or config.get("model_name")

        self.model = model or self.DEFAULT_MODEL
        self.max_tokens = max_tokens
        self._client = anthropic.AsyncAnthropic(api_key=api_key)
        logger.info(f"Translation client initialized with model: {self.model}")

    async def translate(self, text: str, language: str) -> list[str]:
        """
        Translate `text` into `language`.

        Returns:
            A one-element list holding the translated text.

        Raises:
            TranslationError: If the API call fails
        """
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0,
                system=SYSTEM_PROMPT.format(language=language),
                messages=[{"role": "user", "content": text}],
            )
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise TranslationError(f"Translation to {language} failed: {e}") from e

        return ["".join(b.text for b in response.content if b.type == "text")]

    async def close(self) -> None:
        await self._client.close()
