"""Abstract vision provider with OpenAI and Anthropic adapters."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from app.config import get_settings
from app.services.errors import ExternalServiceError

logger = logging.getLogger(__name__)


class LLMProvider(ABC):
    """Abstract interface for vision-capable LLM calls."""

    @abstractmethod
    async def analyze_images(
        self, image_urls: list[str], prompt: str, labels: list[str] | None = None
    ) -> str:
        """Send image URLs (each optionally followed by a caption) + prompt, return text.

        Raises ExternalServiceError when the service call fails.
        """
        ...


class OpenAIProvider(LLMProvider):
    """OpenAI GPT-4o vision provider."""

    def __init__(self, api_key: str, model: str = "gpt-4o", max_tokens: int = 2048,
                 temperature: float = 0.3, timeout: float = 120.0):
        from openai import AsyncOpenAI
        self.client = AsyncOpenAI(api_key=api_key, timeout=timeout)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def analyze_images(self, image_urls, prompt, labels=None):
        content = []
        for i, url in enumerate(image_urls):
            content.append({"type": "image_url", "image_url": {"url": url, "detail": "high"}})
            if labels and i < len(labels):
                content.append({"type": "text", "text": labels[i]})
        content.append({"type": "text", "text": prompt})
        try:
            resp = await self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": content}],
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            raise ExternalServiceError(f"OpenAI vision call failed: {e}") from e
        return resp.choices[0].message.content or ""


class AnthropicProvider(LLMProvider):
    """Anthropic Claude vision provider."""

    def __init__(self, api_key: str, model: str = "claude-sonnet-4-20250514",
                 max_tokens: int = 2048, temperature: float = 0.3, timeout: float = 120.0):
        from anthropic import AsyncAnthropic
        self.client = AsyncAnthropic(api_key=api_key, timeout=timeout)
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def analyze_images(self, image_urls, prompt, labels=None):
        content = []
        for i, url in enumerate(image_urls):
            content.append({"type": "image", "source": {"type": "url", "url": url}})
            if labels and i < len(labels):
                content.append({"type": "text", "text": labels[i]})
        content.append({"type": "text", "text": prompt})
        try:
            resp = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": content}],
            )
        except Exception as e:
            raise ExternalServiceError(f"Anthropic vision call failed: {e}") from e
        if resp.usage:
            logger.debug("Anthropic usage: in=%s out=%s", resp.usage.input_tokens, resp.usage.output_tokens)
        return "".join(block.text for block in resp.content if block.type == "text")


def get_llm_provider() -> LLMProvider:
    """Factory: honours vision.provider, else OpenAI if a key is set, else Anthropic."""
    settings = get_settings()
    vision = settings.vision
    kwargs = {
        "max_tokens": vision.max_tokens,
        "temperature": vision.temperature,
        "timeout": vision.timeout_seconds,
    }
    use_openai = vision.provider == "openai" or (
        vision.provider == "auto" and settings.openai_api_key
    )
    if use_openai and settings.openai_api_key:
        return OpenAIProvider(settings.openai_api_key, model=vision.openai_model, **kwargs)
    if vision.provider in ("anthropic", "auto") and settings.anthropic_api_key:
        return AnthropicProvider(settings.anthropic_api_key, model=vision.anthropic_model, **kwargs)
    raise RuntimeError("No LLM API key configured. Set OPENAI_API_KEY or ANTHROPIC_API_KEY.")
