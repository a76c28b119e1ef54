import asyncio
import logging
import os
from typing import Any, Dict, List, Optional
from abc import ABC, abstractmethod

import aiohttp

from autolog.errors import TransportFailure
from config import get_constant

logger = logging.getLogger(__name__)

Message = Dict[str, Optional[str]]


class LLMClient(ABC):
    """Abstract base class for chat-completion clients."""

    url: str = ""
    env_key: str = ""
    provider: str = "LLM"

    def __init__(self, model: str, timeout: Optional[float] = None):
        self.model = model
        self.timeout = timeout or get_constant("REQUEST_TIMEOUT")
        self.api_key = os.environ.get(self.env_key)
        if not self.api_key:
            raise ValueError(f"{self.env_key} environment variable not set")

    @abstractmethod
    async def call(self, messages: List[Message], max_tokens: int = 2048, temperature: float = 0.1) -> Optional[str]:
        """Send the whole conversation and return the reply text (None if the API sent none)."""
        pass

    async def _post(self, headers: Dict[str, str], payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST ``payload`` and return the decoded JSON body, raising TransportFailure on any error."""
        logger.debug("POST %s model=%s messages=%d", self.url, self.model, len(payload.get("messages", [])))
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.url,
                    headers=headers,
                    json=payload,
                    timeout=aiohttp.ClientTimeout(total=self.timeout)
                ) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        raise TransportFailure(
                            f"{self.provider} API error: {response.status} - {error_text}",
                            status=response.status,
                        )
                    body = await response.json()
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportFailure(f"{self.provider} request failed: {exc!r}") from exc
        except ValueError as exc:
            # JSONDecodeError on a 200 with a non-JSON body
            raise TransportFailure(f"{self.provider} returned a non-JSON body: {exc}") from exc

        if not isinstance(body, dict):
            raise TransportFailure(f"Invalid {self.provider} response format")
        return body


class OpenAIClient(LLMClient):
    """OpenAI API client."""

    url = "https://api.openai.com/v1/chat/completions"
    env_key = "OPENAI_API_KEY"
    provider = "OpenAI"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def call(self, messages: List[Message], max_tokens: int = 2048, temperature: float = 0.1) -> Optional[str]:
        payload = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        result = await self._post(self._headers(), payload)

        choices = result.get("choices")
        if not choices or not isinstance(choices, list) or not isinstance(choices[0], dict):
            raise TransportFailure(f"Invalid {self.provider} response format")

        message = choices[0].get("message")
        if not isinstance(message, dict):
            raise TransportFailure(f"Invalid {self.provider} response format: no message")

        content = message.get("content")
        if content is not None and not isinstance(content, str):
            raise TransportFailure(f"Invalid {self.provider} response format: non-text content")
        return content


class OpenRouterClient(OpenAIClient):
    """OpenRouter API client (OpenAI compatible)."""

    url = "https://openrouter.ai/api/v1/chat/completions"
    env_key = "OPENROUTER_API_KEY"
    provider = "OpenRouter"

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        headers["HTTP-Referer"] = "https://github.com/smart-python-logger"
        headers["X-Title"] = "Smart Python Logger"
        return headers


class AnthropicClient(LLMClient):
    """Anthropic API client."""

    url = "https://api.anthropic.com/v1/messages"
    env_key = "ANTHROPIC_API_KEY"
    provider = "Anthropic"

    async def call(self, messages: List[Message], max_tokens: int = 2048, temperature: float = 0.1) -> Optional[str]:
        headers = {
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
            "anthropic-version": "2023-06-01"
        }

        # Anthropic takes the system prompt outside the message list
        system_content = ""
        chat_messages = []

        for msg in messages:
            if msg["role"] == "system":
                system_content = msg["content"] or ""
            else:
                chat_messages.append(msg)

        payload = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": chat_messages,
        }

        if system_content:
            payload["system"] = system_content

        result = await self._post(headers, payload)

        blocks = result.get("content")
        if "content" not in result or not isinstance(blocks, (list, type(None))):
            raise TransportFailure(f"Invalid {self.provider} response format")
        if not blocks:
            return None
        if not isinstance(blocks[0], dict):
            raise TransportFailure(f"Invalid {self.provider} response format: bad content block")

        text = blocks[0].get("text")
        if text is not None and not isinstance(text, str):
            raise TransportFailure(f"Invalid {self.provider} response format: non-text content")
        return text


def create_llm_client(model: str) -> LLMClient:
    """Factory function to create appropriate LLM client based on model name."""
    if model.startswith(("openai/", "google/", "anthropic/")):
        return OpenRouterClient(model)
    elif model.startswith(("gpt-", "o1", "o3", "o4")):
        return OpenAIClient(model)
    elif model.startswith("claude-"):
        return AnthropicClient(model)
    else:
        # Default to OpenRouter for unknown models
        logger.warning(f"Unknown model format: {model}, defaulting to OpenRouter")
        return OpenRouterClient(model)
