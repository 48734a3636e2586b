"""Chat-completions client for LLM-backed review capabilities."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


@dataclass
class LLMConfig:
    """Configuration for the chat-completions client."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = "gpt-4o-mini"
    timeout: int = 120


class LLMClient:
    """Client for an OpenAI-compatible ``/chat/completions`` endpoint."""

    def __init__(self, config: LLMConfig) -> None:
        """Initialize the client.

        Args:
            config: Configuration for the client
        """
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            },
            timeout=config.timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "LLMClient":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.3,
    ) -> str:
        """Send one chat completion request and return the assistant text.

        Raises:
            httpx.HTTPStatusError: On a non-2xx response
            RuntimeError: If the response carries no message content
        """
        body = {
            "model": model or self.config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
        }

        logger.debug(f"Requesting completion from {body['model']}")
        response = await self._client.post("/chat/completions", json=body)
        response.raise_for_status()

        data = response.json()
        choices = data.get("choices") or []
        if not choices:
            raise RuntimeError("Completion response contained no choices")
        content = choices[0].get("message", {}).get("content")
        if content is None:
            raise RuntimeError("Completion response contained no message content")
        return content

    async def complete_json(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.3,
    ) -> dict[str, Any]:
        """Completion whose answer is parsed as a JSON object."""
        content = await self.complete(
            system_prompt=system_prompt,
            user_prompt=user_prompt,
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return parse_json_response(content)


def parse_json_response(content: str) -> dict[str, Any]:
    """Parse the JSON object in a model answer.

    The object may be wrapped in a markdown code fence or surrounded by
    prose.

    Raises:
        ValueError: If the answer holds no JSON object
    """
    content = content.strip()

    fenced = re.search(r"```(?:json)?\s*([\s\S]*?)```", content)
    if fenced:
        content = fenced.group(1).strip()

    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        # Prose around the object
        start, end = content.find("{"), content.rfind("}")
        if start == -1 or end < start:
            raise ValueError("Model answer contains no JSON object") from None
        data = json.loads(content[start : end + 1])

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
