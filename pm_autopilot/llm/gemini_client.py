"""
Gemini generateContent client.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from pm_autopilot.core.config import GeminiSettings, settings
from pm_autopilot.core.exceptions import ConfigurationError, GeminiError
from pm_autopilot.core.logging import get_logger

logger = get_logger(__name__)


class LLMClient(ABC):
    """A text-in, text-out generative model."""

    @abstractmethod
    async def generate(self, prompt: str, max_output_tokens: int) -> str:
        """
        Generate a completion for a single-turn prompt.

        Raises:
            UpstreamServiceError: If the model call fails or returns no text
        """
        ...

    async def close(self) -> None:
        """Release any held resources."""


class GeminiClient(LLMClient):
    """
    Client for the Gemini ``generateContent`` endpoint.

    Each call is a single POST with no retry. Sampling parameters come from
    configuration; only the output token ceiling varies per call.
    """

    def __init__(
        self,
        config: Optional[GeminiSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            config: Gemini settings (defaults to application settings)
            transport: Custom httpx transport (used by tests)
        """
        self.config = config or settings.gemini
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url.rstrip("/"),
                timeout=httpx.Timeout(self.config.timeout),
                headers={"Content-Type": "application/json"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def build_payload(self, prompt: str, max_output_tokens: int) -> dict[str, Any]:
        """Build the request body for a single user turn."""
        return {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "temperature": self.config.temperature,
                "topK": self.config.top_k,
                "topP": self.config.top_p,
                "maxOutputTokens": max_output_tokens,
            },
        }

    async def generate(self, prompt: str, max_output_tokens: int) -> str:
        """
        Send the prompt and return the first candidate's text.

        Raises:
            ConfigurationError: If no API key is configured
            GeminiError: On HTTP failure or a response without text
        """
        if not self.config.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured")

        client = await self._get_client()
        endpoint = f"/models/{self.config.model}:generateContent"

        try:
            response = await client.post(
                endpoint,
                json=self.build_payload(prompt, max_output_tokens),
                headers={"X-goog-api-key": self.config.api_key},
            )
            response.raise_for_status()
            data = response.json()

        except httpx.HTTPStatusError as e:
            logger.error(
                "Gemini request failed",
                model=self.config.model,
                status_code=e.response.status_code,
                response_text=e.response.text[:500],
            )
            raise GeminiError(
                f"HTTP {e.response.status_code}",
                details={"model": self.config.model, "status_code": e.response.status_code},
            ) from e

        except httpx.RequestError as e:
            logger.error("Gemini request error", model=self.config.model, error=str(e))
            raise GeminiError(
                f"Request failed: {e}", details={"model": self.config.model}
            ) from e

        except ValueError as e:
            logger.error("Gemini returned invalid JSON", model=self.config.model)
            raise GeminiError("Response body is not valid JSON") from e

        text = self._extract_text(data)
        if not text:
            logger.error("Gemini response had no text", model=self.config.model)
            raise GeminiError(
                "No generated text in response", details={"model": self.config.model}
            )

        logger.info(
            "Gemini generation completed",
            model=self.config.model,
            prompt_chars=len(prompt),
            response_chars=len(text),
        )
        return text

    @staticmethod
    def _extract_text(data: Any) -> Optional[str]:
        """Read ``candidates[0].content.parts[0].text`` if present."""
        try:
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            return None
