"""Client for an OpenAI-compatible chat-completion service (DeepSeek by default)."""

import os
import time
from dataclasses import dataclass

import httpx

from dompet.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_AI_MODEL = "deepseek-chat"
DEFAULT_AI_BASE_URL = "https://api.deepseek.com/v1"
AI_TIMEOUT_SECONDS = 20.0
DEFAULT_SYSTEM_PROMPT = "You are a financial assistant that returns concise JSON only."


class AICompletionUnavailable(RuntimeError):
    """Raised when the completion service is unconfigured, unreachable or returns an error."""


@dataclass(frozen=True)
class AISettings:
    api_key: str | None
    model: str = DEFAULT_AI_MODEL
    base_url: str = DEFAULT_AI_BASE_URL
    timeout: float = AI_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls) -> "AISettings":
        """Read DOMPET_AI_API_KEY, DOMPET_AI_MODEL and DOMPET_AI_BASE_URL."""
        api_key = os.environ.get("DOMPET_AI_API_KEY", "").strip() or None
        model = os.environ.get("DOMPET_AI_MODEL", "").strip() or DEFAULT_AI_MODEL
        base_url = os.environ.get("DOMPET_AI_BASE_URL", "").strip() or DEFAULT_AI_BASE_URL
        return cls(api_key=api_key, model=model, base_url=base_url)

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)


class AICompletionClient:
    """Send one prompt, get the first choice's text back.

    Any failure (missing key, timeout, transport error, non-2xx status or a
    response without a text choice) raises AICompletionUnavailable so the
    caller can fall back in one place.
    """

    def __init__(
        self,
        settings: AISettings,
        client: httpx.Client | None = None,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
    ) -> None:
        self.settings = settings
        self.system_prompt = system_prompt
        self._client = client

    def complete(self, prompt: str, temperature: float = 0.2) -> str:
        if not self.settings.enabled:
            raise AICompletionUnavailable("DOMPET_AI_API_KEY is not configured")

        url = f"{self.settings.base_url.rstrip('/')}/chat/completions"
        payload = {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": self.system_prompt},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
        }
        headers = {"Authorization": f"Bearer {self.settings.api_key}"}

        logger.info("Calling completion model %s (prompt length %d)", self.settings.model, len(prompt))
        start_time = time.time()
        try:
            if self._client is not None:
                response = self._client.post(url, json=payload, headers=headers, timeout=self.settings.timeout)
            else:
                response = httpx.post(url, json=payload, headers=headers, timeout=self.settings.timeout)
        except httpx.TimeoutException as e:
            logger.warning("Completion service timed out after %.0f seconds", self.settings.timeout)
            raise AICompletionUnavailable(f"Completion service timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("Failed to reach completion service: %s", e)
            raise AICompletionUnavailable(f"Failed to reach completion service: {e}") from e
        logger.info("Completion service returned in %.2f seconds", time.time() - start_time)

        if not response.is_success:
            logger.warning("Completion service error: %s", response.status_code)
            raise AICompletionUnavailable(f"Completion service error: {response.status_code}")

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AICompletionUnavailable("Completion service returned an unexpected payload") from e
        if not isinstance(content, str):
            raise AICompletionUnavailable("Completion service returned no text")
        return content
