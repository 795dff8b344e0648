"""
Text generation client used to obtain remediation recommendations.

Two interchangeable backends are supported, both speaking the
chat-completions wire format. Exactly one is active per process, chosen
by ``MODEL_PROVIDER``.
"""

import logging
import threading
from typing import Any

import httpx
from pydantic import BaseModel

from ..constants import DEFAULT_REQUEST_TIMEOUT, DEFAULT_TEMPERATURE, PROVIDER_BACKENDS
from ..core.config import Settings
from ..core.exceptions import APIError, AuthenticationError, NetworkError, RateLimitError

logger = logging.getLogger(__name__)


class PromptFields(BaseModel):
    rule: str
    title: str
    description: str = ""


def build_prompt(fields: PromptFields) -> str:
    """Build the remediation prompt for one finding."""
    return f"""
You are a senior DevSecOps assistant.
For the following security issue, provide a short, actionable remediation recommendation and a reference link if possible.

Rule: {fields.rule}
Title: {fields.title}
Description: {fields.description}

Recommendation:
"""


class ProviderClient:
    """Thin adapter over one chat-completions backend."""

    def __init__(
        self,
        name: str,
        api_key: str,
        base_url: str,
        model: str,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> None:
        self.name = name
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self.client = httpx.Client(timeout=timeout, headers=self.headers)

    def __enter__(self) -> "ProviderClient":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        self.client.close()

    def complete(self, fields: PromptFields, temperature: float = DEFAULT_TEMPERATURE) -> str:
        """
        Ask the backend for a recommendation.

        Args:
            fields: Rule, title and description of the finding
            temperature: Sampling temperature

        Returns:
            Trimmed text of the single reply choice

        Raises:
            RateLimitError: The backend answered HTTP 429
            AuthenticationError: The backend rejected the credential
            APIError: Any other error response or an unreadable body
            NetworkError: The backend could not be reached
        """
        payload = {
            "model": self.model,
            "messages": [{"role": "user", "content": build_prompt(fields)}],
            "temperature": temperature,
        }

        try:
            response = self.client.post(f"{self.base_url}/chat/completions", json=payload)
        except httpx.RequestError as e:
            raise NetworkError(f"{self.name} request failed: {e}") from e

        if response.status_code == 429:
            raise RateLimitError(
                f"{self.name} rate limit exceeded",
                retry_after=_retry_after(response),
            )
        if response.status_code in (401, 403):
            raise AuthenticationError(f"{self.name} rejected the API key (HTTP {response.status_code})")
        if response.is_error:
            raise APIError(
                f"{self.name} error: HTTP {response.status_code}",
                status_code=response.status_code,
                response_body=response.text,
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise APIError(
                f"{self.name} returned an unexpected response: {e}",
                status_code=response.status_code,
                response_body=response.text,
            ) from e

        if not isinstance(content, str) or not content.strip():
            raise APIError(f"{self.name} returned no text content", status_code=response.status_code)
        return content.strip()


def _retry_after(response: httpx.Response) -> float | None:
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def create_provider_client(settings: Settings) -> ProviderClient:
    """Build the client for the backend selected in settings.

    Raises:
        InvalidConfigError: Unknown provider name
        MissingConfigError: The selected provider has no API key
    """
    api_key = settings.provider_api_key()
    base_url, model, _ = PROVIDER_BACKENDS[settings.model_provider]
    logger.info(f"Using {settings.model_provider} provider with model {model}")
    return ProviderClient(
        name=settings.model_provider,
        api_key=api_key,
        base_url=base_url,
        model=model,
        timeout=settings.request_timeout,
    )


# Global instance
_provider_client: ProviderClient | None = None
_provider_lock = threading.Lock()


def get_provider_client(settings: Settings | None = None) -> ProviderClient:
    """Get or create the process-wide provider client."""
    global _provider_client
    if _provider_client is None:
        with _provider_lock:
            if _provider_client is None:
                _provider_client = create_provider_client(settings or Settings.from_env())
    return _provider_client


def reset_provider_client() -> None:
    """Drop the process-wide client (used by tests and on shutdown)."""
    global _provider_client
    with _provider_lock:
        if _provider_client is not None:
            _provider_client.close()
        _provider_client = None
