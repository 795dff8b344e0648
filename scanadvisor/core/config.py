"""Runtime configuration for scanadvisor."""

import os
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..constants import (
    D1_QUERY_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MODEL_PROVIDER,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    PROVIDER_BACKENDS,
    PROVIDER_DEEPSEEK,
    PROVIDER_OPENAI,
)
from .exceptions import InvalidConfigError, MissingConfigError


class Settings(BaseModel):
    """Settings consumed by the enrichment pipeline."""

    model_config = ConfigDict(protected_namespaces=())

    model_provider: str = Field(
        default=DEFAULT_MODEL_PROVIDER, description="Text generation backend (openai or deepseek)"
    )
    openai_api_key: str | None = Field(default=None, description="OpenAI API key")
    deepseek_api_key: str | None = Field(default=None, description="DeepSeek API key")
    cloudflare_account_id: str | None = Field(default=None, description="Cloudflare account ID")
    d1_database_id: str | None = Field(default=None, description="D1 database ID")
    d1_api_key: str | None = Field(default=None, description="Cloudflare API token for D1")
    temperature: float = Field(
        default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0, description="Sampling temperature"
    )
    max_retries: int = Field(
        default=DEFAULT_MAX_RETRIES, ge=1, description="Maximum provider attempts per finding"
    )
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT, gt=0, description="HTTP timeout in seconds"
    )

    @field_validator("model_provider")
    @classmethod
    def _lower_provider(cls, value: str) -> str:
        return (value or DEFAULT_MODEL_PROVIDER).strip().lower()

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides: object) -> "Settings":
        """Build settings from environment variables.

        Args:
            environ: Mapping to read from (defaults to ``os.environ``)
            **overrides: Explicit values that win over the environment; ``None`` is ignored

        Returns:
            Populated Settings instance

        Raises:
            InvalidConfigError: If a value fails validation
        """
        env = os.environ if environ is None else environ
        values: dict[str, object] = {
            "model_provider": env.get("MODEL_PROVIDER") or DEFAULT_MODEL_PROVIDER,
            "openai_api_key": env.get("OPENAI_API_KEY") or None,
            "deepseek_api_key": env.get("DEEPSEEK_API_KEY") or None,
            "cloudflare_account_id": env.get("CLOUDFLARE_ACCOUNT_ID") or None,
            "d1_database_id": env.get("D1_DATABASE_ID") or None,
            "d1_api_key": env.get("D1_API_KEY") or None,
        }
        if env.get("SCANADVISOR_TEMPERATURE"):
            values["temperature"] = env["SCANADVISOR_TEMPERATURE"]
        if env.get("SCANADVISOR_MAX_RETRIES"):
            values["max_retries"] = env["SCANADVISOR_MAX_RETRIES"]
        if env.get("SCANADVISOR_TIMEOUT"):
            values["request_timeout"] = env["SCANADVISOR_TIMEOUT"]

        values.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return cls(**values)
        except ValidationError as e:
            raise InvalidConfigError(f"Invalid configuration: {e}") from e

    def provider_api_key(self) -> str:
        """Return the credential of the selected provider.

        Raises:
            InvalidConfigError: If the provider name is not supported
            MissingConfigError: If the provider's key is not set
        """
        if self.model_provider not in PROVIDER_BACKENDS:
            supported = ", ".join(sorted(PROVIDER_BACKENDS))
            raise InvalidConfigError(
                f"Unsupported MODEL_PROVIDER '{self.model_provider}'. Use one of: {supported}"
            )

        keys = {
            PROVIDER_OPENAI: self.openai_api_key,
            PROVIDER_DEEPSEEK: self.deepseek_api_key,
        }
        api_key = keys.get(self.model_provider)
        if not api_key:
            env_var = PROVIDER_BACKENDS[self.model_provider][2]
            raise MissingConfigError(f"{env_var} environment variable is missing or empty")
        return api_key

    def d1_endpoint(self) -> str:
        """Return the D1 query URL.

        Raises:
            MissingConfigError: If the account or database ID is not set
        """
        if not self.cloudflare_account_id or not self.d1_database_id:
            raise MissingConfigError(
                "CLOUDFLARE_ACCOUNT_ID or D1_DATABASE_ID environment variables are missing"
            )
        return D1_QUERY_URL.format(
            account_id=self.cloudflare_account_id, database_id=self.d1_database_id
        )

    def d1_token(self) -> str:
        if not self.d1_api_key:
            raise MissingConfigError("D1_API_KEY environment variable is missing or empty")
        return self.d1_api_key

    def validate_for_run(self) -> None:
        """Fail fast before any finding is processed."""
        self.provider_api_key()
        self.d1_endpoint()
        self.d1_token()
