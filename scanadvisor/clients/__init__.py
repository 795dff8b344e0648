"""Clients for the recommendation store and the text generation backends."""

from .d1_client import D1Client, D1QueryResult
from .llm_client import (
    PromptFields,
    ProviderClient,
    build_prompt,
    create_provider_client,
    get_provider_client,
    reset_provider_client,
)

__all__ = [
    "D1Client",
    "D1QueryResult",
    "PromptFields",
    "ProviderClient",
    "build_prompt",
    "create_provider_client",
    "get_provider_client",
    "reset_provider_client",
]
