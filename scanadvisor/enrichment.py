"""
Attach remediation recommendations to canonical findings.

Each high or medium finding is resolved through the recommendation cache
first and the text generation provider second. Provider calls run under a
bounded retry state machine:

    Attempting(n) --success--------------------------> Done(text)
    Attempting(n) --rate limited, n < max--(sleep)---> Attempting(n + 1)
    Attempting(n) --rate limited, n == max-----------> Failed
    Attempting(n) --any other client error-----------> Failed

Backoff before Attempting(n + 1) is 2**n seconds plus up to 500ms jitter.
Failed findings get the placeholder text; cache errors are not caught here.
"""

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass

from .cache import RecommendationCache
from .clients.llm_client import PromptFields, ProviderClient
from .constants import (
    BACKOFF_BASE_SECONDS,
    BACKOFF_MAX_JITTER_SECONDS,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TEMPERATURE,
    ENRICHED_SEVERITIES,
    NO_RECOMMENDATION,
)
from .core.exceptions import APIError, ClientError, RateLimitError
from .fingerprint import fingerprint
from .models import CanonicalFinding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Attempting:
    attempt: int


@dataclass(frozen=True)
class Done:
    text: str


@dataclass(frozen=True)
class Failed:
    error: ClientError
    attempts: int


RetryState = Attempting | Done | Failed


@dataclass
class EnrichmentStats:
    skipped: int = 0
    cache_hits: int = 0
    provider_calls: int = 0
    generated: int = 0
    fallbacks: int = 0


class EnrichmentOrchestrator:
    """Resolves a recommendation for every canonical finding, one at a time."""

    def __init__(
        self,
        cache: RecommendationCache,
        provider: ProviderClient,
        temperature: float = DEFAULT_TEMPERATURE,
        max_retries: int = DEFAULT_MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep,
        jitter: Callable[[float, float], float] = random.uniform,
    ) -> None:
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")
        self.cache = cache
        self.provider = provider
        self.temperature = temperature
        self.max_retries = max_retries
        self._sleep = sleep
        self._jitter = jitter
        self.stats = EnrichmentStats()

    def enrich(self, findings: list[CanonicalFinding]) -> list[CanonicalFinding]:
        """Set ``recommendation`` on each finding in place and return the same list."""
        for finding in findings:
            finding.assign_recommendation(self.resolve(finding))
        return findings

    def resolve(self, finding: CanonicalFinding) -> str:
        """Recommendation text for a single finding."""
        if finding.severity not in ENRICHED_SEVERITIES:
            self.stats.skipped += 1
            return NO_RECOMMENDATION

        key = fingerprint(finding)
        log_extra = {"rule": finding.rule, "fingerprint": key[:8], "severity": finding.severity}
        logger.info(f"Processing {finding.rule}: {_preview(finding.title)}", extra=log_extra)

        cached = self.cache.get(key)
        if cached is not None:
            self.stats.cache_hits += 1
            logger.info(
                f"Cache hit for {key[:8]}, using stored recommendation",
                extra={**log_extra, "event": "cache_hit", "cache": "hit"},
            )
            return cached

        logger.info(
            f"Cache miss for {key[:8]}, requesting recommendation",
            extra={**log_extra, "event": "cache_miss", "cache": "miss"},
        )
        fields = PromptFields(rule=finding.rule, title=finding.title, description=finding.description)
        outcome = self.request_recommendation(fields)

        if isinstance(outcome, Failed):
            self.stats.fallbacks += 1
            logger.warning(
                f"Failed to get recommendation for {finding.rule} after "
                f"{outcome.attempts} attempt(s): {outcome.error}",
                extra={**log_extra, "event": "enrichment_failed", "error": str(outcome.error)},
            )
            return NO_RECOMMENDATION

        self.stats.generated += 1
        if self.cache.put(key, outcome.text):
            logger.info(f"Stored recommendation {key[:8]} in cache", extra={**log_extra, "event": "cache_store"})
        return outcome.text

    def request_recommendation(self, fields: PromptFields) -> Done | Failed:
        """Drive the retry state machine until it reaches Done or Failed."""
        state: RetryState = Attempting(1)
        while isinstance(state, Attempting):
            state = self._attempt(state, fields)
        return state

    def _attempt(self, state: Attempting, fields: PromptFields) -> RetryState:
        self.stats.provider_calls += 1
        try:
            text = self.provider.complete(fields, self.temperature)
        except RateLimitError as e:
            logger.warning(
                f"Provider attempt {state.attempt} rate limited: {e}",
                extra={"event": "provider_attempt_failed", "attempt": state.attempt, "error": str(e)},
            )
            if state.attempt >= self.max_retries:
                return Failed(error=e, attempts=state.attempt)

            delay = self.backoff_delay(state.attempt)
            logger.info(
                f"Retrying in {delay:.2f}s",
                extra={"event": "provider_retry", "attempt": state.attempt, "delay": delay},
            )
            self._sleep(delay)
            return Attempting(state.attempt + 1)
        except ClientError as e:
            logger.warning(
                f"Provider attempt {state.attempt} failed: {e}",
                extra={"event": "provider_attempt_failed", "attempt": state.attempt, "error": str(e)},
            )
            return Failed(error=e, attempts=state.attempt)

        text = text.strip() if isinstance(text, str) else ""
        if not text:
            logger.warning(
                f"Provider attempt {state.attempt} returned an empty recommendation",
                extra={"event": "provider_attempt_failed", "attempt": state.attempt, "error": "empty"},
            )
            return Failed(error=APIError("Provider returned no text content"), attempts=state.attempt)

        return Done(text=text)

    def backoff_delay(self, attempt: int) -> float:
        """Seconds to wait after a rate-limited ``attempt``."""
        return BACKOFF_BASE_SECONDS ** attempt + self._jitter(0, BACKOFF_MAX_JITTER_SECONDS)


def _preview(text: str, limit: int = 60) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")
