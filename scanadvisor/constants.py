"""Constants and configuration values for scanadvisor.

This module centralizes magic numbers, endpoints and fixed strings
that are used across the codebase for easier maintenance.
"""

# =============================================================================
# Severity
# =============================================================================

SEVERITY_HIGH = "high"
SEVERITY_MEDIUM = "medium"
SEVERITY_LOW = "low"

# Scanner vocabulary -> fixed three-level scale. Anything else is "medium".
SEVERITY_ALIASES = {
    "ERROR": SEVERITY_HIGH,
    "CRITICAL": SEVERITY_HIGH,
    "HIGH": SEVERITY_HIGH,
    "WARNING": SEVERITY_MEDIUM,
    "MEDIUM": SEVERITY_MEDIUM,
    "INFO": SEVERITY_LOW,
    "LOW": SEVERITY_LOW,
}

DEFAULT_SEVERITY = SEVERITY_MEDIUM

# Report ordering, highest first
SEVERITY_RANK = {
    SEVERITY_HIGH: 3,
    SEVERITY_MEDIUM: 2,
    SEVERITY_LOW: 1,
}

# Severities that are worth spending a provider call on
ENRICHED_SEVERITIES = frozenset({SEVERITY_HIGH, SEVERITY_MEDIUM})


# =============================================================================
# Findings
# =============================================================================

UNKNOWN_LINE = "?"
UNKNOWN_FILE = "?"

NO_RECOMMENDATION = "No recommendation available."


# =============================================================================
# Enrichment / Retry
# =============================================================================

DEFAULT_TEMPERATURE = 0.0
DEFAULT_MAX_RETRIES = 5

# Backoff before attempt n+1 is 2**n seconds plus up to this much jitter
BACKOFF_BASE_SECONDS = 2
BACKOFF_MAX_JITTER_SECONDS = 0.5

DEFAULT_REQUEST_TIMEOUT = 60.0


# =============================================================================
# Text generation providers
# =============================================================================

DEFAULT_MODEL_PROVIDER = "openai"

PROVIDER_OPENAI = "openai"
PROVIDER_DEEPSEEK = "deepseek"

# name -> (base URL, model, env var holding the key)
PROVIDER_BACKENDS = {
    PROVIDER_OPENAI: ("https://api.openai.com/v1", "gpt-4.1", "OPENAI_API_KEY"),
    PROVIDER_DEEPSEEK: ("https://api.deepseek.com", "deepseek-chat", "DEEPSEEK_API_KEY"),
}


# =============================================================================
# Recommendation cache (Cloudflare D1)
# =============================================================================

D1_QUERY_URL = (
    "https://api.cloudflare.com/client/v4/accounts/{account_id}"
    "/d1/database/{database_id}/query"
)

RECOMMENDATIONS_TABLE = "recommendations"


# =============================================================================
# Report rendering
# =============================================================================

REPORT_TITLE = "Security Scan Report"
CODE_FENCE_LANGUAGE = "js"
LOCATION_LABEL_WIDTH = 25
