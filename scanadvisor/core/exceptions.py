"""Custom exception hierarchy for scanadvisor.

Structural failures (bad configuration, unreadable scan report, an
unreachable cache) abort the run. Provider failures are caught by the
enrichment step and replaced with a placeholder recommendation.
"""


class ScanAdvisorError(Exception):
    """Base exception for all scanadvisor errors.

    All custom exceptions should inherit from this class to allow
    callers to catch all scanadvisor-specific errors with a single
    except clause when appropriate.
    """
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(ScanAdvisorError):
    """Base exception for configuration errors."""
    pass


class InvalidConfigError(ConfigurationError):
    """Configuration value is invalid (e.g. unknown provider name)."""
    pass


class MissingConfigError(ConfigurationError):
    """Required configuration is missing."""
    pass


# =============================================================================
# Scan Report Errors
# =============================================================================

class ReportError(ScanAdvisorError):
    """Base exception for scan report input errors."""
    pass


class ReportNotFoundError(ReportError):
    """Scan report file does not exist."""
    pass


class InvalidReportError(ReportError):
    """Scan report is not valid JSON or has no results list."""
    pass


# =============================================================================
# Client Errors (API/Network)
# =============================================================================

class ClientError(ScanAdvisorError):
    """Base exception for API client errors."""
    pass


class NetworkError(ClientError):
    """Network connectivity or request error."""
    pass


class APIError(ClientError):
    """Error returned by an external API."""

    def __init__(self, message: str, status_code: int | None = None, response_body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


class RateLimitError(ClientError):
    """API rate limit exceeded."""

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class AuthenticationError(ClientError):
    """API authentication failed (invalid/missing credentials)."""
    pass
