"""Core utilities for configuration, errors and logging."""

from .config import Settings
from .exceptions import (
    APIError,
    AuthenticationError,
    ClientError,
    ConfigurationError,
    InvalidConfigError,
    InvalidReportError,
    MissingConfigError,
    NetworkError,
    RateLimitError,
    ReportError,
    ReportNotFoundError,
    ScanAdvisorError,
)
from .logging_config import EnrichmentLogFormatter, configure_logging

__all__ = [
    "APIError",
    "AuthenticationError",
    "ClientError",
    "ConfigurationError",
    "EnrichmentLogFormatter",
    "InvalidConfigError",
    "InvalidReportError",
    "MissingConfigError",
    "NetworkError",
    "RateLimitError",
    "ReportError",
    "ReportNotFoundError",
    "ScanAdvisorError",
    "Settings",
    "configure_logging",
]
