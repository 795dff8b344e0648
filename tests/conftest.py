"""Shared fixtures: findings, scan reports and the in-memory D1 store."""

import logging
from typing import Any

import pytest
from fakes import FakeD1Store

from scanadvisor.cache import RecommendationCache
from scanadvisor.models import RawFinding


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """configure_logging detaches the package logger from the root handlers."""
    logger = logging.getLogger("scanadvisor")
    yield
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def d1_store():
    return FakeD1Store()


@pytest.fixture
def cache(d1_store):
    return RecommendationCache(d1_store)


@pytest.fixture
def make_raw():
    """Factory for raw findings with sensible defaults."""

    def _make(**overrides: Any) -> RawFinding:
        values: dict[str, Any] = {
            "severity": "high",
            "rule": "javascript.lang.security.detect-eval",
            "title": "Detected eval usage",
            "file": "src/app.js",
            "line": 10,
            "code_snippet": "eval(input)",
            "description": "Use of eval",
            "cwe": "CWE-95",
        }
        values.update(overrides)
        return RawFinding(**values)

    return _make


@pytest.fixture
def scan_report_data():
    """Semgrep output with a duplicate pair, a medium and a low finding."""
    return {
        "results": [
            {
                "check_id": "R1",
                "path": "src/a.js",
                "start": {"line": 3},
                "extra": {
                    "severity": "ERROR",
                    "message": "Unsafe eval on function argument `x`",
                    "lines": "eval(x)",
                    "metadata": {"short_description": "Eval of untrusted input", "cwe": ["CWE-95: Eval Injection"]},
                },
            },
            {
                "check_id": "R2",
                "path": "src/b.js",
                "start": {"line": 7},
                "extra": {
                    "severity": "INFO",
                    "message": "Console logging",
                    "lines": "console.log(x)",
                    "metadata": {"short_description": "Debug output"},
                },
            },
            {
                "check_id": "R1",
                "path": "src/c.js",
                "start": {"line": 12},
                "extra": {
                    "severity": "ERROR",
                    "message": "Unsafe eval on function argument `userInput`",
                    "lines": "eval(userInput)",
                    "metadata": {"short_description": "Eval of untrusted input", "cwe": "CWE-95"},
                },
            },
            {
                "check_id": "R3",
                "path": "src/a.js",
                "start": {"line": 20},
                "extra": {
                    "severity": "WARNING",
                    "message": "Weak hash",
                    "lines": "md5(data)",
                    "metadata": {"short_description": "MD5 is weak"},
                },
            },
        ]
    }
