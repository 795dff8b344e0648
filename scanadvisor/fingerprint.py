"""Content address of a finding, used as the recommendation cache key."""

import hashlib

from .models import CanonicalFinding, RawFinding
from .normalizer import normalize_text, normalize_title


def fingerprint_input(finding: RawFinding | CanonicalFinding) -> str:
    rule = normalize_text(finding.rule)
    title = normalize_text(normalize_title(finding.title))
    description = normalize_text(finding.description)
    return f"{rule}|{title}|{description}"


def fingerprint(finding: RawFinding | CanonicalFinding) -> str:
    """SHA-256 hex digest of the normalized rule, title and description.

    Severity, file and line do not contribute, so the same issue pattern
    shares one cache entry wherever it appears.
    """
    return hashlib.sha256(fingerprint_input(finding).encode("utf-8")).hexdigest()
