"""Merge raw scan occurrences into canonical findings."""

from collections.abc import Iterable

from .models import CanonicalFinding, Occurrence, RawFinding
from .normalizer import normalize_title


def identity_key(finding: RawFinding) -> str:
    """Identity of a finding: rule, normalized title and severity.

    Severity is used as given; it must already be normalized by the parser.
    """
    return f"{finding.rule}|{normalize_title(finding.title)}|{finding.severity}"


def merge_findings(raw_findings: Iterable[RawFinding]) -> list[CanonicalFinding]:
    """Group raw findings by identity key.

    The first occurrence of a key seeds the canonical finding (title,
    description and cwe come from it). Later occurrences only contribute
    their file, line and code snippet. Output follows first-seen key order.

    Args:
        raw_findings: Findings in report order

    Returns:
        Canonical findings, one per identity key
    """
    merged: dict[str, CanonicalFinding] = {}

    for raw in raw_findings:
        key = identity_key(raw)
        occurrence = Occurrence(file=raw.file, line=raw.line, code_snippet=raw.code_snippet)

        existing = merged.get(key)
        if existing is None:
            seed = raw.model_dump()
            seed["title"] = normalize_title(raw.title)
            merged[key] = CanonicalFinding(**seed, occurrences=[occurrence])
        else:
            existing.occurrences.append(occurrence)

    return list(merged.values())
