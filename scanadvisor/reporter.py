"""Markdown report rendering"""

import re
from collections.abc import Sequence
from pathlib import Path

from .constants import (
    CODE_FENCE_LANGUAGE,
    LOCATION_LABEL_WIDTH,
    REPORT_TITLE,
    SEVERITY_HIGH,
    SEVERITY_LOW,
    SEVERITY_MEDIUM,
    SEVERITY_RANK,
)
from .models import CanonicalFinding, Summary

_RECOMMENDATION_LABEL_RE = re.compile(r"^\*\*recommendation:\*\*\s*", re.IGNORECASE)


def summarize(findings: Sequence[CanonicalFinding]) -> Summary:
    """Counts per severity and the distinct affected files."""
    return Summary(
        total=len(findings),
        high=sum(1 for f in findings if f.severity == SEVERITY_HIGH),
        medium=sum(1 for f in findings if f.severity == SEVERITY_MEDIUM),
        low=sum(1 for f in findings if f.severity == SEVERITY_LOW),
        files=sorted({f.file for f in findings}),
    )


def sort_findings(findings: Sequence[CanonicalFinding]) -> list[CanonicalFinding]:
    """Highest severity first; ties keep their merge order."""
    return sorted(findings, key=lambda f: SEVERITY_RANK.get(f.severity, 0), reverse=True)


def strip_recommendation_label(text: str) -> str:
    return _RECOMMENDATION_LABEL_RE.sub("", text.strip())


class MarkdownReporter:
    """Renders enriched findings as a Markdown document"""

    @staticmethod
    def generate(findings: Sequence[CanonicalFinding], summary: Summary, raw_total: int) -> str:
        """
        Generate markdown content.

        Args:
            findings: Enriched canonical findings in merge order
            summary: Aggregate counts for the summary block
            raw_total: Number of findings in the scan report before merging

        Returns:
            Markdown formatted string
        """
        lines = [
            f"# {REPORT_TITLE}",
            "",
            "## Summary",
            f"- Total Raw Findings: {raw_total}",
            f"- Unique Issues: {summary.total}",
            f"- High: {summary.high}",
            f"- Medium: {summary.medium}",
            f"- Low: {summary.low}",
            f"- Files Affected: {summary.files_affected}",
            "",
            "---",
            "",
            "## Findings",
            "",
        ]

        for index, finding in enumerate(sort_findings(findings), start=1):
            lines.extend(MarkdownReporter._finding_section(index, finding))

        return "\n".join(lines)

    @staticmethod
    def _finding_section(index: int, finding: CanonicalFinding) -> list[str]:
        lines = [
            f"### {index}. {finding.title}",
            f"- **Severity:** {finding.severity.upper()}",
            f"- **Rule:** {finding.rule}",
            f"- **Line(s):** {', '.join(finding.locations)}",
        ]

        if any(o.code_snippet for o in finding.occurrences):
            lines.append("- **Code:**")
            lines.append("")
            lines.append(f"```{CODE_FENCE_LANGUAGE}")
            for occurrence in finding.occurrences:
                label = occurrence.location.ljust(LOCATION_LABEL_WIDTH)
                lines.append(f"{label} | {occurrence.code_snippet.strip()}")
            lines.append("```")

        if finding.recommendation:
            lines.append(f"- **Recommendation:** {strip_recommendation_label(finding.recommendation)}")

        lines.extend(["", "---", ""])
        return lines

    @staticmethod
    def save(markdown: str, output_path: str | Path) -> Path:
        """Write the document, creating parent directories."""
        output_file = Path(output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(markdown, encoding="utf-8")
        return output_file


def render_report(findings: Sequence[CanonicalFinding], summary: Summary, raw_total: int) -> str:
    return MarkdownReporter.generate(findings, summary, raw_total)
