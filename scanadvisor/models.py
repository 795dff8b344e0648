"""Finding models shared by the merge, enrichment and report stages."""

from pydantic import BaseModel, ConfigDict, Field

from .constants import UNKNOWN_FILE, UNKNOWN_LINE


class RawFinding(BaseModel):
    """One reported occurrence, as read from the scan report.

    ``severity`` is already on the high/medium/low scale when a RawFinding
    is built; merging relies on that.
    """

    model_config = ConfigDict(frozen=True)

    severity: str
    rule: str
    title: str
    file: str = UNKNOWN_FILE
    line: int | str = UNKNOWN_LINE
    code_snippet: str = ""
    description: str = ""
    cwe: str = ""


class Occurrence(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str = UNKNOWN_FILE
    line: int | str = UNKNOWN_LINE
    code_snippet: str = ""

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line}"


class CanonicalFinding(BaseModel):
    """All raw occurrences sharing one (rule, normalized title, severity) identity."""

    severity: str
    rule: str
    title: str
    file: str = UNKNOWN_FILE
    line: int | str = UNKNOWN_LINE
    code_snippet: str = ""
    description: str = ""
    cwe: str = ""
    occurrences: list[Occurrence] = Field(default_factory=list)
    recommendation: str | None = None

    @property
    def locations(self) -> list[str]:
        """Distinct ``file:line`` labels in first-seen order."""
        seen: set[str] = set()
        unique = []
        for occurrence in self.occurrences:
            if occurrence.location not in seen:
                seen.add(occurrence.location)
                unique.append(occurrence.location)
        return unique

    def assign_recommendation(self, text: str) -> None:
        """Set the recommendation. It can only be set once."""
        if self.recommendation is not None:
            raise ValueError(f"Recommendation already set for rule {self.rule}")
        self.recommendation = text


class Summary(BaseModel):
    total: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0
    files: list[str] = Field(default_factory=list)

    @property
    def files_affected(self) -> int:
        return len(self.files)


class ReportResult(BaseModel):
    findings: list[CanonicalFinding] = Field(default_factory=list)
    summary: Summary = Field(default_factory=Summary)
    raw_total: int = 0
    markdown: str = ""
