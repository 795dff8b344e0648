"""End-to-end processing of one scan report."""

import logging
from pathlib import Path

from .cache import RecommendationCache
from .clients.d1_client import D1Client
from .clients.llm_client import get_provider_client
from .core.config import Settings
from .enrichment import EnrichmentOrchestrator
from .merger import merge_findings
from .models import ReportResult
from .parser import load_scan_report
from .reporter import MarkdownReporter, summarize

logger = logging.getLogger(__name__)


class ReportProcessor:
    """Load, merge, enrich and render a scan report."""

    def __init__(self, orchestrator: EnrichmentOrchestrator) -> None:
        self.orchestrator = orchestrator

    def close(self) -> None:
        """Release the cache store connection."""
        self.orchestrator.cache.close()

    def process_report(self, report_path: str | Path, output_path: str | Path | None = None) -> ReportResult:
        """
        Process a scan report.

        Args:
            report_path: Semgrep JSON file
            output_path: Where to write the Markdown report, if anywhere

        Returns:
            ReportResult with the enriched findings and summary
        """
        raw_findings = load_scan_report(report_path)
        findings = merge_findings(raw_findings)
        logger.info(f"Merged {len(raw_findings)} raw findings into {len(findings)} unique issues")

        self.orchestrator.enrich(findings)

        summary = summarize(findings)
        markdown = MarkdownReporter.generate(findings, summary, len(raw_findings))

        if output_path is not None:
            written = MarkdownReporter.save(markdown, output_path)
            logger.info(
                f"Report written to {written}",
                extra={"event": "report_written", "path": str(written)},
            )
        else:
            logger.debug("No output path given, report kept in memory")

        stats = self.orchestrator.stats
        logger.info(
            f"Enrichment done: {stats.cache_hits} cache hits, {stats.generated} generated, "
            f"{stats.fallbacks} fallbacks, {stats.skipped} skipped",
            extra={"findings": summary.total, "raw_findings": len(raw_findings)},
        )

        return ReportResult(
            findings=findings,
            summary=summary,
            raw_total=len(raw_findings),
            markdown=markdown,
        )


def build_processor(settings: Settings) -> ReportProcessor:
    """Wire the cache store and provider from settings.

    Raises:
        ConfigurationError: If the settings are incomplete
    """
    settings.validate_for_run()
    store = D1Client(settings.d1_endpoint(), settings.d1_token(), timeout=settings.request_timeout)
    orchestrator = EnrichmentOrchestrator(
        cache=RecommendationCache(store),
        provider=get_provider_client(settings),
        temperature=settings.temperature,
        max_retries=settings.max_retries,
    )
    return ReportProcessor(orchestrator)
