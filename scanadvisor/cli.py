"""Command line entry point for scanadvisor"""

import os
import sys
from pathlib import Path

import click

from scanadvisor import __version__
from scanadvisor.clients.llm_client import reset_provider_client
from scanadvisor.constants import PROVIDER_BACKENDS
from scanadvisor.core.config import Settings
from scanadvisor.core.exceptions import ScanAdvisorError
from scanadvisor.core.logging_config import configure_logging
from scanadvisor.pipeline import build_processor


def _write_github_outputs(report_path: Path | None, findings_count: int) -> None:
    """Append step outputs when running inside GitHub Actions."""
    output_file = os.environ.get("GITHUB_OUTPUT")
    if not output_file:
        return
    with open(output_file, "a", encoding="utf-8") as handle:
        if report_path is not None:
            handle.write(f"report-path={report_path}\n")
        handle.write(f"findings-count={findings_count}\n")


@click.command()
@click.version_option(version=__version__, prog_name="scanadvisor")
@click.argument("scan_json", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Markdown report path (printed to stdout when omitted)",
)
@click.option(
    "--provider",
    type=click.Choice(sorted(PROVIDER_BACKENDS), case_sensitive=False),
    help="Text generation backend (overrides MODEL_PROVIDER)",
)
@click.option("--temperature", type=float, help="Sampling temperature (default 0.0)")
@click.option("--max-retries", type=click.IntRange(min=1), help="Provider attempts per finding (default 5)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="INFO",
    show_default=True,
)
@click.option("--json-logs", is_flag=True, help="Emit structured JSON log lines")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write JSON logs to this file")
def cli(
    scan_json: Path,
    output: Path | None,
    provider: str | None,
    temperature: float | None,
    max_retries: int | None,
    log_level: str,
    json_logs: bool,
    log_file: str | None,
) -> None:
    """Deduplicate a Semgrep scan report and add AI remediation advice."""
    configure_logging(log_level=log_level, json_format=json_logs, log_file=log_file)

    if not scan_json.is_file():
        click.echo(f"Error: Scan JSON file not found: {scan_json}", err=True)
        sys.exit(1)

    processor = None
    try:
        settings = Settings.from_env(
            model_provider=provider,
            temperature=temperature,
            max_retries=max_retries,
        )
        processor = build_processor(settings)
        result = processor.process_report(scan_json, output)
    except ScanAdvisorError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    finally:
        if processor is not None:
            processor.close()
        reset_provider_client()

    if output is not None:
        if not output.is_file():
            click.echo(f"Error: Report file was not generated: {output}", err=True)
            sys.exit(1)
        click.echo(f"Report generated successfully: {output}", err=True)
    else:
        click.echo(result.markdown)

    click.echo(f"Findings analyzed: {result.summary.total}", err=True)
    _write_github_outputs(output, result.summary.total)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
