"""Read a Semgrep-style JSON scan report into raw findings.

Missing optional fields degrade to empty strings or the unknown line
marker. Only structural problems (no file, invalid JSON, no ``results``
list) raise.
"""

import json
import logging
from pathlib import Path
from typing import Any

from .constants import UNKNOWN_FILE, UNKNOWN_LINE
from .core.exceptions import InvalidReportError, ReportNotFoundError
from .models import RawFinding
from .normalizer import normalize_severity

logger = logging.getLogger(__name__)


def load_scan_report(path: str | Path) -> list[RawFinding]:
    """Load and parse a scan report file.

    Raises:
        ReportNotFoundError: If the file does not exist
        InvalidReportError: If the file is not a valid scan report
    """
    report_path = Path(path)
    if not report_path.is_file():
        raise ReportNotFoundError(f"Scan JSON file not found: {report_path}")

    try:
        data = json.loads(report_path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as e:
        raise InvalidReportError(f"Scan JSON file is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise InvalidReportError(f"Scan JSON file is not valid JSON: {e}") from e

    findings = parse_scan_results(data)
    logger.info(f"Loaded {len(findings)} raw findings from {report_path}")
    return findings


def parse_scan_results(data: Any) -> list[RawFinding]:
    """Convert the ``results`` array of a decoded report."""
    if not isinstance(data, dict) or not isinstance(data.get("results"), list):
        raise InvalidReportError("Scan report has no 'results' list")

    return [_parse_result(result) for result in data["results"] if isinstance(result, dict)]


def _parse_result(result: dict[str, Any]) -> RawFinding:
    extra = _as_dict(result.get("extra"))
    metadata = _as_dict(extra.get("metadata"))
    start = _as_dict(result.get("start"))
    rule = str(result.get("check_id") or "")

    line = start.get("line")
    if not isinstance(line, int) or isinstance(line, bool):
        line = UNKNOWN_LINE

    return RawFinding(
        severity=normalize_severity(extra.get("severity")),
        rule=rule,
        title=str(extra.get("message") or rule),
        file=str(result.get("path") or UNKNOWN_FILE),
        line=line,
        code_snippet=str(extra.get("lines") or ""),
        description=str(metadata.get("short_description") or ""),
        cwe=_first_cwe(metadata.get("cwe")),
    )


def _first_cwe(value: Any) -> str:
    if isinstance(value, list):
        return str(value[0]) if value else ""
    return str(value or "")


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}
