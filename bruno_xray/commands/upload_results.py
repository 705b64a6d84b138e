"""
Upload Results Command.

Reads a Bruno JSON report (plus optional CSV dataset and HTML report),
converts it to Xray JSON and imports it into a Jira project.
"""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from bruno_xray.conversion import ConversionOptions, convert_bruno_to_xray
from bruno_xray.errors import BrunoResultsError
from bruno_xray.jira_client.xray_client import XrayClient
from bruno_xray.models.bruno import BrunoIteration, parse_bruno_results
from bruno_xray.models.xray import ConversionReport, ReportAttachment


@dataclass
class UploadOptions:
    """
    Inputs of an upload.

    Attributes:
        results_file: Bruno JSON report.
        project_key: Project for new test execution issues.
        csv_file: CSV dataset used for the data-driven run.
        html_report_file: Bruno HTML report to attach as evidence.
        masked_values: Sensitive values to mask in evidence.
        test_execution_key: Existing test execution issue to upload to.
        test_execution_details: Fields of the test execution issue.
    """

    results_file: Path
    project_key: str
    csv_file: Optional[Path] = None
    html_report_file: Optional[Path] = None
    masked_values: List[str] = field(default_factory=list)
    test_execution_key: Optional[str] = None
    test_execution_details: Dict[str, Any] = field(default_factory=dict)


def load_bruno_results(path: Path) -> List[BrunoIteration]:
    """Read and parse a Bruno JSON report."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise BrunoResultsError(f"Failed to parse Bruno JSON results {path}: {e}") from e
    return parse_bruno_results(data)


def load_parameters(path: Path) -> List[Dict[str, str]]:
    """Read the rows of a CSV dataset, keyed by column name."""
    with open(path, newline="", encoding="utf-8-sig") as f:
        return [dict(row) for row in csv.DictReader(f)]


def build_report(options: UploadOptions, use_cloud_format: bool) -> ConversionReport:
    """Load all inputs from disk and convert them."""
    iterations = load_bruno_results(options.results_file)
    parameters = load_parameters(options.csv_file) if options.csv_file else None
    report_attachment = (
        ReportAttachment.from_file(options.html_report_file)
        if options.html_report_file else None
    )
    return convert_bruno_to_xray(
        iterations,
        ConversionOptions(
            parameters=parameters,
            use_cloud_format=use_cloud_format,
            masked_values=list(options.masked_values),
            report_attachment=report_attachment,
            test_execution_details=dict(options.test_execution_details),
            test_execution_key=options.test_execution_key,
        ),
    )


def upload_results(client: XrayClient, options: UploadOptions) -> Dict[str, Any]:
    """
    Convert Bruno results and import them with the given client.

    Returns:
        The Xray import response.

    Raises:
        ConversionError: If the results cannot be converted.
        XrayClientError: If the import fails.
    """
    logger.info(f"Uploading Bruno results from {options.results_file}")
    report = build_report(options, use_cloud_format=client.is_cloud)
    return client.import_execution(report, options.project_key)
