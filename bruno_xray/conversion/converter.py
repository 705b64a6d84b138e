"""
Bruno to Xray Converter.

Orchestrates a conversion: validates the input, groups request results by
Jira test issue, evaluates statuses, builds evidence and assembles the Xray
test execution import payload.

The conversion is a pure, single-pass transformation. It performs no I/O;
an external report must be read by the caller (see
``ReportAttachment.from_file``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from bruno_xray.conversion.evidence import build_target_test
from bruno_xray.conversion.grouper import group_iterations
from bruno_xray.errors import EmptyResultError, ParameterCountError
from bruno_xray.models.bruno import BrunoIteration
from bruno_xray.models.xray import ConversionReport, ReportAttachment, status_vocabulary

DEFAULT_DESCRIPTION = "Generated from Bruno JSON report"
DEFAULT_SUMMARY = "Bruno test execution"


@dataclass
class ConversionOptions:
    """
    Options of a Bruno to Xray conversion.

    Attributes:
        parameters: Data-driven parameter rows, one per iteration.
        use_cloud_format: Use Xray Cloud status names (PASSED/FAILED) instead
            of Xray Server/DC ones (PASS/FAIL).
        masked_values: Sensitive values to mask in all evidence.
        report_attachment: External report (e.g. Bruno HTML report) to attach
            to every test.
        test_execution_details: Test execution issue fields merged over the
            default description and summary (e.g. testEnvironments, testPlanKey).
        test_execution_key: Existing test execution issue to upload to.
    """

    parameters: Optional[List[Dict[str, str]]] = None
    use_cloud_format: bool = False
    masked_values: List[str] = field(default_factory=list)
    report_attachment: Optional[ReportAttachment] = None
    test_execution_details: Dict[str, Any] = field(default_factory=dict)
    test_execution_key: Optional[str] = None


def convert_bruno_to_xray(
    iterations: Sequence[BrunoIteration],
    options: Optional[ConversionOptions] = None,
) -> ConversionReport:
    """
    Convert Bruno results into an Xray test execution import payload.

    Args:
        iterations: Parsed Bruno iterations.
        options: Conversion options.

    Returns:
        The ConversionReport.

    Raises:
        ParameterCountError: If parameters are given but not one per iteration.
        EmptyResultError: If no request result contains a Jira issue key.
    """
    options = options or ConversionOptions()

    if options.parameters is not None and len(options.parameters) != len(iterations):
        raise ParameterCountError(len(iterations), len(options.parameters))

    report = ConversionReport(
        info=_execution_info(options.test_execution_details),
        test_execution_key=options.test_execution_key or None,
    )
    vocabulary = status_vocabulary(options.use_cloud_format)

    groups = group_iterations(iterations, options.parameters)
    for issue_key, test_iterations in groups.items():
        report.tests.append(
            build_target_test(
                issue_key,
                test_iterations,
                vocabulary,
                masked_values=options.masked_values,
                report_attachment=options.report_attachment,
            )
        )

    if not report.tests:
        raise EmptyResultError("No Xray tests found in Bruno JSON")

    failed = sum(1 for t in report.tests if t.status == vocabulary.failed)
    logger.info(
        f"Converted {len(iterations)} Bruno iteration(s) into {len(report.tests)} "
        f"Xray test(s): {len(report.tests) - failed} passed, {failed} failed"
    )
    return report


def _execution_info(details: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    info: Dict[str, Any] = {
        "description": DEFAULT_DESCRIPTION,
        "summary": DEFAULT_SUMMARY,
    }
    for key, value in (details or {}).items():
        if value is not None:
            info[key] = value
    return info
