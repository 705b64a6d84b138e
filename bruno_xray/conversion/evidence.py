"""
Evidence Builder.

Turns the grouped iterations of one Jira test issue into an Xray test entry:
overall status, per-iteration results for data-driven runs, and JSON summary
attachments. Sensitive values are masked before anything is encoded.
"""

from __future__ import annotations

import json
from typing import List, Optional, Sequence

from loguru import logger

from bruno_xray.conversion.evaluator import RequestSummary, has_failure, summarize_iteration
from bruno_xray.conversion.grouper import TestIteration
from bruno_xray.models.xray import (
    EvidenceItem,
    IterationSubResult,
    ReportAttachment,
    StatusVocabulary,
    TargetTest,
)
from bruno_xray.util.security import mask_sensitive_values

JSON_CONTENT_TYPE = "application/json"
HTML_CONTENT_TYPE = "text/html"
SUMMARY_FILENAME = "summary.json"


def build_target_test(
    test_key: str,
    iterations: Sequence[TestIteration],
    vocabulary: StatusVocabulary,
    masked_values: Optional[Sequence[str]] = None,
    report_attachment: Optional[ReportAttachment] = None,
) -> TargetTest:
    """
    Build the Xray test entry for one Jira test issue.

    A single iteration is reported as a flat test with one ``summary.json``
    attachment. Two or more iterations are reported as data-driven test runs
    with one attachment and one parameterized result per iteration.

    Args:
        test_key: Jira test issue key.
        iterations: The test's iterations, ascending by iteration index.
        vocabulary: Status names to use.
        masked_values: Sensitive values to mask in all attachments.
        report_attachment: External report to prepend to the evidence.

    Returns:
        The TargetTest entry.
    """
    masked_values = list(masked_values or [])
    test = TargetTest(test_key=test_key, status=vocabulary.passed)

    if report_attachment is not None:
        test.evidence.append(_report_evidence(report_attachment, masked_values))

    if len(iterations) == 1:
        summaries = summarize_iteration(iterations[0])
        test.evidence.append(_summary_evidence(summaries, SUMMARY_FILENAME, masked_values))
        test.status = vocabulary.of(has_failure(summaries))
    else:
        test.iterations = []
        for iteration in iterations:
            summaries = summarize_iteration(iteration)
            status = vocabulary.of(has_failure(summaries))
            number = iteration.iteration_index + 1
            test.iterations.append(
                IterationSubResult(
                    status=status,
                    parameters=iteration_parameters(iteration),
                )
            )
            test.evidence.append(
                _summary_evidence(summaries, f"iteration {number} {status}.json", masked_values)
            )
        if any(i.status == vocabulary.failed for i in test.iterations):
            test.status = vocabulary.failed

    logger.debug(
        f"Built test {test_key}: status={test.status}, "
        f"iterations={len(iterations)}, evidence={len(test.evidence)}"
    )
    return test


def iteration_parameters(iteration: TestIteration) -> dict:
    """
    Parameters reported for a data-driven iteration.

    The 1-based ``iteration`` number comes first and always wins over a
    CSV column of the same name.
    """
    parameters = {"iteration": str(iteration.iteration_index + 1)}
    for name, value in iteration.parameters.items():
        if name != "iteration":
            parameters[name] = value
    return parameters


def _summary_evidence(
    summaries: List[RequestSummary],
    filename: str,
    masked_values: List[str],
) -> EvidenceItem:
    text = json.dumps([s.to_dict() for s in summaries], indent=2, ensure_ascii=False)
    return EvidenceItem.from_text(
        mask_sensitive_values(text, masked_values), JSON_CONTENT_TYPE, filename
    )


def _report_evidence(attachment: ReportAttachment, masked_values: List[str]) -> EvidenceItem:
    if not masked_values:
        return EvidenceItem.from_bytes(
            attachment.content, HTML_CONTENT_TYPE, attachment.filename
        )
    text = attachment.content.decode("utf-8", errors="replace")
    return EvidenceItem.from_text(
        mask_sensitive_values(text, masked_values), HTML_CONTENT_TYPE, attachment.filename
    )
