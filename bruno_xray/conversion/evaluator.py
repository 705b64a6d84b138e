"""
Status Evaluator.

Builds per-request summaries listing every failure of an iteration and
decides whether the iteration passed. The summaries double as the JSON
evidence uploaded to Xray.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from bruno_xray.conversion.grouper import TestIteration
from bruno_xray.models.bruno import BrunoRequest, BrunoRequestResult, BrunoResponse

# Failure label used for requests Bruno could not complete at all.
RUNNER_ERROR_LABEL = "internal runner error"


@dataclass
class RequestSummary:
    """
    Failures, request and response of one executed request.

    Descriptors are emitted as Bruno recorded them: ``null`` stays ``null``
    and a descriptor missing from the result is left out of the summary.
    """

    request: BrunoRequest
    response: BrunoResponse
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return bool(self.errors)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Optional[Any]] = {"errors": list(self.errors)}
        if self.request.recorded:
            data["request"] = self.request.to_dict()
        if self.response.recorded:
            data["response"] = self.response.to_dict()
        return data


def summarize_request(result: BrunoRequestResult) -> RequestSummary:
    """Collect the failures of a single request result."""
    summary = RequestSummary(request=result.request, response=result.response)
    if result.error:
        summary.errors.append({"error": result.error, "test": RUNNER_ERROR_LABEL})
    for assertion in result.assertion_results:
        if assertion.error:
            summary.errors.append({"error": assertion.error, "test": assertion.label})
    for test in result.test_results:
        if test.error:
            summary.errors.append({"error": test.error, "test": test.description})
    logger.debug(
        f"{result.request.method} {result.request.url} -> "
        f"{result.response.status}: {len(summary.errors)} failure(s)"
    )
    return summary


def summarize_iteration(iteration: TestIteration) -> List[RequestSummary]:
    """Summarize all requests of an iteration, in execution order."""
    return [summarize_request(result) for result in iteration.requests]


def has_failure(summaries: Sequence[RequestSummary]) -> bool:
    """An iteration fails iff any of its requests recorded a failure."""
    return any(summary.failed for summary in summaries)
