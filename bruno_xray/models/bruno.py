"""
Bruno Result Model.

Typed view of the JSON report written by ``bru run --output``. There is no
official schema for this report; the fields below are the ones observed in
real reports. Request and response descriptors keep the value they were
parsed from, ``null`` included, so that evidence shows exactly what Bruno
recorded.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bruno_xray.errors import BrunoResultsError

# Matches Jira issue keys embedded in request file names, e.g. "CYP-123".
ISSUE_KEY_PATTERN = re.compile(r"\w+-\d+")


@dataclass
class BrunoRequest:
    """
    Request descriptor.

    ``raw`` is ``None`` when Bruno wrote ``null``; ``recorded`` is ``False``
    when the result had no request entry at all.
    """

    method: str = ""
    url: str = ""
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False)
    recorded: bool = field(default=True, repr=False)

    @classmethod
    def from_dict(
        cls, data: Optional[Dict[str, Any]], recorded: bool = True
    ) -> "BrunoRequest":
        fields = data if isinstance(data, dict) else {}
        return cls(
            method=fields.get("method", ""),
            url=fields.get("url", ""),
            raw=data,
            recorded=recorded,
        )

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return dict(self.raw) if self.raw is not None else None


@dataclass
class BrunoResponse:
    """
    Response descriptor.

    ``status`` is ``None`` when the request never produced a response
    (e.g. connection refused); ``raw`` may then be ``None`` as well.
    """

    status: Optional[int] = None
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False)
    recorded: bool = field(default=True, repr=False)

    @classmethod
    def from_dict(
        cls, data: Optional[Dict[str, Any]], recorded: bool = True
    ) -> "BrunoResponse":
        fields = data if isinstance(data, dict) else {}
        return cls(status=fields.get("status"), raw=data, recorded=recorded)

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return dict(self.raw) if self.raw is not None else None


@dataclass
class AssertionResult:
    """Outcome of one ``assert`` block entry (``res.status: eq 200``)."""

    lhs_expr: str = ""
    rhs_expr: str = ""
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssertionResult":
        return cls(
            lhs_expr=data.get("lhsExpr", ""),
            rhs_expr=data.get("rhsExpr", ""),
            error=data.get("error"),
        )

    @property
    def label(self) -> str:
        return f"{self.lhs_expr} {self.rhs_expr}"


@dataclass
class TestOutcome:
    """Outcome of one named ``test(...)`` in a request script."""

    __test__ = False

    description: str = ""
    error: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestOutcome":
        return cls(description=data.get("description", ""), error=data.get("error"))


@dataclass
class BrunoRequestResult:
    """
    Result of executing one request file within one iteration.

    Attributes:
        filename: Request file path; the source of Jira issue keys.
        request: Request descriptor.
        response: Response descriptor.
        error: Fatal request error (e.g. "connect ECONNREFUSED"), if any.
        assertion_results: Ordered assertion outcomes.
        test_results: Ordered named test outcomes.
    """

    filename: str
    request: BrunoRequest = field(default_factory=BrunoRequest)
    response: BrunoResponse = field(default_factory=BrunoResponse)
    error: Optional[str] = None
    assertion_results: List[AssertionResult] = field(default_factory=list)
    test_results: List[TestOutcome] = field(default_factory=list)

    @property
    def issue_keys(self) -> List[str]:
        """All Jira issue keys embedded in the request file name."""
        return ISSUE_KEY_PATTERN.findall(self.filename)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrunoRequestResult":
        if not isinstance(data, dict):
            raise BrunoResultsError(
                f"Bruno request result must be an object, got {type(data).__name__}"
            )
        test = data.get("test")
        if not isinstance(test, dict) or not isinstance(test.get("filename"), str):
            raise BrunoResultsError(
                f"Bruno request result is missing 'test.filename': {data.get('suitename', '?')}"
            )
        return cls(
            filename=test["filename"],
            request=BrunoRequest.from_dict(data.get("request"), "request" in data),
            response=BrunoResponse.from_dict(data.get("response"), "response" in data),
            error=data.get("error"),
            assertion_results=[
                AssertionResult.from_dict(a) for a in data.get("assertionResults") or []
            ],
            test_results=[
                TestOutcome.from_dict(t) for t in data.get("testResults") or []
            ],
        )


@dataclass
class BrunoIteration:
    """All request results of one data-driven iteration."""

    iteration_index: int
    results: List[BrunoRequestResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BrunoIteration":
        if not isinstance(data, dict):
            raise BrunoResultsError(
                f"Bruno iteration must be an object, got {type(data).__name__}"
            )
        index = data.get("iterationIndex")
        if not isinstance(index, int) or isinstance(index, bool) or index < 0:
            raise BrunoResultsError(f"Invalid Bruno iteration index: {index!r}")
        results = data.get("results")
        if not isinstance(results, list):
            raise BrunoResultsError(f"Bruno iteration {index} has no 'results' list")
        return cls(
            iteration_index=index,
            results=[BrunoRequestResult.from_dict(r) for r in results],
        )


def parse_bruno_results(data: Any) -> List[BrunoIteration]:
    """
    Parse a decoded Bruno JSON report.

    Args:
        data: The decoded JSON document (a list of iterations).

    Returns:
        List of BrunoIteration objects in report order.

    Raises:
        BrunoResultsError: If the document does not look like a Bruno report.
    """
    if not isinstance(data, list):
        raise BrunoResultsError(
            f"Bruno JSON results must be a list of iterations, got {type(data).__name__}"
        )
    return [BrunoIteration.from_dict(item) for item in data]
