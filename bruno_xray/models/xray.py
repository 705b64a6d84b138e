"""
Xray Import Model.

Data classes for the Xray JSON import format (test execution results).
Both Xray Server/DC and Xray Cloud accept the same structure; they only
differ in the status names used for passed and failed tests.

See https://docs.getxray.app/display/XRAY/Import+Execution+Results
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True)
class StatusVocabulary:
    """Pair of status names used for passed/failed results."""

    passed: str
    failed: str

    def of(self, failed: bool) -> str:
        return self.failed if failed else self.passed


SERVER_STATUSES = StatusVocabulary(passed="PASS", failed="FAIL")
CLOUD_STATUSES = StatusVocabulary(passed="PASSED", failed="FAILED")


def status_vocabulary(use_cloud_format: bool) -> StatusVocabulary:
    """Return the status vocabulary of Xray Cloud or Xray Server/DC."""
    return CLOUD_STATUSES if use_cloud_format else SERVER_STATUSES


@dataclass
class EvidenceItem:
    """A base64 encoded file attached to a test run."""

    filename: str
    content_type: str
    data: str

    @classmethod
    def from_bytes(cls, content: bytes, content_type: str, filename: str) -> "EvidenceItem":
        return cls(
            filename=filename,
            content_type=content_type,
            data=base64.b64encode(content).decode("ascii"),
        )

    @classmethod
    def from_text(cls, text: str, content_type: str, filename: str) -> "EvidenceItem":
        return cls.from_bytes(text.encode("utf-8"), content_type, filename)

    def to_dict(self) -> Dict[str, str]:
        return {
            "contentType": self.content_type,
            "data": self.data,
            "filename": self.filename,
        }


@dataclass
class ReportAttachment:
    """
    An external report (e.g. Bruno's HTML report) to attach as evidence.

    Attributes:
        filename: Original file name used for the attachment.
        content: Raw file content.
    """

    filename: str
    content: bytes

    @classmethod
    def from_file(cls, path: str | Path) -> "ReportAttachment":
        path = Path(path)
        return cls(filename=path.name, content=path.read_bytes())


@dataclass
class IterationSubResult:
    """Result of one data-driven iteration of a test run."""

    status: str
    parameters: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "parameters": [
                {"name": name, "value": value} for name, value in self.parameters.items()
            ],
            "status": self.status,
        }


@dataclass
class TargetTest:
    """
    Results attributed to one Jira test issue.

    Attributes:
        test_key: Jira test issue key (e.g., "DP-90").
        status: Overall status in the selected vocabulary.
        evidence: Ordered attachments.
        iterations: Per-iteration results; only set for two or more iterations.
    """

    test_key: str
    status: str
    evidence: List[EvidenceItem] = field(default_factory=list)
    iterations: Optional[List[IterationSubResult]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            "evidence": [e.to_dict() for e in self.evidence],
            "status": self.status,
            "testKey": self.test_key,
        }
        if self.iterations is not None:
            result["iterations"] = [i.to_dict() for i in self.iterations]
        return result


@dataclass
class ConversionReport:
    """
    Complete Xray test execution import payload.

    Attributes:
        info: Test execution issue fields (summary, description, testEnvironments, ...).
        tests: Converted tests in grouping order.
        test_execution_key: Existing test execution issue to update instead of
            creating a new one.
    """

    info: Dict[str, Any] = field(default_factory=dict)
    tests: List[TargetTest] = field(default_factory=list)
    test_execution_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Xray JSON import format."""
        payload: Dict[str, Any] = {"info": dict(self.info)}
        if self.test_execution_key:
            payload["testExecutionKey"] = self.test_execution_key
        payload["tests"] = [t.to_dict() for t in self.tests]
        return payload
