"""
Data Models.

- bruno: Bruno JSON report (input).
- xray: Xray JSON import payload (output).
- suite: Plugin test suite configuration.
"""

from bruno_xray.models.bruno import (
    BrunoIteration,
    BrunoRequestResult,
    parse_bruno_results,
)
from bruno_xray.models.xray import (
    CLOUD_STATUSES,
    SERVER_STATUSES,
    ConversionReport,
    EvidenceItem,
    ReportAttachment,
    StatusVocabulary,
    TargetTest,
)

__all__ = [
    "BrunoIteration",
    "BrunoRequestResult",
    "parse_bruno_results",
    "CLOUD_STATUSES",
    "SERVER_STATUSES",
    "ConversionReport",
    "EvidenceItem",
    "ReportAttachment",
    "StatusVocabulary",
    "TargetTest",
]
