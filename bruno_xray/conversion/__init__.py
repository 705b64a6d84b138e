"""
Conversion Module.

Converts Bruno JSON results into the Xray JSON import format:
- Grouper: attributes request results to Jira test issues.
- Evaluator: derives failures and pass/fail status.
- Evidence: builds masked, base64 encoded attachments.
- Converter: orchestrates the above into a ConversionReport.
"""

from bruno_xray.conversion.converter import ConversionOptions, convert_bruno_to_xray
from bruno_xray.conversion.grouper import TestIteration, group_iterations

__all__ = [
    "ConversionOptions",
    "convert_bruno_to_xray",
    "TestIteration",
    "group_iterations",
]
