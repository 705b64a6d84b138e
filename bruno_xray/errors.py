"""
Conversion Errors.

Raised by the conversion engine when the Bruno results cannot be turned into
an Xray import payload. Fatal request errors recorded inside the results are
not exceptions; they are reported as failures in the evidence.
"""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for all conversion failures."""

    pass


class BrunoResultsError(ConversionError):
    """Raised when the Bruno JSON results do not have the expected shape."""

    pass


class ParameterCountError(ConversionError):
    """Raised when the number of parameter rows differs from the number of iterations."""

    def __init__(self, iterations: int, parameter_sets: int) -> None:
        super().__init__(
            f"must provide parameters for every iteration "
            f"(iterations: {iterations}, parameter sets: {parameter_sets})"
        )
        self.iterations = iterations
        self.parameter_sets = parameter_sets


class EmptyResultError(ConversionError):
    """Raised when no Bruno result could be attributed to a Jira test issue."""

    pass
