"""
Sensitive Value Masking.

Redacts configured secrets (tokens, names, passwords) from text before it is
attached to Xray as evidence.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable

MASK_CHARACTER = "*"


class MaskStrategy(Enum):
    """How an occurrence of a sensitive value is masked."""

    ALL_STARS = "all-stars"
    KEEP_FIRST_LAST = "all-stars-except-first-last"


def mask_sensitive_values(
    content: str,
    sensitive_values: Iterable[str],
    strategy: MaskStrategy = MaskStrategy.KEEP_FIRST_LAST,
) -> str:
    """
    Replace all occurrences of the sensitive values in content with a mask.

    Longer values are applied before shorter ones, so a secret which contains
    another secret is masked as a whole. Values of equal length keep their
    given order.

    Args:
        content: Text possibly containing sensitive data.
        sensitive_values: Values to mask.
        strategy: Masking strategy to apply.

    Returns:
        The masked text.

    Example::

        >>> mask_sensitive_values("my name is secret", ["secret"])
        'my name is s****t'
    """
    ordered = sorted(
        (value for value in sensitive_values if value),
        key=len,
        reverse=True,
    )
    for value in ordered:
        content = content.replace(value, _mask(value, strategy))
    return content


def _mask(value: str, strategy: MaskStrategy) -> str:
    if strategy is MaskStrategy.ALL_STARS or len(value) <= 2:
        return MASK_CHARACTER * len(value)
    return f"{value[0]}{MASK_CHARACTER * (len(value) - 2)}{value[-1]}"
