"""
Suite Schema Validation.

Validates suite files against the bundled Draft 7 JSON schema
(``schemas/test_suite_schema.json``) and reports every violation with
its location in the suite, e.g. ``tests[1].dataset.location``.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, List

import jsonschema
from loguru import logger

SUITE_SCHEMA_PATH = Path(__file__).parent / "schemas" / "test_suite_schema.json"


class SchemaValidationError(Exception):
    """Raised when a suite does not match the suite schema."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


@lru_cache(maxsize=1)
def load_suite_schema() -> Dict[str, Any]:
    """Return the bundled suite schema."""
    return json.loads(SUITE_SCHEMA_PATH.read_text(encoding="utf-8"))


def suite_location(path: Iterable[Any]) -> str:
    """Render a jsonschema error path as a suite location (``tests[0].directory``)."""
    location = ""
    for part in path:
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f".{part}" if location else str(part)
    return location or "(suite)"


def validate_suite(data: Dict[str, Any]) -> None:
    """
    Validate a migrated suite dictionary.

    Args:
        data: Suite content in the current layout.

    Raises:
        SchemaValidationError: If the suite is invalid, listing all errors in
            suite order.
    """
    validator = jsonschema.Draft7Validator(load_suite_schema())
    errors = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    if not errors:
        logger.debug(f"Suite valid: {len(data.get('tests') or [])} test director(ies)")
        return

    messages = [f"  [{suite_location(e.absolute_path)}] {e.message}" for e in errors]
    raise SchemaValidationError(
        f"Invalid test suite ({len(errors)} error(s)):\n" + "\n".join(messages),
        errors=messages,
    )
