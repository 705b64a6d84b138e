"""
Root conftest.py: shared Pytest fixtures.

Provides factories for Bruno JSON results (as written by ``bru run --output``)
and a minimal valid suite file.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional

import pytest
import yaml
from loguru import logger


@pytest.fixture(autouse=True)
def _restore_logger() -> Generator[None, None, None]:
    """Reset loguru sinks replaced by the CLI's logging setup."""
    yield
    logger.remove()
    logger.add(sys.stderr)


# ---------------------------------------------------------------------------
# Bruno Result Factories
# ---------------------------------------------------------------------------


def make_request_result(
    filename: str,
    iteration_index: int = 0,
    error: Optional[str] = None,
    assertion_errors: Optional[List[str]] = None,
    test_errors: Optional[List[str]] = None,
    status: Optional[int] = 200,
) -> Dict[str, Any]:
    """Build one Bruno request result dictionary."""
    assertion_results = [
        {"uid": "a1", "lhsExpr": "res.status", "rhsExpr": "eq 200", "operator": "eq",
         "operand": "200", "status": "pass"},
    ]
    for message in assertion_errors or []:
        assertion_results.append(
            {"uid": "a2", "lhsExpr": "res.body.name", "rhsExpr": "eq bruno",
             "operator": "eq", "operand": "bruno", "status": "fail", "error": message}
        )

    test_results = [{"description": "should be ok", "status": "pass", "uid": "t1"}]
    for message in test_errors or []:
        test_results.append(
            {"description": "should have a token", "status": "fail", "uid": "t2",
             "error": message, "expected": 200, "actual": 404}
        )

    response: Dict[str, Any]
    if error:
        response = {"status": None, "statusText": None, "headers": None,
                    "data": None, "responseTime": 0}
        assertion_results = []
        test_results = []
    else:
        response = {"status": status, "statusText": "OK",
                    "headers": {"content-type": "application/json"},
                    "data": {"name": "bruno"}, "responseTime": 12}

    result: Dict[str, Any] = {
        "test": {"filename": filename},
        "request": {"method": "GET", "url": "https://example.org/api",
                    "headers": {"accept": "application/json"}},
        "response": response,
        "assertionResults": assertion_results,
        "testResults": test_results,
        "iterationIndex": iteration_index,
        "suitename": filename.rsplit(".", 1)[0],
        "runtime": 0.05,
    }
    if error:
        result["error"] = error
    return result


def make_iteration(index: int, results: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Build one Bruno iteration dictionary."""
    return {
        "iterationIndex": index,
        "summary": {"totalRequests": len(results)},
        "results": results,
    }


@pytest.fixture
def single_passing_results() -> List[Dict[str, Any]]:
    """One iteration with one passing request for ABC-1."""
    return [make_iteration(0, [make_request_result("ABC-1 get user.bru")])]


# ---------------------------------------------------------------------------
# Suite Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_suite() -> Dict[str, Any]:
    """Return a valid current-version suite dictionary."""
    return {
        "schema_version": "1.0.0",
        "config": {
            "bruno": {"environment": "staging", "report": {"html": True}},
            "jira": {
                "projectKey": "DP",
                "url": "https://jira.example.com",
                "testExecution": {
                    "details": {"summary": "Nightly", "testEnvironments": ["staging"]},
                },
            },
        },
        "tests": [
            {"directory": "users"},
            {"directory": "orders", "dataset": {"issueKey": "DP-90", "location": "orders/data.csv"}},
        ],
    }


@pytest.fixture
def suite_file(tmp_path: Path, sample_suite: Dict[str, Any]) -> Path:
    """Write the sample suite as YAML and return its path."""
    path = tmp_path / "suite.yaml"
    path.write_text(yaml.safe_dump(sample_suite), encoding="utf-8")
    return path
