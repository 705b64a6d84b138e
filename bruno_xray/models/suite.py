"""
Test Suite Model.

A suite file lists Bruno test directories to run and the Jira/Xray settings
used to upload their results. Suites are loaded through
``bruno_xray.config.loader.ConfigLoader``, which migrates older layouts and
validates them before they are turned into these classes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class BrunoSettings:
    """How to invoke Bruno."""

    environment: str
    cert_file: Optional[str] = None
    html_report: bool = False


@dataclass
class TestExecutionSettings:
    """Test execution issue to create (details) or reuse (key)."""

    __test__ = False

    key: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)


@dataclass
class JiraSettings:
    """Where to upload results."""

    project_key: str
    url: str
    test_execution: TestExecutionSettings = field(default_factory=TestExecutionSettings)


@dataclass
class DatasetSettings:
    """
    CSV dataset for data-driven runs.

    Attributes:
        location: Path of the CSV file.
        issue_key: Test issue to export the dataset from when the file is missing.
    """

    location: str
    issue_key: Optional[str] = None


@dataclass
class SuiteTest:
    """One Bruno directory to run."""

    directory: str
    dataset: Optional[DatasetSettings] = None


@dataclass
class TestSuite:
    """A complete, validated suite file."""

    __test__ = False

    bruno: BrunoSettings
    jira: JiraSettings
    tests: List[SuiteTest] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestSuite":
        """Build a suite from a migrated and validated suite dictionary."""
        config = data["config"]
        bruno = config["bruno"]
        jira = config["jira"]
        test_execution = jira.get("testExecution") or {}

        tests = []
        for test in data.get("tests", []):
            dataset = test.get("dataset")
            tests.append(
                SuiteTest(
                    directory=test["directory"],
                    dataset=DatasetSettings(
                        location=dataset["location"],
                        issue_key=dataset.get("issueKey"),
                    ) if dataset else None,
                )
            )

        return cls(
            bruno=BrunoSettings(
                environment=bruno["environment"],
                cert_file=bruno.get("certFile"),
                html_report=bool((bruno.get("report") or {}).get("html", False)),
            ),
            jira=JiraSettings(
                project_key=jira["projectKey"],
                url=jira["url"],
                test_execution=TestExecutionSettings(
                    key=test_execution.get("key"),
                    details=dict(test_execution.get("details") or {}),
                ),
            ),
            tests=tests,
        )
