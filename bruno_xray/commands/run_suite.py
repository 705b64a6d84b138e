"""
Run Suite Command.

Runs every directory of a plugin test suite with Bruno and uploads each
directory's results to Xray:

1. Resolve paths against the collection directory.
2. Download the CSV dataset if it is configured but missing.
3. Run Bruno, writing results.json (and results.html) into the directory.
4. Convert and upload the results.

A failing directory is logged and skipped; the remaining directories are
still processed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from bruno_xray.commands.download_dataset import download_dataset
from bruno_xray.commands.upload_results import UploadOptions, upload_results
from bruno_xray.errors import ConversionError
from bruno_xray.jira_client.xray_client import XrayClient, XrayClientError, execution_issue_key
from bruno_xray.models.suite import SuiteTest, TestSuite
from bruno_xray.runner.bruno_runner import BrunoRunConfig, BrunoRunner, BrunoRunnerError

RESULTS_JSON = "results.json"
RESULTS_HTML = "results.html"


class DatasetMissingError(Exception):
    """Raised when a dataset file is missing and cannot be downloaded."""

    pass


@dataclass
class DirectoryOutcome:
    """What happened to one suite directory."""

    directory: str
    response: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


class SuiteRunner:
    """
    Executes a TestSuite directory by directory.

    Usage::

        with XrayClient(credentials, base_url=suite.jira.url) as client:
            outcomes = SuiteRunner(suite, client, Path("collection")).run()
    """

    def __init__(
        self,
        suite: TestSuite,
        client: XrayClient,
        collection_directory: Path = Path("."),
        masked_values: Optional[Sequence[str]] = None,
        runner: Optional[BrunoRunner] = None,
    ) -> None:
        self.suite = suite
        self.client = client
        self.collection_directory = Path(collection_directory).resolve()
        self.masked_values = list(masked_values or [])
        self.runner = runner or BrunoRunner()

    def run(self) -> List[DirectoryOutcome]:
        """Run all suite directories in order."""
        outcomes = []
        for test in self.suite.tests:
            try:
                response = self.run_directory(test)
                outcomes.append(DirectoryOutcome(directory=test.directory, response=response))
            except (
                BrunoRunnerError,
                ConversionError,
                DatasetMissingError,
                XrayClientError,
                OSError,
            ) as e:
                logger.error(f"Failed to process {test.directory}: {e}")
                outcomes.append(DirectoryOutcome(directory=test.directory, error=str(e)))

        failed = sum(1 for o in outcomes if not o.succeeded)
        logger.info(f"Suite finished: {len(outcomes) - failed} uploaded, {failed} failed")
        return outcomes

    def run_directory(self, test: SuiteTest) -> Dict[str, Any]:
        """
        Run one suite directory and upload its results.

        Returns:
            The Xray import response.
        """
        directory = self._resolve(test.directory)
        csv_file = self._prepare_dataset(test)
        results_json = directory / RESULTS_JSON
        results_html = directory / RESULTS_HTML if self.suite.bruno.html_report else None

        self.runner.run(
            BrunoRunConfig(
                directory=directory,
                environment=self.suite.bruno.environment,
                output_json=results_json,
                cert_file=self._resolve(self.suite.bruno.cert_file)
                if self.suite.bruno.cert_file else None,
                csv_file=csv_file,
                output_html=results_html,
            ),
            cwd=self.collection_directory,
        )

        logger.info("Uploading results to Xray...")
        test_execution = self.suite.jira.test_execution
        response = upload_results(
            self.client,
            UploadOptions(
                results_file=results_json,
                project_key=self.suite.jira.project_key,
                csv_file=csv_file,
                html_report_file=results_html,
                masked_values=self.masked_values,
                test_execution_key=test_execution.key,
                test_execution_details=test_execution.details,
            ),
        )
        key = execution_issue_key(response)
        logger.info(f"Uploaded results to: {self.suite.jira.url.rstrip('/')}/browse/{key}")
        return response

    def _prepare_dataset(self, test: SuiteTest) -> Optional[Path]:
        if test.dataset is None:
            return None
        location = self._resolve(test.dataset.location)
        if not location.exists():
            if not test.dataset.issue_key:
                raise DatasetMissingError(f"Failed to find test dataset {location}")
            download_dataset(self.client, test.dataset.issue_key, location)
        return location

    def _resolve(self, path: str) -> Path:
        return (self.collection_directory / path).resolve()
