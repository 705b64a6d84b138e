"""
Bruno Xray command line.

Usage:
    bruno-xray upload-results results.json --jira-url https://jira.example.com --project-key DP
    bruno-xray download-dataset DP-90 --jira-url https://jira.example.com --output data.csv
    bruno-xray run-suite suite.yaml --collection-directory collection --mask-value s3cret

Credentials are taken from flags or the JIRA_TOKEN, JIRA_USERNAME,
JIRA_PASSWORD, XRAY_CLIENT_ID and XRAY_CLIENT_SECRET environment variables.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

import bruno_xray
from bruno_xray.commands.download_dataset import download_dataset
from bruno_xray.commands.run_suite import SuiteRunner
from bruno_xray.commands.upload_results import UploadOptions, upload_results
from bruno_xray.config.loader import ConfigLoader, ConfigurationError
from bruno_xray.errors import ConversionError
from bruno_xray.jira_client.credentials import (
    JIRA_PASSWORD_ENV,
    JIRA_TOKEN_ENV,
    JIRA_USERNAME_ENV,
    XRAY_CLIENT_ID_ENV,
    XRAY_CLIENT_SECRET_ENV,
    CredentialsError,
    resolve_credentials,
)
from bruno_xray.jira_client.xray_client import XrayClient, XrayClientError
from bruno_xray.runner.bruno_runner import BrunoRunnerError

HANDLED_ERRORS = (
    ConfigurationError,
    ConversionError,
    CredentialsError,
    XrayClientError,
    BrunoRunnerError,
    OSError,
)


def configure_logging(verbose: bool) -> None:
    """Log to stderr, at DEBUG level when verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")


def _add_auth_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group("authentication")
    group.add_argument(
        "--jira-token",
        default=os.environ.get(JIRA_TOKEN_ENV),
        help=f"the Jira API token (env: {JIRA_TOKEN_ENV})",
    )
    group.add_argument(
        "--jira-username",
        default=os.environ.get(JIRA_USERNAME_ENV),
        help=f"the Jira server username (env: {JIRA_USERNAME_ENV})",
    )
    group.add_argument(
        "--jira-password",
        default=os.environ.get(JIRA_PASSWORD_ENV),
        help=f"the Jira server password (env: {JIRA_PASSWORD_ENV})",
    )
    group.add_argument(
        "--xray-client-id",
        default=os.environ.get(XRAY_CLIENT_ID_ENV),
        help=f"the Xray Cloud client ID (env: {XRAY_CLIENT_ID_ENV})",
    )
    group.add_argument(
        "--xray-client-secret",
        default=os.environ.get(XRAY_CLIENT_SECRET_ENV),
        help=f"the Xray Cloud client secret (env: {XRAY_CLIENT_SECRET_ENV})",
    )


def _add_mask_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--mask-value",
        dest="mask_values",
        action="append",
        default=[],
        help="a sensitive value to mask in uploaded evidence (repeatable)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all sub-commands."""
    parser = argparse.ArgumentParser(
        prog="bruno-xray",
        description="Upload Bruno test results to Jira Xray",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {bruno_xray.__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- upload-results ---
    upload = subparsers.add_parser(
        "upload-results",
        help="Converts Bruno JSON results to Xray JSON and uploads them to a Jira project.",
    )
    upload.add_argument("results", type=Path, help="the Bruno JSON results")
    upload.add_argument("--jira-url", required=True, help="the Jira URL")
    upload.add_argument(
        "--project-key",
        required=True,
        help="the Jira project key where new test execution issues will be created",
    )
    upload.add_argument(
        "--csv-file",
        type=Path,
        help="a CSV file which was used for data-driven Bruno execution "
             "and will be mapped to Xray's iterations",
    )
    upload.add_argument(
        "--bruno-html-report",
        type=Path,
        help="the Bruno HTML report file to upload as evidence",
    )
    _add_mask_argument(upload)
    execution = upload.add_argument_group("test execution issue")
    execution.add_argument(
        "--test-execution-key",
        help="an existing Jira test execution issue to upload the test results to",
    )
    execution.add_argument(
        "--test-execution-summary",
        help="the summary of the test execution issue",
    )
    execution.add_argument(
        "--test-execution-description",
        help="the description for the test execution issue",
    )
    execution.add_argument(
        "--test-execution-revision",
        help="a revision for the revision custom field",
    )
    execution.add_argument(
        "--test-execution-test-environment",
        dest="test_execution_test_environments",
        action="append",
        help="Xray test execution environments to assign the test execution issue to",
    )
    execution.add_argument(
        "--test-execution-test-plan-key",
        help="the test plan key for associating the test execution issue",
    )
    execution.add_argument(
        "--test-execution-user",
        help="the username for the Jira user who executed the tests",
    )
    execution.add_argument(
        "--test-execution-version",
        help="the version name for the fix version field of the test execution issue",
    )
    _add_auth_arguments(upload)

    # --- download-dataset ---
    dataset = subparsers.add_parser(
        "download-dataset",
        help="Downloads an Xray dataset from a Jira test issue and saves it locally.",
    )
    dataset.add_argument("issue_key", help="the Jira test issue key whose dataset to download")
    dataset.add_argument("--jira-url", required=True, help="the Jira URL")
    dataset.add_argument(
        "--output",
        type=Path,
        default=Path("data.csv"),
        help="a file path to write the CSV data to (default: data.csv)",
    )
    _add_auth_arguments(dataset)

    # --- run-suite ---
    suite = subparsers.add_parser(
        "run-suite",
        help="Runs a plugin test suite file and uploads the results to a test execution issue.",
    )
    suite.add_argument("file", type=Path, help="the path to the test suite file to execute")
    suite.add_argument(
        "--collection-directory",
        type=Path,
        default=Path("."),
        help="the root collection directory (default: .)",
    )
    _add_mask_argument(suite)
    _add_auth_arguments(suite)

    return parser


def _create_client(args: argparse.Namespace, jira_url: str) -> XrayClient:
    credentials = resolve_credentials(
        jira_token=args.jira_token,
        xray_client_id=args.xray_client_id,
        xray_client_secret=args.xray_client_secret,
        jira_username=args.jira_username,
        jira_password=args.jira_password,
    )
    return XrayClient(credentials=credentials, base_url=jira_url)


def _test_execution_details(args: argparse.Namespace) -> Dict[str, Any]:
    return {
        "description": args.test_execution_description,
        "revision": args.test_execution_revision,
        "summary": args.test_execution_summary,
        "testEnvironments": args.test_execution_test_environments,
        "testPlanKey": args.test_execution_test_plan_key,
        "user": args.test_execution_user,
        "version": args.test_execution_version,
    }


def _upload_results(args: argparse.Namespace) -> int:
    with _create_client(args, args.jira_url) as client:
        response = upload_results(
            client,
            UploadOptions(
                results_file=args.results,
                project_key=args.project_key,
                csv_file=args.csv_file,
                html_report_file=args.bruno_html_report,
                masked_values=args.mask_values,
                test_execution_key=args.test_execution_key,
                test_execution_details=_test_execution_details(args),
            ),
        )
    print(json.dumps(response, indent=2))
    return 0


def _download_dataset(args: argparse.Namespace) -> int:
    with _create_client(args, args.jira_url) as client:
        destination = download_dataset(client, args.issue_key, args.output)
    print(f"dataset for {args.issue_key} written to {destination}")
    return 0


def _run_suite(args: argparse.Namespace) -> int:
    suite = ConfigLoader().load_suite(args.file)
    with _create_client(args, suite.jira.url) as client:
        outcomes = SuiteRunner(
            suite,
            client,
            collection_directory=args.collection_directory,
            masked_values=args.mask_values,
        ).run()
    for outcome in outcomes:
        if outcome.response is not None:
            print(json.dumps(outcome.response, indent=2))
    return 0 if all(o.succeeded for o in outcomes) else 1


COMMANDS = {
    "upload-results": _upload_results,
    "download-dataset": _download_dataset,
    "run-suite": _run_suite,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the bruno-xray command line."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        return COMMANDS[args.command](args)
    except HANDLED_ERRORS as e:
        logger.error(f"[{args.command}] {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
