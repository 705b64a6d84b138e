"""Download Dataset Command."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from bruno_xray.jira_client.xray_client import XrayClient


def download_dataset(client: XrayClient, issue_key: str, output: str | Path) -> Path:
    """
    Export the Xray dataset of a test issue and write it as CSV.

    Args:
        client: Xray client.
        issue_key: Test issue whose dataset to export.
        output: Destination file; parent directories are created.

    Returns:
        The resolved destination path.
    """
    content = client.download_dataset(issue_key)
    destination = Path(output).resolve()
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(content.encode("utf-8"))
    logger.info(f"Dataset for {issue_key} written to {destination}")
    return destination
