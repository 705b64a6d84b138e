"""
Bruno Runner.

Invokes the Bruno CLI (``bru run``) for one collection directory and writes
its JSON (and optionally HTML) report to disk.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from loguru import logger


class BrunoRunnerError(Exception):
    """Raised when the Bruno CLI could not be started."""

    pass


@dataclass
class BrunoRunConfig:
    """
    Arguments of a single ``bru run`` invocation.

    Attributes:
        directory: Collection (sub)directory to run recursively.
        environment: Bruno environment name.
        output_json: Path of the JSON report to write.
        cert_file: CA certificate for Bruno's HTTP client.
        csv_file: CSV dataset for data-driven iterations.
        output_html: Path of the HTML report to write.
    """

    directory: Path
    environment: str
    output_json: Path
    cert_file: Optional[Path] = None
    csv_file: Optional[Path] = None
    output_html: Optional[Path] = None


class BrunoRunner:
    """
    Runs Bruno through ``npx`` in a collection's working directory.

    Bruno exits non-zero when tests fail; that is not an error here since the
    report is still written and must be uploaded.
    """

    def __init__(self, executable: str = "npx", timeout_sec: Optional[float] = None) -> None:
        self.executable = executable
        self.timeout_sec = timeout_sec

    def build_command(self, config: BrunoRunConfig) -> List[str]:
        """Build the argument list for ``bru run``."""
        command = [
            self.executable, "bru", "run", "-r", str(config.directory),
            "--env", config.environment,
            "--output", str(config.output_json),
        ]
        if config.cert_file:
            command.extend(["--cacert", str(config.cert_file)])
        if config.csv_file:
            command.extend(["--csv-file-path", str(config.csv_file)])
        if config.output_html:
            command.extend(["--reporter-html", str(config.output_html)])
        return command

    def run(self, config: BrunoRunConfig, cwd: Optional[Path] = None) -> int:
        """
        Run Bruno and wait for it to finish.

        Args:
            config: Invocation arguments.
            cwd: Working directory (the collection root).

        Returns:
            The Bruno exit code.

        Raises:
            BrunoRunnerError: If Bruno could not be started or timed out.
        """
        command = self.build_command(config)
        logger.info(f"Running Bruno: {' '.join(command)}")
        try:
            result = subprocess.run(
                command,
                cwd=str(cwd) if cwd else None,
                timeout=self.timeout_sec,
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"Encountered errors during Bruno execution: {e}")
            raise BrunoRunnerError(f"Failed to run Bruno in {config.directory}: {e}") from e

        if result.returncode != 0:
            logger.warning(f"Bruno exited with code {result.returncode} for {config.directory}")
        return result.returncode
