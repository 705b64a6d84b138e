"""
Tests for the Bruno runner (subprocess mocked).
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from bruno_xray.runner.bruno_runner import BrunoRunConfig, BrunoRunner, BrunoRunnerError


@pytest.fixture
def run_config(tmp_path: Path) -> BrunoRunConfig:
    return BrunoRunConfig(
        directory=tmp_path / "users",
        environment="staging",
        output_json=tmp_path / "users" / "results.json",
    )


class TestBrunoRunner:
    """Tests for BrunoRunner."""

    def test_minimal_command(self, run_config: BrunoRunConfig) -> None:
        command = BrunoRunner().build_command(run_config)
        assert command == [
            "npx", "bru", "run", "-r", str(run_config.directory),
            "--env", "staging",
            "--output", str(run_config.output_json),
        ]

    def test_full_command(self, tmp_path: Path, run_config: BrunoRunConfig) -> None:
        run_config.cert_file = tmp_path / "ca.pem"
        run_config.csv_file = tmp_path / "data.csv"
        run_config.output_html = tmp_path / "results.html"
        command = BrunoRunner(executable="/usr/bin/npx").build_command(run_config)
        assert command[0] == "/usr/bin/npx"
        assert command[-6:] == [
            "--cacert", str(tmp_path / "ca.pem"),
            "--csv-file-path", str(tmp_path / "data.csv"),
            "--reporter-html", str(tmp_path / "results.html"),
        ]

    def test_run_returns_exit_code(self, tmp_path: Path, run_config: BrunoRunConfig) -> None:
        with patch("bruno_xray.runner.bruno_runner.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(returncode=1)
            assert BrunoRunner(timeout_sec=60).run(run_config, cwd=tmp_path) == 1
        args, kwargs = mock_run.call_args
        assert args[0][:3] == ["npx", "bru", "run"]
        assert kwargs["cwd"] == str(tmp_path)
        assert kwargs["timeout"] == 60
        assert kwargs["check"] is False

    def test_spawn_failure(self, run_config: BrunoRunConfig) -> None:
        with patch(
            "bruno_xray.runner.bruno_runner.subprocess.run",
            side_effect=FileNotFoundError("npx"),
        ):
            with pytest.raises(BrunoRunnerError, match="Failed to run Bruno"):
                BrunoRunner().run(run_config)

    def test_timeout(self, run_config: BrunoRunConfig) -> None:
        with patch(
            "bruno_xray.runner.bruno_runner.subprocess.run",
            side_effect=subprocess.TimeoutExpired(cmd="npx", timeout=1),
        ):
            with pytest.raises(BrunoRunnerError):
                BrunoRunner(timeout_sec=1).run(run_config)
