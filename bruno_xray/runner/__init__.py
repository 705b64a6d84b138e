"""Bruno CLI invocation."""

from bruno_xray.runner.bruno_runner import BrunoRunConfig, BrunoRunner, BrunoRunnerError

__all__ = ["BrunoRunConfig", "BrunoRunner", "BrunoRunnerError"]
