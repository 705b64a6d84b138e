"""
Bruno Xray Integration - Core Source Package.

This package contains the core logic for:
- Conversion: Bruno JSON results to Xray JSON import format.
- Jira Client: Xray API integration for result upload and dataset export.
- Configuration: Suite file loading with versioned migrations.
- Runner: Invocation of the Bruno CLI for suite directories.
"""

__version__ = "0.1.0"
