"""
Configuration Loader Module.

Provides the suite file loader that handles:
- Loading YAML and JSON suite files.
- Version-aware backward compatibility for older suite layouts.
- Schema validation using JSON Schema.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml
from loguru import logger

from bruno_xray.config.suite_schema import SchemaValidationError, validate_suite
from bruno_xray.config.version_compat import VersionCompatManager
from bruno_xray.models.suite import TestSuite


class ConfigurationError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""

    pass


class ConfigLoader:
    """
    Suite file loader with schema validation and backward compatibility.

    Attributes:
        version_manager: Handles version-aware migrations.
    """

    SUPPORTED_EXTENSIONS = {".yaml", ".yml", ".json"}

    def __init__(self) -> None:
        self.version_manager = VersionCompatManager()

    def load(
        self,
        path: str | Path,
        *,
        validate: bool = True,
    ) -> Dict[str, Any]:
        """
        Load a suite file with optional schema validation.

        Args:
            path: Path of the suite file.
            validate: Whether to validate against the suite schema.

        Returns:
            Parsed and migrated configuration as a dictionary.

        Raises:
            ConfigurationError: If the file cannot be loaded or fails validation.
            FileNotFoundError: If the configuration file does not exist.
        """
        file_path = Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {file_path}")

        logger.info(f"Loading configuration: {file_path}")
        data = self._read_file(file_path)

        # Apply version migrations if needed
        data = self.version_manager.migrate(data)

        if validate:
            self._validate(data)

        logger.debug(f"Configuration loaded successfully: {file_path}")
        return data

    def load_suite(self, path: str | Path) -> TestSuite:
        """
        Load a plugin test suite file.

        Args:
            path: Path of the suite file (YAML or JSON).

        Returns:
            The validated TestSuite.
        """
        suite = TestSuite.from_dict(self.load(path))
        logger.info(f"Suite loaded: {len(suite.tests)} test director(ies)")
        return suite

    def _read_file(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML or JSON file."""
        suffix = file_path.suffix.lower()
        if suffix not in self.SUPPORTED_EXTENSIONS:
            raise ConfigurationError(
                f"Unsupported test suite file extension '{suffix}'. "
                f"Supported: {sorted(self.SUPPORTED_EXTENSIONS)}"
            )

        try:
            content = file_path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Failed to read file {file_path}: {e}") from e

        try:
            if suffix in {".yaml", ".yml"}:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to parse {file_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration file must contain a mapping (dict), "
                f"got {type(data).__name__}: {file_path}"
            )

        return data

    def _validate(self, data: Dict[str, Any]) -> None:
        """Validate migrated suite data against the bundled suite schema."""
        try:
            validate_suite(data)
        except SchemaValidationError as e:
            raise ConfigurationError(f"Test suite validation failed: {e}") from e
