"""
Configuration Management Module.

Handles loading and validation of:
- Plugin test suite files (JSON/YAML).
- Version-aware backward compatibility for older suite layouts.
"""

from bruno_xray.config.loader import ConfigLoader, ConfigurationError
from bruno_xray.config.suite_schema import SchemaValidationError, validate_suite

__all__ = ["ConfigLoader", "ConfigurationError", "SchemaValidationError", "validate_suite"]
