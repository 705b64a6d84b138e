"""
Version Compatibility Manager.

Handles backward compatibility for suite files written for older versions.
Implements a migration pipeline that transforms old suite layouts to the
current one, so existing suite files keep working without changes:

- 0.1.0: flat ``config`` (environment, certFile, projectKey, url, testExecution).
- 0.2.0: nested ``config.bruno`` / ``config.jira`` sections.
- 1.0.0: ``jira.testExecution.details`` holds the issue fields.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Tuple

from loguru import logger


# Type alias for migration functions:
# (config_data) -> config_data
MigrationFunc = Callable[[Dict[str, Any]], Dict[str, Any]]

# Issue fields which lived directly under testExecution before 1.0.0.
LEGACY_DETAIL_FIELDS = ("summary", "description")


class VersionCompatManager:
    """
    Manages version-aware migrations for suite files.

    Migrations are registered as functions that transform a suite dict
    from one schema version to the next. When loading a suite with an older
    schema_version, all applicable migrations are applied in order. Files
    without a schema_version have their version detected from their layout.
    """

    # The current expected schema version
    CURRENT_VERSION = "1.0.0"

    def __init__(self) -> None:
        """Initialize the version compatibility manager."""
        self._migrations: List[Tuple[str, str, MigrationFunc]] = []
        self._register_builtin_migrations()

    def register_migration(
        self, from_version: str, to_version: str
    ) -> Callable[[MigrationFunc], MigrationFunc]:
        """
        Decorator to register a migration function.

        Args:
            from_version: Source schema version (semver string).
            to_version: Target schema version (semver string).

        Returns:
            Decorator function.
        """

        def decorator(func: MigrationFunc) -> MigrationFunc:
            self._migrations.append((from_version, to_version, func))
            # Keep migrations sorted by from_version
            self._migrations.sort(key=lambda m: self._version_tuple(m[0]))
            logger.debug(f"Registered migration: {from_version} -> {to_version}")
            return func

        return decorator

    def migrate(self, suite: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply all necessary migrations to bring a suite to the current version.

        Args:
            suite: Suite dictionary to migrate. It is not modified.

        Returns:
            Migrated suite dictionary with schema_version set.
        """
        suite = copy.deepcopy(suite)
        current_version = suite.get("schema_version") or self.detect_version(suite)

        if current_version == self.CURRENT_VERSION:
            logger.debug(f"Suite already at current version ({self.CURRENT_VERSION}).")
            suite["schema_version"] = self.CURRENT_VERSION
            return suite

        logger.info(f"Migrating suite from v{current_version} to v{self.CURRENT_VERSION}")

        for from_ver, to_ver, migration_func in self._migrations:
            if self._version_tuple(from_ver) >= self._version_tuple(current_version) and \
               self._version_tuple(to_ver) <= self._version_tuple(self.CURRENT_VERSION):
                logger.debug(f"Applying migration: {from_ver} -> {to_ver}")
                try:
                    suite = migration_func(suite)
                    suite["schema_version"] = to_ver
                except Exception as e:
                    logger.error(f"Migration {from_ver} -> {to_ver} failed: {e}")
                    raise

        return suite

    @staticmethod
    def detect_version(suite: Dict[str, Any]) -> str:
        """Infer the schema version of a suite without a schema_version field."""
        config = suite.get("config")
        if not isinstance(config, dict):
            return VersionCompatManager.CURRENT_VERSION
        if "bruno" not in config and "jira" not in config:
            return "0.1.0"
        test_execution = (config.get("jira") or {}).get("testExecution") or {}
        if any(name in test_execution for name in LEGACY_DETAIL_FIELDS):
            return "0.2.0"
        return VersionCompatManager.CURRENT_VERSION

    def _register_builtin_migrations(self) -> None:
        """
        Register built-in migrations for known version transitions.

        Add new migrations here as the schema evolves.
        """

        @self.register_migration("0.1.0", "0.2.0")
        def _migrate_0_1_to_0_2(suite: Dict[str, Any]) -> Dict[str, Any]:
            """Split the flat config into bruno and jira sections."""
            config = suite.get("config", {})
            bruno: Dict[str, Any] = {}
            jira: Dict[str, Any] = {}
            for name in ("environment", "certFile", "report"):
                if name in config:
                    bruno[name] = config.pop(name)
            for name in ("projectKey", "url", "testExecution"):
                if name in config:
                    jira[name] = config.pop(name)
            config["bruno"] = bruno
            config["jira"] = jira
            suite["config"] = config
            logger.debug("Migrated flat config -> config.bruno / config.jira")
            return suite

        @self.register_migration("0.2.0", "1.0.0")
        def _migrate_0_2_to_1_0(suite: Dict[str, Any]) -> Dict[str, Any]:
            """Move testExecution summary/description into testExecution.details."""
            jira = suite.get("config", {}).get("jira", {})
            test_execution = jira.get("testExecution")
            if not test_execution:
                return suite
            details = test_execution.setdefault("details", {})
            for name in LEGACY_DETAIL_FIELDS:
                if name in test_execution:
                    details.setdefault(name, test_execution.pop(name))
            logger.debug("Migrated jira.testExecution fields -> testExecution.details")
            return suite

    @staticmethod
    def _version_tuple(version_str: str) -> Tuple[int, ...]:
        """Convert a semver string to a comparable tuple of ints."""
        try:
            return tuple(int(part) for part in version_str.split("."))
        except (ValueError, AttributeError):
            logger.warning(f"Invalid version string: {version_str}, treating as (0, 0, 0)")
            return (0, 0, 0)
