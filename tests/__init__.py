"""
Bruno Xray - Test Suite Package.

Unit tests organized by component:
- test_security: sensitive value masking.
- test_conversion: Bruno to Xray conversion.
- test_xray_client: credentials and the Xray REST client.
- test_config: suite loading, validation and migrations.
- test_runner: Bruno CLI invocation.
- test_commands: commands, suite orchestration and the CLI.
"""
