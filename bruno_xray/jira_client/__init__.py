"""
Jira Xray Client Module.

Provides integration with the Jira Xray REST API for:
- Resolving Cloud and Server/DC credentials.
- Importing test execution results (Xray JSON).
- Exporting test datasets for data-driven runs.
"""

from bruno_xray.jira_client.credentials import (
    CloudCredentials,
    CredentialsError,
    ServerBasicCredentials,
    ServerTokenCredentials,
    resolve_credentials,
)
from bruno_xray.jira_client.xray_client import (
    XrayClient,
    XrayClientError,
    execution_issue_key,
)

__all__ = [
    "CloudCredentials",
    "CredentialsError",
    "ServerBasicCredentials",
    "ServerTokenCredentials",
    "resolve_credentials",
    "XrayClient",
    "XrayClientError",
    "execution_issue_key",
]
