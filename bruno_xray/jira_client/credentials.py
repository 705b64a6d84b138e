"""
Xray Credentials.

The supported authentication combinations, resolved once from CLI flags and
environment variables:

- Xray Cloud: client ID and client secret.
- Xray Server/DC: personal access token, or username and password.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

# Environment variables read by the CLI when the matching flag is absent.
JIRA_TOKEN_ENV = "JIRA_TOKEN"
JIRA_USERNAME_ENV = "JIRA_USERNAME"
JIRA_PASSWORD_ENV = "JIRA_PASSWORD"
XRAY_CLIENT_ID_ENV = "XRAY_CLIENT_ID"
XRAY_CLIENT_SECRET_ENV = "XRAY_CLIENT_SECRET"


class CredentialsError(Exception):
    """Raised when no usable credential combination was provided."""

    pass


@dataclass(frozen=True)
class CloudCredentials:
    """Xray Cloud API key."""

    client_id: str
    client_secret: str


@dataclass(frozen=True)
class ServerTokenCredentials:
    """Jira Server/DC personal access token."""

    token: str


@dataclass(frozen=True)
class ServerBasicCredentials:
    """Jira Server/DC basic authentication."""

    username: str
    password: str


XrayCredentials = Union[CloudCredentials, ServerTokenCredentials, ServerBasicCredentials]


def resolve_credentials(
    jira_token: Optional[str] = None,
    xray_client_id: Optional[str] = None,
    xray_client_secret: Optional[str] = None,
    jira_username: Optional[str] = None,
    jira_password: Optional[str] = None,
) -> XrayCredentials:
    """
    Pick the credentials to use from the provided values.

    Xray Cloud credentials take precedence over server credentials, and a
    token takes precedence over basic authentication.

    Raises:
        CredentialsError: If no complete combination was provided.
    """
    if xray_client_id and xray_client_secret:
        return CloudCredentials(client_id=xray_client_id, client_secret=xray_client_secret)
    if jira_token:
        return ServerTokenCredentials(token=jira_token)
    if jira_username and jira_password:
        return ServerBasicCredentials(username=jira_username, password=jira_password)
    raise CredentialsError(
        "One of [--xray-client-id ... --xray-client-secret ...], "
        "[--jira-token ... --jira-url ...] or "
        "[--jira-username ... --jira-password ... --jira-url ...] must be provided"
    )
