"""
Xray REST API Client.

Provides a dedicated client for interacting with the Jira Xray REST API:
- Authentication (Cloud API key, Server token or basic auth).
- Importing test execution results (Xray JSON format).
- Exporting data-driven datasets as CSV.

One client is constructed per invocation and passed to whoever needs it.
The client keeps a single HTTP session and, for Xray Cloud, reuses the
bearer token obtained on first use.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from bruno_xray.jira_client.credentials import (
    CloudCredentials,
    ServerBasicCredentials,
    ServerTokenCredentials,
    XrayCredentials,
)
from bruno_xray.models.xray import ConversionReport


class XrayClientError(Exception):
    """Raised when an Xray API operation fails."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class XrayClient:
    """
    Client for the Jira Xray REST API.

    Handles authentication, result import and dataset export. Designed for
    both Xray Server/DC and Xray Cloud; the credential type decides which
    API is used.

    Usage::

        client = XrayClient(
            credentials=ServerTokenCredentials(token="your-token-here"),
            base_url="https://jira.example.com",
        )
        response = client.import_execution(report, project_key="DP")
        # Returns: {"testExecIssue": {"key": "DP-123", ...}}
    """

    CLOUD_URL = "https://xray.cloud.getxray.app"

    # Xray REST API endpoints (Server/DC)
    ENDPOINTS = {
        "import_execution": "/rest/raven/1.0/import/execution",
        "dataset_export": "/rest/raven/2.0/api/dataset/export",
        # Xray Cloud endpoints
        "cloud_authenticate": "/api/v2/authenticate",
        "cloud_import_execution": "/api/v2/import/execution",
        "cloud_dataset_export": "/api/v2/dataset/export",
    }

    def __init__(
        self,
        credentials: Optional[XrayCredentials] = None,
        base_url: str = "",
        timeout_sec: int = 30,
        verify_ssl: bool = True,
    ) -> None:
        """
        Initialize the Xray client.

        Args:
            credentials: Cloud or server credentials.
            base_url: Jira instance base URL (ignored for Xray Cloud).
            timeout_sec: Request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.

        Raises:
            XrayClientError: If no credentials were given, or server
                credentials were given without a base URL.
        """
        if credentials is None:
            raise XrayClientError("Xray credentials are required")
        if isinstance(credentials, CloudCredentials):
            base_url = self.CLOUD_URL
        elif not base_url:
            raise XrayClientError("A Jira URL is required for Xray Server/DC")

        self.credentials = credentials
        self.timeout_sec = timeout_sec
        self.verify_ssl = verify_ssl
        self._base_url = base_url.rstrip("/")
        self._session: Optional[requests.Session] = None
        self._cloud_token: Optional[str] = None
        logger.info(
            f"XrayClient initialized: {'cloud' if self.is_cloud else 'server'}, "
            f"url={self._base_url}"
        )

    @property
    def is_cloud(self) -> bool:
        """Whether the client talks to Xray Cloud."""
        return isinstance(self.credentials, CloudCredentials)

    @property
    def base_url(self) -> str:
        return self._base_url

    def _get_session(self) -> requests.Session:
        """
        Get or create an HTTP session with proper authentication headers.

        Returns:
            requests.Session configured with auth.
        """
        if self._session is None:
            session = requests.Session()
            session.verify = self.verify_ssl
            session.headers.update({"Accept": "application/json"})

            credentials = self.credentials
            if isinstance(credentials, ServerTokenCredentials):
                session.headers["Authorization"] = f"Bearer {credentials.token}"
            elif isinstance(credentials, ServerBasicCredentials):
                session.auth = (credentials.username, credentials.password)
            self._session = session

        if self.is_cloud and self._cloud_token is None:
            self._cloud_token = self._authenticate_cloud(self._session)
            self._session.headers["Authorization"] = f"Bearer {self._cloud_token}"

        return self._session

    def _authenticate_cloud(self, session: requests.Session) -> str:
        """Exchange the Cloud API key for a bearer token."""
        credentials = self.credentials
        assert isinstance(credentials, CloudCredentials)
        logger.debug("Authenticating against Xray Cloud")
        response = self._send(
            session,
            "POST",
            self.ENDPOINTS["cloud_authenticate"],
            json={
                "client_id": credentials.client_id,
                "client_secret": credentials.client_secret,
            },
        )
        try:
            token = response.json()
        except ValueError as e:
            raise XrayClientError(f"Invalid Xray Cloud authentication response: {e}") from e
        if not isinstance(token, str) or not token:
            raise XrayClientError("Xray Cloud authentication returned no token")
        return token

    def _send(
        self,
        session: requests.Session,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> requests.Response:
        """
        Send a request and map transport and HTTP errors to XrayClientError.

        Raises:
            XrayClientError: If the request fails.
        """
        url = f"{self._base_url}{endpoint}"
        logger.debug(f"Xray API {method} {url}")

        try:
            response = session.request(
                method=method,
                url=url,
                timeout=self.timeout_sec,
                **kwargs,
            )
            response.raise_for_status()
            return response
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else ""
            logger.error(f"Xray API HTTP error: {e} (status={status_code})")
            raise XrayClientError(
                f"Unexpected response status {status_code}: {body}",
                status_code=status_code,
            ) from e
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Xray API connection error: {e}")
            raise XrayClientError(f"Cannot connect to Xray: {e}") from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Xray API timeout: {e}")
            raise XrayClientError(
                f"Xray API request timed out after {self.timeout_sec}s"
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Xray API unexpected error: {e}")
            raise XrayClientError(f"Unexpected error: {e}") from e

    def _request(
        self,
        method: str,
        endpoint: str,
        **kwargs: Any,
    ) -> Dict[str, Any] | List[Any]:
        """
        Make an authenticated API request.

        Args:
            method: HTTP method (GET, POST, PUT).
            endpoint: API endpoint path.
            **kwargs: Additional arguments for requests (json, data, params).

        Returns:
            Parsed JSON response.

        Raises:
            XrayClientError: If the request fails.
        """
        response = self._send(self._get_session(), method, endpoint, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise XrayClientError(f"Invalid JSON in Xray response: {e}") from e

    # ------------------------------------------------------------------
    # Test Execution Operations
    # ------------------------------------------------------------------

    def import_execution(
        self,
        report: ConversionReport | Dict[str, Any],
        project_key: str,
    ) -> Dict[str, Any]:
        """
        Import test execution results to Xray via JSON format.

        A new test execution issue is created in the project unless the
        report names an existing one (``testExecutionKey``).

        Args:
            report: Conversion report or Xray-formatted results dictionary.
            project_key: Project for new test execution issues.

        Returns:
            API response with created/updated execution info.

        Raises:
            XrayClientError: If import fails.
        """
        payload = report.to_dict() if isinstance(report, ConversionReport) else report
        endpoint = self.ENDPOINTS[
            "cloud_import_execution" if self.is_cloud else "import_execution"
        ]
        logger.info(
            f"Importing {len(payload.get('tests', []))} test result(s) to Xray "
            f"(project={project_key})"
        )
        response = self._request(
            "POST", endpoint, json=payload, params={"projectKey": project_key}
        )
        result = response if isinstance(response, dict) else {"response": response}
        logger.info(f"Results imported: {execution_issue_key(result) or 'N/A'}")
        return result

    # ------------------------------------------------------------------
    # Dataset Operations
    # ------------------------------------------------------------------

    def download_dataset(self, test_issue_key: str) -> str:
        """
        Export the dataset of a data-driven test issue.

        Args:
            test_issue_key: The Jira test issue key (e.g., "DP-90").

        Returns:
            The dataset as CSV text.

        Raises:
            XrayClientError: If the export fails.
        """
        logger.info(f"Downloading dataset of {test_issue_key}")
        endpoint = self.ENDPOINTS[
            "cloud_dataset_export" if self.is_cloud else "dataset_export"
        ]
        response = self._send(
            self._get_session(),
            "GET",
            endpoint,
            params={"testIssueKey": test_issue_key},
        )
        return response.text

    def close(self) -> None:
        """Close the HTTP session."""
        if self._session is not None:
            self._session.close()
            self._session = None
            self._cloud_token = None
            logger.debug("Xray client session closed")

    def __enter__(self) -> "XrayClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


def execution_issue_key(response: Dict[str, Any]) -> Optional[str]:
    """
    Extract the test execution issue key from an import response.

    Xray Cloud answers ``{"key": ...}``, Xray Server/DC answers
    ``{"testExecIssue": {"key": ...}}``.
    """
    if isinstance(response.get("key"), str):
        return response["key"]
    issue = response.get("testExecIssue")
    if isinstance(issue, dict) and isinstance(issue.get("key"), str):
        return issue["key"]
    return None
