"""
Unit Tests for the Jira Xray Client Module.

Covers:
- resolve_credentials: precedence of the supported combinations.
- XrayClient: configuration, authentication, endpoints and error mapping
  (HTTP session mocked).
- execution_issue_key: server and cloud response shapes.
"""

from __future__ import annotations

from typing import Any, Optional
from unittest.mock import MagicMock, patch

import pytest
import requests

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
from bruno_xray.models.xray import ConversionReport, TargetTest


def _response(json_data: Any = None, text: str = "", status_code: int = 200) -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = json_data
    response.text = text
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Error", response=response
        )
    return response


@pytest.fixture
def mock_session():
    """Patch requests.Session inside the client module."""
    with patch("bruno_xray.jira_client.xray_client.requests.Session") as session_cls:
        session = MagicMock()
        session.headers = {}
        session.auth = None
        session_cls.return_value = session
        yield session


def _server_client(base_url: str = "https://jira.example.com") -> XrayClient:
    return XrayClient(credentials=ServerTokenCredentials(token="t0k3n"), base_url=base_url)


# ---------------------------------------------------------------------------
# Credentials Tests
# ---------------------------------------------------------------------------


class TestResolveCredentials:
    """Tests for resolve_credentials()."""

    def test_cloud(self) -> None:
        credentials = resolve_credentials(xray_client_id="id", xray_client_secret="secret")
        assert credentials == CloudCredentials(client_id="id", client_secret="secret")

    def test_cloud_wins_over_token(self) -> None:
        credentials = resolve_credentials(
            jira_token="token", xray_client_id="id", xray_client_secret="secret"
        )
        assert isinstance(credentials, CloudCredentials)

    def test_token(self) -> None:
        assert resolve_credentials(jira_token="token") == ServerTokenCredentials(token="token")

    def test_token_wins_over_basic(self) -> None:
        credentials = resolve_credentials(
            jira_token="token", jira_username="user", jira_password="pw"
        )
        assert isinstance(credentials, ServerTokenCredentials)

    def test_basic(self) -> None:
        credentials = resolve_credentials(jira_username="user", jira_password="pw")
        assert credentials == ServerBasicCredentials(username="user", password="pw")

    @pytest.mark.parametrize(
        "kwargs",
        [
            {},
            {"xray_client_id": "id"},
            {"jira_username": "user"},
            {"jira_password": "pw"},
        ],
    )
    def test_incomplete(self, kwargs: dict) -> None:
        with pytest.raises(CredentialsError, match="must be provided"):
            resolve_credentials(**kwargs)


# ---------------------------------------------------------------------------
# XrayClient Tests
# ---------------------------------------------------------------------------


class TestXrayClient:
    """Tests for the XrayClient class."""

    def test_requires_credentials(self) -> None:
        with pytest.raises(XrayClientError, match="credentials are required"):
            XrayClient(base_url="https://jira.example.com")

    def test_server_requires_url(self) -> None:
        with pytest.raises(XrayClientError, match="Jira URL is required"):
            XrayClient(credentials=ServerTokenCredentials(token="t"))

    def test_base_url_trailing_slash_stripped(self) -> None:
        assert _server_client("https://jira.example.com/").base_url == "https://jira.example.com"

    def test_cloud_uses_cloud_url(self) -> None:
        client = XrayClient(
            credentials=CloudCredentials(client_id="id", client_secret="secret"),
            base_url="https://jira.example.com",
        )
        assert client.is_cloud
        assert client.base_url == XrayClient.CLOUD_URL

    def test_session_settings(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response(text="a\n")
        client = XrayClient(
            credentials=ServerBasicCredentials(username="u", password="p"),
            base_url="https://jira.example.com",
            timeout_sec=5,
            verify_ssl=False,
        )
        client.download_dataset("DP-90")
        assert mock_session.verify is False
        assert mock_session.request.call_args.kwargs["timeout"] == 5

    def test_close_without_session(self) -> None:
        _server_client().close()

    def test_token_header(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response({"testExecIssue": {"key": "DP-1"}})
        _server_client().import_execution({"tests": []}, "DP")
        assert mock_session.headers["Authorization"] == "Bearer t0k3n"

    def test_basic_auth(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response(text="a,b\n1,2\n")
        client = XrayClient(
            credentials=ServerBasicCredentials(username="user", password="pw"),
            base_url="https://jira.example.com",
        )
        client.download_dataset("DP-90")
        assert mock_session.auth == ("user", "pw")
        assert "Authorization" not in mock_session.headers

    def test_import_execution_server(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response({"testExecIssue": {"key": "DP-123"}})
        report = ConversionReport(
            info={"summary": "s"},
            tests=[TargetTest(test_key="DP-90", status="PASS")],
        )
        response = _server_client().import_execution(report, "DP")

        assert response == {"testExecIssue": {"key": "DP-123"}}
        kwargs = mock_session.request.call_args.kwargs
        assert kwargs["method"] == "POST"
        assert kwargs["url"] == "https://jira.example.com/rest/raven/1.0/import/execution"
        assert kwargs["params"] == {"projectKey": "DP"}
        assert kwargs["json"] == report.to_dict()
        assert kwargs["timeout"] == 30

    def test_download_dataset_server(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response(text="user,age\nalice,3\n")
        assert _server_client().download_dataset("DP-90") == "user,age\nalice,3\n"
        kwargs = mock_session.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"] == "https://jira.example.com/rest/raven/2.0/api/dataset/export"
        assert kwargs["params"] == {"testIssueKey": "DP-90"}

    def test_cloud_authenticates_once(self, mock_session: MagicMock) -> None:
        mock_session.request.side_effect = [
            _response("cloud-token"),
            _response({"key": "DP-7"}),
            _response(text="a\n1\n"),
        ]
        client = XrayClient(credentials=CloudCredentials(client_id="id", client_secret="secret"))

        assert client.import_execution({"tests": []}, "DP") == {"key": "DP-7"}
        client.download_dataset("DP-90")

        urls = [c.kwargs["url"] for c in mock_session.request.call_args_list]
        assert urls == [
            "https://xray.cloud.getxray.app/api/v2/authenticate",
            "https://xray.cloud.getxray.app/api/v2/import/execution",
            "https://xray.cloud.getxray.app/api/v2/dataset/export",
        ]
        assert mock_session.request.call_args_list[0].kwargs["json"] == {
            "client_id": "id", "client_secret": "secret",
        }
        assert mock_session.headers["Authorization"] == "Bearer cloud-token"

    def test_cloud_authentication_without_token(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response("")
        client = XrayClient(credentials=CloudCredentials(client_id="id", client_secret="secret"))
        with pytest.raises(XrayClientError, match="no token"):
            client.download_dataset("DP-90")

    def test_http_error(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response(
            text='{"error": "Test with key DP-90 not found"}', status_code=400
        )
        with pytest.raises(XrayClientError) as exc_info:
            _server_client().import_execution({"tests": []}, "DP")
        assert exc_info.value.status_code == 400
        assert "Unexpected response status 400" in str(exc_info.value)
        assert "DP-90 not found" in str(exc_info.value)

    def test_connection_error(self, mock_session: MagicMock) -> None:
        mock_session.request.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(XrayClientError, match="Cannot connect"):
            _server_client().download_dataset("DP-90")

    def test_timeout(self, mock_session: MagicMock) -> None:
        mock_session.request.side_effect = requests.exceptions.Timeout()
        with pytest.raises(XrayClientError, match="timed out after 30s"):
            _server_client().download_dataset("DP-90")

    def test_invalid_json(self, mock_session: MagicMock) -> None:
        response = _response()
        response.json.side_effect = ValueError("Expecting value")
        mock_session.request.return_value = response
        with pytest.raises(XrayClientError, match="Invalid JSON"):
            _server_client().import_execution({"tests": []}, "DP")

    def test_context_manager_closes_session(self, mock_session: MagicMock) -> None:
        mock_session.request.return_value = _response(text="a\n")
        with _server_client() as client:
            client.download_dataset("DP-90")
        mock_session.close.assert_called_once()


# ---------------------------------------------------------------------------
# Response Helper Tests
# ---------------------------------------------------------------------------


class TestExecutionIssueKey:
    """Tests for execution_issue_key()."""

    @pytest.mark.parametrize(
        "response, expected",
        [
            ({"id": "1", "key": "DP-1", "self": "https://..."}, "DP-1"),
            ({"testExecIssue": {"id": "1", "key": "DP-2"}}, "DP-2"),
            ({"testIssues": {"success": []}}, None),
        ],
    )
    def test_shapes(self, response: dict, expected: Optional[str]) -> None:
        assert execution_issue_key(response) == expected
