import base64
from unittest.mock import MagicMock, patch

import httpx
import pytest

from offer_radar.stores.base import StoredContent
from offer_radar.stores.github import (
    GitHubClient,
    GitHubContentStore,
    GitHubError,
    GitHubIssueSource,
)


def ok_response(payload, links=None):
    response = MagicMock()
    response.json.return_value = payload
    response.links = links or {}
    return response


def error_response(status_code, text="error"):
    response = MagicMock()
    response.status_code = status_code
    response.text = text
    response.raise_for_status.side_effect = httpx.HTTPStatusError(
        text, request=MagicMock(), response=response
    )
    return response


@pytest.fixture
def client(settings):
    github = GitHubClient(settings)
    yield github
    github.close()


class TestGitHubClient:
    def test_auth_header(self, client):
        assert client.client.headers["Authorization"] == "Bearer ghp_test"

    def test_list_issues_follows_pagination(self, client):
        next_url = "https://api.github.com/repos/owner/repo/issues?page=2"
        with patch.object(client.client, "request") as mock_request:
            mock_request.side_effect = [
                ok_response([{"body": "a"}], links={"next": {"url": next_url}}),
                ok_response([{"body": "b"}]),
            ]
            issues = client.list_issues(labels="device-token", state="open")

        assert [issue["body"] for issue in issues] == ["a", "b"]
        first, second = mock_request.call_args_list
        assert first.args == ("GET", "/repos/owner/repo/issues")
        assert first.kwargs["params"]["labels"] == "device-token"
        assert first.kwargs["params"]["state"] == "open"
        assert second.args == ("GET", next_url)
        assert second.kwargs["params"] is None

    def test_get_content_not_found(self, client):
        with patch.object(client.client, "request", return_value=error_response(404)):
            assert client.get_content("last-offer.json") is None

    def test_get_content_server_error(self, client):
        with patch.object(client.client, "request", return_value=error_response(500)):
            with pytest.raises(GitHubError) as exc_info:
                client.get_content("last-offer.json")
        assert exc_info.value.status_code == 500

    def test_request_error(self, client):
        with patch.object(
            client.client, "request", side_effect=httpx.RequestError("Connection failed")
        ):
            with pytest.raises(GitHubError):
                client.list_issues(labels="device-token", state="open")

    def test_put_content_with_sha(self, client):
        with patch.object(client.client, "request", return_value=ok_response({})) as mock_request:
            client.put_content("last-offer.json", b'{"a": 1}', "msg", sha="abc")

        payload = mock_request.call_args.kwargs["json"]
        assert payload["sha"] == "abc"
        assert payload["message"] == "msg"
        assert base64.b64decode(payload["content"]) == b'{"a": 1}'

    def test_put_content_without_sha(self, client):
        with patch.object(client.client, "request", return_value=ok_response({})) as mock_request:
            client.put_content("last-offer.json", b"{}", "msg")

        assert "sha" not in mock_request.call_args.kwargs["json"]


class TestGitHubContentStore:
    def test_get_decodes_content(self):
        github = MagicMock()
        encoded = base64.b64encode('{"title": "Κρήτη"}'.encode("utf-8")).decode()
        github.get_content.return_value = {"content": encoded, "sha": "sha-1"}

        stored = GitHubContentStore(github).get("last-offer.json")
        assert stored == StoredContent(body='{"title": "Κρήτη"}', version="sha-1")

    def test_get_missing(self):
        github = MagicMock()
        github.get_content.return_value = None
        assert GitHubContentStore(github).get("last-offer.json") is None

    def test_put_passes_version(self):
        github = MagicMock()
        GitHubContentStore(github).put("p.json", "{}", "msg", version="sha-1")
        github.put_content.assert_called_once_with("p.json", b"{}", "msg", sha="sha-1")


def test_issue_source_skips_pull_requests():
    github = MagicMock()
    github.list_issues.return_value = [
        {"body": "tok1"},
        {"body": "not a token", "pull_request": {"url": "..."}},
        {"body": None},
    ]

    bodies = GitHubIssueSource(github).list_bodies("device-token", "open")
    assert bodies == ["tok1", ""]
    github.list_issues.assert_called_once_with(labels="device-token", state="open")
