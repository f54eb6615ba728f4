import pytest
import requests

from agv_rebrand.api.routes import agv as agv_routes
from agv_rebrand.errors import UpstreamError
from agv_rebrand.upstream import agv_client
from agv_rebrand.upstream.agv_client import AgvClient

API_URL = "http://agv.test/agv"
FILE_URL = "http://files.test/agv_10001088.png"


class FakeResponse:
    def __init__(self, *, status_code=200, json_body=None, content=b"", headers=None):
        self.status_code = status_code
        self._json = json_body
        self.content = content
        self.headers = headers or {}

    def json(self):
        if self._json is None:
            raise ValueError("not json")
        return self._json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def get(self, url, timeout=None, params=None):
        self.calls.append((url, params, timeout))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


def _client(responses, timeout=20.0):
    session = FakeSession(responses)
    return AgvClient("http://agv.test/", "/agv", timeout_seconds=timeout, session=session), session


def test_json_with_file_url_is_downloaded():
    client, session = _client(
        {
            API_URL: FakeResponse(
                json_body={"urls": {"FILE": FILE_URL}},
                headers={"content-type": "application/json"},
            ),
            FILE_URL: FakeResponse(content=b"PNGDATA", headers={"content-type": "image/png"}),
        }
    )

    assert client.fetch_source_image("10001088") == b"PNGDATA"
    assert session.calls == [
        (API_URL, {"dni": "10001088"}, 20.0),
        (FILE_URL, None, 20.0),
    ]


def test_direct_image_response_is_returned():
    client, session = _client(
        {API_URL: FakeResponse(content=b"\xff\xd8jpeg", headers={"content-type": "image/jpeg"})}
    )

    assert client.fetch_source_image("10001088") == b"\xff\xd8jpeg"
    assert len(session.calls) == 1


def test_json_without_file_url_is_a_contract_violation():
    client, _ = _client(
        {API_URL: FakeResponse(json_body={"dni": "1234"}, headers={"content-type": "application/json"})}
    )

    with pytest.raises(UpstreamError, match="urls.FILE"):
        client.fetch_source_image("10001088")


def test_network_failure_is_wrapped():
    client, _ = _client({API_URL: requests.ConnectionError("connection refused")})

    with pytest.raises(UpstreamError, match="connection refused"):
        client.fetch_source_image("10001088")


def test_timeout_is_wrapped_without_retry():
    client, session = _client({API_URL: requests.Timeout("read timed out")}, timeout=1.5)

    with pytest.raises(UpstreamError, match="timed out"):
        client.fetch_source_image("10001088")
    assert session.calls == [(API_URL, {"dni": "10001088"}, 1.5)]


def test_error_status_is_wrapped():
    client, _ = _client({API_URL: FakeResponse(status_code=502)})

    with pytest.raises(UpstreamError, match="502"):
        client.fetch_source_image("10001088")


def test_failed_file_download_is_wrapped():
    client, _ = _client(
        {
            API_URL: FakeResponse(json_body={"urls": {"FILE": FILE_URL}}),
            FILE_URL: FakeResponse(status_code=404),
        }
    )

    with pytest.raises(UpstreamError, match="404"):
        client.fetch_source_image("10001088")


class ClosingSession(FakeSession):
    def __init__(self, responses=None):
        super().__init__(responses or {})
        self.closed = False

    def close(self):
        self.closed = True


def test_injected_session_is_left_open():
    session = ClosingSession()

    with AgvClient("http://agv.test", "/agv", session=session):
        pass

    assert session.closed is False


def test_request_scoped_client_closes_its_session(monkeypatch):
    created = []

    def make_session():
        session = ClosingSession()
        created.append(session)
        return session

    monkeypatch.setattr(agv_client.requests, "Session", make_session)

    dependency = agv_routes.get_fetcher()
    client = next(dependency)
    assert isinstance(client, AgvClient)
    assert created[0].closed is False

    dependency.close()

    assert created[0].closed is True
