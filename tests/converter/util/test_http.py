from unittest import mock

import pytest
import requests
from requests_mock import Mocker

from palace.converter.exceptions import SourceUnavailable
from palace.converter.util.http import (
    HTTP,
    BadResponseException,
    RequestNetworkException,
    RequestTimedOut,
    get_series,
)


def test_get_series():
    assert get_series(201) == "2xx"
    assert get_series(399) == "3xx"
    assert get_series(404) == "4xx"
    assert get_series(500) == "5xx"


class TestHTTP:
    def test_get_with_timeout_success(self, requests_mock: Mocker):
        requests_mock.get("http://example.org/feed", content=b"<feed/>")

        with mock.patch("palace.converter.config.converter.__version__", "<VERSION>"):
            response = HTTP.get_with_timeout("http://example.org/feed")

        assert response.status_code == 200
        assert response.content == b"<feed/>"

        assert requests_mock.last_request is not None
        assert (
            requests_mock.last_request.headers["User-Agent"]
            == "palace-opds-converter/<VERSION>"
        )
        assert requests_mock.last_request.timeout == HTTP.DEFAULT_REQUEST_TIMEOUT

    def test_get_with_timeout_arguments(self, requests_mock: Mocker):
        requests_mock.get("http://example.org/feed", text="ok")

        with requests.Session() as session:
            HTTP.get_with_timeout(
                "http://example.org/feed",
                timeout=5,
                headers={"Accept": "application/atom+xml"},
                user_agent="test-agent/1.0",
                session=session,
            )

        request = requests_mock.last_request
        assert request is not None
        assert request.timeout == 5
        assert request.headers["User-Agent"] == "test-agent/1.0"
        assert request.headers["Accept"] == "application/atom+xml"

    @pytest.mark.parametrize("status_code", [400, 404, 500, 503])
    def test_bad_status_code(self, requests_mock: Mocker, status_code: int):
        requests_mock.get(
            "http://example.org/feed", status_code=status_code, text="Oops"
        )

        with pytest.raises(BadResponseException) as excinfo:
            HTTP.get_with_timeout("http://example.org/feed")

        exception = excinfo.value
        assert isinstance(exception, SourceUnavailable)
        assert exception.status_code == status_code
        assert exception.source == "http://example.org/feed"
        assert exception.service == "example.org"
        assert f"Got status code {status_code} from external server" in str(exception)
        assert exception.debug_message is not None
        assert "Content: Oops" in exception.debug_message

    def test_redirect_is_followed(self, requests_mock: Mocker):
        requests_mock.get(
            "http://example.org/old",
            status_code=301,
            headers={"Location": "http://example.org/new"},
        )
        requests_mock.get("http://example.org/new", text="moved")

        response = HTTP.get_with_timeout("http://example.org/old")
        assert response.text == "moved"

    def test_timeout(self, requests_mock: Mocker):
        requests_mock.get("http://example.org/feed", exc=requests.exceptions.Timeout)

        with pytest.raises(RequestTimedOut) as excinfo:
            HTTP.get_with_timeout("http://example.org/feed")
        assert "Request timed out" in str(excinfo.value)

    def test_network_error(self, requests_mock: Mocker):
        requests_mock.get(
            "http://example.org/feed", exc=requests.exceptions.ConnectionError
        )

        with pytest.raises(RequestNetworkException) as excinfo:
            HTTP.get_with_timeout("http://example.org/feed")
        assert not isinstance(excinfo.value, RequestTimedOut)
        assert "Network error" in str(excinfo.value)
