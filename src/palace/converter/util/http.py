from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

import requests
from requests import Response, Session as RequestsSession

from palace.converter.config import get_user_agent
from palace.converter.exceptions import SourceUnavailable
from palace.converter.util.log import LoggerMixin, elapsed_time_logging

ResponseCodesStringLiterals = Literal["2xx", "3xx", "4xx", "5xx"]


def get_series(status_code: int) -> ResponseCodesStringLiterals:
    """Return the HTTP series for the given status code."""
    return f"{int(status_code) // 100}xx"  # type: ignore[return-value]


class RequestNetworkException(SourceUnavailable):
    """A network error (connection refused, DNS failure...) while
    fetching the document.
    """


class RequestTimedOut(RequestNetworkException):
    """The request for the document timed out."""


class BadResponseException(SourceUnavailable):
    """The request seemingly went okay, but we got a bad response."""

    BAD_STATUS_CODE_MESSAGE = (
        "Got status code %s from external server, cannot continue."
    )

    def __init__(
        self,
        url: str,
        message: str,
        response: Response,
        debug_message: str | None = None,
    ) -> None:
        if debug_message is None:
            debug_message = (
                f"Status code: {response.status_code}\nContent: {response.text}"
            )
        super().__init__(url, message, debug_message)
        self.status_code = response.status_code

    @classmethod
    def bad_status_code(cls, url: str, response: Response) -> BadResponseException:
        """The response is bad because the status code is wrong."""
        message = cls.BAD_STATUS_CODE_MESSAGE % response.status_code
        return cls(url, message, response)


class HTTP(LoggerMixin):
    """A helper for the `requests` module."""

    DEFAULT_REQUEST_TIMEOUT: float = 20

    @classmethod
    def get_with_timeout(
        cls,
        url: str,
        *,
        timeout: float | None = None,
        headers: Mapping[str, str] | None = None,
        user_agent: str | None = None,
        session: RequestsSession | None = None,
    ) -> Response:
        """Make a GET request, turning any failure into a SourceUnavailable exception.

        Responses in the 4xx and 5xx series are treated as failures. There are
        no retries, the caller decides what to do with a failure.

        :param timeout: Seconds to wait for the server, defaults to DEFAULT_REQUEST_TIMEOUT.
        :param headers: Extra headers to send with the request.
        :param user_agent: Overrides the default User-Agent header.
        :param session: Make the request with this session rather than a new one.
        """
        request_headers = {"User-Agent": user_agent or get_user_agent()}
        if headers is not None:
            request_headers.update(headers)

        if timeout is None:
            timeout = cls.DEFAULT_REQUEST_TIMEOUT

        try:
            with elapsed_time_logging(
                log_method=cls.logger().info,
                message_prefix=f"GET {url}",
                skip_start=True,
            ):
                if session is None:
                    with RequestsSession() as new_session:
                        response = new_session.get(
                            url, headers=request_headers, timeout=timeout
                        )
                else:
                    response = session.get(url, headers=request_headers, timeout=timeout)
        except requests.exceptions.Timeout as e:
            # Wrap the requests-specific Timeout exception
            # in a generic RequestTimedOut exception.
            raise RequestTimedOut(url, f"Request timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            # Wrap all other requests-specific exceptions in
            # a generic RequestNetworkException.
            raise RequestNetworkException(url, f"Network error: {e}") from e

        if get_series(response.status_code) in ("4xx", "5xx"):
            raise BadResponseException.bad_status_code(url, response)
        return response
