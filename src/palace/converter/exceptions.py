from __future__ import annotations

from collections.abc import Sequence
from typing import Any
from urllib.parse import urlparse


class BaseConverterException(Exception):
    """Base class for all Exceptions raised by the OPDS converter."""

    def __init__(self, message: str | None = None):
        """Initializes a new instance of BaseConverterException class

        :param message: String containing description of the exception that occurred
        """
        super().__init__(message)
        self.message = message

    def __getstate__(self) -> dict[str, Any]:
        return {"dict": self.__dict__, "args": self.args}

    def __setstate__(self, state: dict[str, Any] | None) -> None:
        # state is always a dict from __getstate__, but the signature must
        # accept None to match BaseException.__setstate__
        assert state is not None
        self.__dict__.update(state["dict"])
        self.args = state["args"]

    def __reduce__(self) -> tuple[Any, ...]:
        state = self.__getstate__()
        return self.__class__.__new__, (self.__class__,), state


class ConverterValueError(BaseConverterException, ValueError): ...


class CannotLoadConfiguration(BaseConverterException):
    """The converter settings could not be loaded from the environment."""


class SourceUnavailable(BaseConverterException):
    """The OPDS 1 feed could not be fetched or parsed.

    The conversion is aborted when this is raised, no partial OPDS 2
    feed is ever returned.
    """

    def __init__(
        self, source: str, message: str, debug_message: str | None = None
    ) -> None:
        """
        :param source: The URL or file path we tried to read the feed from.
        :param message: The error message.
        :param debug_message: An extra explanation of the problem, for example
            the body of a failed HTTP response.
        """
        self.source = source
        if any(source.startswith(x) for x in ("http:", "https:")):
            self.service = urlparse(source).netloc
        else:
            self.service = source
        self.debug_message = debug_message
        super().__init__(message)

    def __str__(self) -> str:
        message = f"Unable to read OPDS 1 feed from {self.source}: {self.message}"
        if self.debug_message:
            message += "\n\n" + self.debug_message
        return message


class MalformedJSON(ConverterValueError):
    """The OPDS 2 document is not well-formed JSON.

    This is raised before any field level decoding is attempted.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class DecodeShapeMismatch(ConverterValueError):
    """A JSON value does not have any of the shapes accepted for its field.

    `errors` holds one (path, message) pair per offending value, where path is
    the dotted location of the value in the document, for example
    `publications.0.links.1.rel`.
    """

    def __init__(self, errors: Sequence[tuple[str, str]]) -> None:
        self.errors = list(errors)
        super().__init__(self._format(self.errors))

    @property
    def path(self) -> str:
        """The location of the first offending value."""
        return self.errors[0][0] if self.errors else ""

    @staticmethod
    def _format(errors: Sequence[tuple[str, str]]) -> str:
        count = len(errors)
        message = f"{count} invalid value{'' if count == 1 else 's'} in OPDS 2 document:"
        for path, error in errors:
            message += f"\n  {path or '<root>'}: {error}"
        return message
