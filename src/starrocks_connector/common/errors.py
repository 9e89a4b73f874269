from __future__ import annotations

from typing import Any

CONNECT_FAILED_MESSAGE = "Connect to {uri} failed, status code is {status}."
ILLEGAL_ARGUMENT_MESSAGE = "argument '{field}' is illegal, value is '{value}'."
PARSE_NUMBER_FAILED_MESSAGE = "Parse '{field}' to number failed. Original string is '{value}'."
SHOULD_NOT_HAPPEN_MESSAGE = "Should not come here."


class StarrocksException(Exception):
    """Base error for everything raised while talking to StarRocks."""


class ConnectedFailedException(StarrocksException):
    def __init__(
        self, uri: str, status_code: int | None = None, cause: BaseException | None = None
    ):
        self.uri = uri
        self.status_code = status_code
        self.cause = cause
        status = "none" if status_code is None else status_code
        msg = CONNECT_FAILED_MESSAGE.format(uri=uri, status=status)
        if cause is not None:
            msg += f" Last error: {cause!s}"
        super().__init__(msg)


class IllegalArgumentException(StarrocksException, ValueError):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(ILLEGAL_ARGUMENT_MESSAGE.format(field=field, value=value))


class DecodeFailedException(StarrocksException):
    """The response body is not JSON, or does not have the expected shape."""

    def __init__(self, message: str, response: str):
        self.response = response
        super().__init__(f"{message} res: {response}")


class RemoteStatusNotOkException(StarrocksException):
    def __init__(self, status: int, source: str = "FE"):
        self.status = status
        super().__init__(f"StarRocks {source}'s response is not OK, status is {status}")


class ShouldNeverHappenException(StarrocksException):
    def __init__(self) -> None:
        super().__init__(SHOULD_NOT_HAPPEN_MESSAGE)


class ParseNumberFailedException(StarrocksException, ValueError):
    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(PARSE_NUMBER_FAILED_MESSAGE.format(field=field, value=value))
