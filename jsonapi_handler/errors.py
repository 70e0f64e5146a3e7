# Errors
#
# Two kinds of errors are produced while fulfilling a request:
# - fatal errors: JsonapiError exceptions, they abort the request and carry an http status code
# - non fatal errors: Error values, collected in Response.errors next to a usable result
#
# Both carry a numeric code composed from the handler ERROR_SCOPE and an ErrorKind bit, e.g.
# {
#      "title": "Unknown ID",
#      "detail": "Unknown ID",
#      "code": "17"
# }
#
# The application loglevel determines the level of detail shown to the user for unexpected errors.
# If set to debug, too much sensitive info might be shown !
#
from dataclasses import dataclass
from enum import IntEnum
from http import HTTPStatus
from typing import Any, Dict, Optional, Union
from sqlalchemy.exc import DontWrapMixin
from .config import is_debug

HIDDEN_LOG = "(debug logging disabled)"


class ErrorKind(IntEnum):
    """
    Default error bits, these are combined with the handler ERROR_SCOPE
    """

    UNKNOWN_ID = 1
    UNKNOWN_LINKED_RESOURCES = 2
    NO_ID = 4
    INVALID_ATTRS = 8


# bits 16 .. 512 are reserved for handler specific error kinds
RESERVED_ERROR_BITS = tuple(1 << bit for bit in range(4, 10))


@dataclass(frozen=True)
class ErrorCode:
    """
    Error code scoped to a handler: the numeric (wire) value is `scope | kind`
    """

    scope: int
    kind: int

    @property
    def value(self) -> int:
        return combine(self.scope, self.kind)

    def __int__(self) -> int:
        return self.value

    def __str__(self) -> str:
        return str(self.value)


def combine(scope: int, kind: int) -> int:
    """
    :param scope: handler error scope
    :param kind: error bit
    :return: numeric error code
    """
    return int(scope) | int(kind)


@dataclass(frozen=True)
class Error:
    """
    Non fatal error, returned alongside the result
    """

    code: ErrorCode
    title: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"code": int(self.code), "title": self.title, "description": self.description}


class JsonapiError(Exception, DontWrapMixin):
    """
    Base class for the fatal errors, these abort the request

    DontWrapMixin: sqlalchemy won't wrap the exception when it's raised from within a flush or load event
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = "Error"

    def __init__(
        self, message: str = "", status_code: Optional[int] = None, api_code: Optional[Union[ErrorCode, int]] = None, detail: Optional[str] = None
    ) -> None:
        """
        :param message: title returned in the (json) body
        :param status_code: HTTP Status code
        :param api_code: API code (ErrorCode or int)
        :param detail: human readable detail, defaults to the message
        """
        if message:
            self.title = message
        if status_code is not None:
            self.status_code = status_code
        self.api_code = api_code if api_code is not None else self.status_code
        self.detail = detail if detail is not None else self.title
        super().__init__(self.title)

    @property
    def message(self) -> str:
        return self.title

    @property
    def code(self) -> int:
        """
        :return: numeric api code
        """
        return int(self.api_code)

    def to_dict(self) -> Dict[str, str]:
        return dict(title=self.title, detail=self.detail, code=str(self.code))


class NotFoundError(JsonapiError):
    """
    This exception is raised when an item was not found
    """

    status_code = HTTPStatus.NOT_FOUND.value
    title = "Not Found"


class ValidationError(JsonapiError):
    """
    This exception is raised when invalid input has been detected (client side input)
    Always send back the message to the client in the response
    """

    status_code = HTTPStatus.BAD_REQUEST.value
    title = "Validation Error"


class MethodNotAllowedError(JsonapiError):
    """
    This exception is raised when the handler has no operation for the http method
    """

    status_code = HTTPStatus.METHOD_NOT_ALLOWED.value
    title = "Method Not Allowed"


class GenericError(JsonapiError):
    """
    This exception is raised when an error has been detected
    The detail is only shown in debug mode
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value  # 500
    title = "Generic Error"

    def __init__(self, message: str = "", status_code: Optional[int] = None, api_code: Optional[Union[ErrorCode, int]] = None) -> None:
        detail = str(message) if is_debug() else HIDDEN_LOG
        super().__init__("Generic Error", status_code=status_code, api_code=api_code, detail=detail)
