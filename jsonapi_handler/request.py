"""
Request value object consumed by the handlers

The http request is parsed into an immutable Request:
- method: HttpMethod
- include: relationship names requested with the include= query arg
- id: object id from the url path (if any)
- filters: filter[<attr>]= query args
- page: page[offset] & page[limit] query args
- payload: json body

Only method and include are interpreted by the handler, the rest is passed
as-is to the handler operations.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
from .config import get_config, get_int_config
from .errors import ValidationError


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    DELETE = "DELETE"

    @classmethod
    def parse(cls, method: Union[str, "HttpMethod"]) -> "HttpMethod":
        """
        :param method: http method, case insensitive
        :return: HttpMethod
        :raises ValueError: unknown method
        """
        if isinstance(method, cls):
            return method
        return cls(str(method).upper())

    @property
    def handler_name(self) -> str:
        """
        :return: name of the handler attribute implementing this method, e.g. "handle_get"
        """
        return "handle_" + self.value.lower()

    @property
    def operation_id(self) -> str:
        """
        :return: canonical operation identifier, e.g. "GET" => "handleGet"
        """
        return "handle" + self.value.lower().capitalize()


def parse_include(included_csv: Optional[str]) -> Tuple[str, ...]:
    """
    :param included_csv: include= query argument, e.g. "author,comments"
    :return: relationship names
    """
    if not included_csv:
        return ()
    return tuple(inc.strip() for inc in included_csv.split(",") if inc.strip())


def parse_filters(args: Any) -> Dict[str, str]:
    """
    https://jsonapi.org/recommendations/#filtering
    :param args: request query args
    :return: dict of filter[<attr_name>] values
    """
    filters = {}
    for arg, val in args.items():
        filter_attr = re.search(r"filter\[(\w+)\]", arg)
        if filter_attr:
            filters[filter_attr.group(1)] = val
    return filters


def parse_page(args: Any) -> Dict[str, int]:
    """
    Json:API supports multiple paging strategies.
    (https://jsonapi.org/format/#fetching-pagination)
    If the client uses page[number] & page[size] instead of page[offset] & page[limit],
    we transform the number parameter to an offset

    :param args: request query args (werkzeug MultiDict)
    :return: dict with the page offset and limit
    """
    try:
        page_offset = args.get("page[offset]", 0, type=int)
        page_limit = args.get("page[limit]", get_int_config("DEFAULT_PAGE_LIMIT"), type=int)
        if "page[number]" in args and "page[size]" in args:
            page_limit = args.get("page[size]", type=int)
            page_number = args.get("page[number]", type=int) - 1
            page_offset = page_number * page_limit
        page_limit = min(max(page_limit, 1), get_int_config("MAX_PAGE_LIMIT"))
        page_offset = max(page_offset, 0)
    except TypeError:
        # type=int returned None for a page[size] or page[number] that isn't a number
        raise ValidationError("Pagination Value Error")

    return {"offset": page_offset, "limit": page_limit}


@dataclass(frozen=True)
class Request:
    """
    Parsed, immutable api request
    duplicate include names are dropped, the first occurrence determines the order
    """

    method: HttpMethod
    include: Tuple[str, ...] = ()
    id: Any = None
    filters: Dict[str, Any] = field(default_factory=dict)
    page: Dict[str, int] = field(default_factory=dict)
    payload: Any = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod.parse(self.method))
        object.__setattr__(self, "include", tuple(dict.fromkeys(self.include)))

    @classmethod
    def from_flask(cls, flask_request: Any, object_id: Any = None) -> "Request":
        """
        Create a Request from the flask request

        :param flask_request: flask.request
        :param object_id: object id taken from the url path
        :return: Request
        """
        args = flask_request.args
        included_csv = args.get("include", get_config("DEFAULT_INCLUDED"))
        payload = None
        if flask_request.method in (HttpMethod.POST, HttpMethod.PATCH, HttpMethod.PUT):
            payload = flask_request.get_json(silent=True)
        return cls(
            method=flask_request.method,
            include=parse_include(included_csv),
            id=object_id,
            filters=parse_filters(args),
            page=parse_page(args),
            payload=payload,
        )
